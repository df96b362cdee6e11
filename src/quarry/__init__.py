"""Static inventory of a project's data contracts, APIs, metrics and integrations."""

from quarry.analyzer import analyze_project
from quarry.models import (
    ApiAnalysis,
    ContractAnalysis,
    EndpointAnalysis,
    IntegrationAnalysis,
    MetricAnalysis,
    ProjectAnalysis,
)

__all__ = [
    "ApiAnalysis",
    "ContractAnalysis",
    "EndpointAnalysis",
    "IntegrationAnalysis",
    "MetricAnalysis",
    "ProjectAnalysis",
    "analyze_project",
]
