"""Pydantic models for quarry."""

from quarry.models.analysis import (
    ApiAnalysis,
    ApiType,
    ContractAnalysis,
    EndpointAnalysis,
    IntegrationAnalysis,
    IntegrationType,
    MetricAnalysis,
    MetricType,
    ProjectAnalysis,
)

__all__ = [
    "ApiAnalysis",
    "ApiType",
    "ContractAnalysis",
    "EndpointAnalysis",
    "IntegrationAnalysis",
    "IntegrationType",
    "MetricAnalysis",
    "MetricType",
    "ProjectAnalysis",
]
