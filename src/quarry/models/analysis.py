"""Pydantic models for project analysis results.

Every record is frozen: a report is built once per ``analyze_project`` call
and handed to the caller as an immutable value.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ApiType(str, Enum):
    """Where an API surface lives relative to the project."""

    INTERNAL = "internal"
    EXTERNAL = "external"


class MetricType(str, Enum):
    """Classification of a telemetry definition."""

    KPI = "kpi"
    COUNTER = "counter"
    GAUGE = "gauge"
    EVENT = "event"


class IntegrationType(str, Enum):
    """How a third-party service is wired into the project."""

    SDK = "sdk"
    API = "api"
    WEBHOOK = "webhook"


class ContractAnalysis(BaseModel):
    """A data contract found in source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    file: str  # Relative to the scanned root
    schema_: Any = Field(alias="schema")
    description: str | None = None
    types: list[str] = []


class EndpointAnalysis(BaseModel):
    """One HTTP-method-bound route."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: str  # Lowercase verb: "get", "post"
    description: str | None = None


class ApiAnalysis(BaseModel):
    """An internally served or externally called API."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ApiType
    base_url: str | None = None
    file: str
    endpoints: list[EndpointAnalysis] = []
    authentication: str | None = None  # "bearer", "basic", "api_key"

    @model_validator(mode="after")
    def _check_internal_shape(self) -> "ApiAnalysis":
        if self.type == ApiType.INTERNAL:
            if not self.endpoints:
                raise ValueError("internal API requires at least one endpoint")
            if self.base_url is not None:
                raise ValueError("internal API cannot have a base_url")
        return self


class MetricAnalysis(BaseModel):
    """A KPI, counter, gauge or tracking event."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: MetricType
    description: str | None = None
    file: str
    category: str | None = None


class IntegrationAnalysis(BaseModel):
    """A third-party service confirmed by manifest and file evidence."""

    model_config = ConfigDict(frozen=True)

    service: str
    type: IntegrationType
    description: str | None = None
    files: list[str] = Field(min_length=1)
    configuration: dict[str, Any] | None = None


class ProjectAnalysis(BaseModel):
    """Combined result of all extraction passes."""

    model_config = ConfigDict(frozen=True)

    contracts: list[ContractAnalysis] = []
    apis: list[ApiAnalysis] = []
    metrics: list[MetricAnalysis] = []
    integrations: list[IntegrationAnalysis] = []
