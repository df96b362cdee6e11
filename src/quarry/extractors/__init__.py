"""Extraction passes over a project's source tree."""

from quarry.extractors.apis import analyze_apis
from quarry.extractors.contracts import analyze_contracts
from quarry.extractors.integrations import detect_integrations
from quarry.extractors.metrics import analyze_metrics

__all__ = ["analyze_apis", "analyze_contracts", "analyze_metrics", "detect_integrations"]
