"""Project analysis entry point."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from quarry.extractors import (
    analyze_apis,
    analyze_contracts,
    analyze_metrics,
    detect_integrations,
)
from quarry.models import ProjectAnalysis

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _run_pass(
    name: str, extraction: Callable[[Path], Awaitable[list[T]]], root: Path
) -> list[T]:
    """Run one extraction pass. A pass that fails outright reports nothing."""
    logger.info("  [%s] starting...", name)
    try:
        result = await extraction(root)
    except Exception:
        logger.exception("  [%s] failed, reporting nothing", name)
        return []
    logger.info("  [%s] completed: %d found", name, len(result))
    return result


async def analyze_project(path: Path | str) -> ProjectAnalysis:
    """Inventory a project's contracts, APIs, metrics and integrations.

    Runs four independent passes concurrently:
    1. Data contracts (schema literals, type declarations)
    2. API surfaces (file-routed endpoints, external base URLs)
    3. Metrics (named KPIs/counters/gauges, tracking events)
    4. Integrations (manifest dependencies confirmed by source files)

    Never raises for missing or malformed input; absent artifacts yield
    empty lists.

    Args:
        path: Path to the project directory.

    Returns:
        Combined ProjectAnalysis result.
    """
    root = Path(path).resolve()
    logger.info("Starting analysis of %s", root)

    contracts, apis, metrics, integrations = await asyncio.gather(
        _run_pass("contracts", analyze_contracts, root),
        _run_pass("apis", analyze_apis, root),
        _run_pass("metrics", analyze_metrics, root),
        _run_pass("integrations", detect_integrations, root),
    )

    return ProjectAnalysis(
        contracts=contracts,
        apis=apis,
        metrics=metrics,
        integrations=integrations,
    )
