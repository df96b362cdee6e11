"""Metric extraction: named KPI/counter/gauge values and analytics tracking calls."""

import asyncio
import logging
import re
from pathlib import Path

from quarry.catalog import METRIC_PATTERNS, TRACKING_PATTERNS
from quarry.extractors.text import leading_doc_comment, mask_comments
from quarry.files import scan
from quarry.models import MetricAnalysis, MetricType

logger = logging.getLogger(__name__)

TRACKING_CATEGORY = "tracking"

# conversionRate = ..., errorCount: ..., but not errorCount === ...
_NAMED_VALUE = re.compile(
    r"(?:export\s+const\s+)?\b(\w+(?:Rate|Count|Time|Score|Percentage))\s*[:=](?!=)"
)
_METRIC_CALL = re.compile(r"(?:track|metric|kpi)\w*\(\s*(['\"`])([^'\"`]+)\1", re.IGNORECASE)

_TRACKING_CALLS = (
    re.compile(r"analytics\.track\(\s*(['\"`])(?P<event>[^'\"`]+)\1", re.IGNORECASE),
    re.compile(r"gtag\(\s*(['\"`])event\1\s*,\s*(['\"`])(?P<event>[^'\"`]+)\2", re.IGNORECASE),
    re.compile(r"posthog\.capture\(\s*(['\"`])(?P<event>[^'\"`]+)\1", re.IGNORECASE),
)

# First matching fragment wins; anything else is a gauge
_CLASSIFICATION = (
    ("Rate", MetricType.KPI),
    ("Percentage", MetricType.KPI),
    ("Count", MetricType.COUNTER),
    ("Time", MetricType.GAUGE),
)


def classify_metric(name: str) -> MetricType:
    """Classify a metric by its name alone."""
    for fragment, metric_type in _CLASSIFICATION:
        if fragment in name:
            return metric_type
    return MetricType.GAUGE


def extract_named_metrics(relative: str, content: str) -> list[MetricAnalysis]:
    """Find suffix-named values and metric/tracking calls in a metrics module."""
    found: list[tuple[int, MetricAnalysis]] = []
    code = mask_comments(content)

    for match in _NAMED_VALUE.finditer(code):
        name = match.group(1)
        found.append((
            match.start(),
            MetricAnalysis(
                name=name,
                type=classify_metric(name),
                description=leading_doc_comment(content, match.start()),
                file=relative,
            ),
        ))

    for match in _METRIC_CALL.finditer(code):
        name = match.group(2)
        found.append((
            match.start(),
            MetricAnalysis(name=name, type=classify_metric(name), file=relative),
        ))

    found.sort(key=lambda item: item[0])
    return [metric for _, metric in found]


def extract_tracking_events(relative: str, content: str) -> list[MetricAnalysis]:
    """Emit one event per analytics call site. Repeated event names are kept."""
    found: list[tuple[int, MetricAnalysis]] = []
    code = mask_comments(content)
    for pattern in _TRACKING_CALLS:
        for match in pattern.finditer(code):
            found.append((
                match.start(),
                MetricAnalysis(
                    name=match.group("event"),
                    type=MetricType.EVENT,
                    file=relative,
                    category=TRACKING_CATEGORY,
                ),
            ))

    found.sort(key=lambda item: item[0])
    return [event for _, event in found]


async def analyze_metrics(root: Path) -> list[MetricAnalysis]:
    """Collect metric definitions and tracking events.

    Args:
        root: Project root directory.

    Returns:
        Named metrics followed by tracking events.
    """
    named, events = await asyncio.gather(
        scan(root, METRIC_PATTERNS, extract_named_metrics),
        scan(root, TRACKING_PATTERNS, extract_tracking_events),
    )
    logger.debug("Found %d named metrics and %d tracking events", len(named), len(events))
    return named + events
