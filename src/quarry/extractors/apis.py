"""API extraction: file-routed internal endpoints and configured external base URLs."""

import asyncio
import logging
import re
from functools import partial
from pathlib import Path, PurePosixPath

from quarry.catalog import (
    HTTP_METHODS,
    INTERNAL_API_NAME,
    INTERNAL_API_ROOT,
    ROUTE_PATTERNS,
    SOURCE_PATTERNS,
    URL_SERVICES,
)
from quarry.extractors.text import leading_doc_comment, mask_comments
from quarry.files import scan
from quarry.models import ApiAnalysis, ApiType, EndpointAnalysis

logger = logging.getLogger(__name__)

_ROUTE_PREFIX = re.compile(r"^(?:src/)?app/api")
_ROUTE_MARKER = re.compile(r"/route\.(?:ts|js)$")
_ROUTE_GROUP = re.compile(r"/\([^/)]+\)(?=/|$)")
_DYNAMIC_SEGMENT = re.compile(r"\[{1,2}(?:\.\.\.)?([^\]]+?)\]{1,2}")

_HANDLERS = {
    method: re.compile(
        rf"export\s+(?:(?:async\s+)?function\s+{method}\s*[(<]|const\s+{method}\s*[:=])"
    )
    for method in HTTP_METHODS
}

_BASE_URL = re.compile(
    r"(?:baseURL|base_url|apiUrl|API_URL)(?:\s*:\s*[\w.]+)?\s*[:=]\s*(['\"`])([^'\"`]+)\1",
    re.IGNORECASE,
)

_AUTH_SCHEMES = (
    ("bearer", re.compile(r"['\"`]Bearer\b")),
    ("basic", re.compile(r"['\"`]Basic\b")),
    ("api_key", re.compile(r"x-api-key|(?<![A-Za-z])api[-_]?key", re.IGNORECASE)),
)


def route_path(relative: str) -> str:
    """Infer the URL path served by a route file.

    ``app/api/users/[id]/route.ts`` -> ``/users/:id``
    """
    path = _ROUTE_PREFIX.sub("", relative)
    path = _ROUTE_MARKER.sub("", path)
    path = _ROUTE_GROUP.sub("", path)
    path = _DYNAMIC_SEGMENT.sub(r":\1", path)
    return path or "/"


def extract_route_endpoints(relative: str, content: str) -> list[EndpointAnalysis]:
    """Emit one endpoint per exported HTTP verb handler in a route file."""
    path = route_path(relative)
    code = mask_comments(content)
    endpoints = []
    for method, pattern in _HANDLERS.items():
        match = pattern.search(code)
        if match:
            endpoints.append(
                EndpointAnalysis(
                    path=path,
                    method=method.lower(),
                    description=leading_doc_comment(content, match.start()),
                )
            )
    return endpoints


def service_name(
    url: str, relative: str, url_services: tuple[tuple[str, str], ...] = URL_SERVICES
) -> str:
    """Name the service behind a base URL, falling back to the file's name."""
    lowered = url.lower()
    for fragment, name in url_services:
        if fragment in lowered:
            return name

    stem = PurePosixPath(relative).stem
    return f"{stem[:1].upper()}{stem[1:]} API"


def detect_authentication(content: str) -> str | None:
    """Best-guess auth scheme used by a client module."""
    for scheme, pattern in _AUTH_SCHEMES:
        if pattern.search(content):
            return scheme
    return None


def extract_external_apis(
    relative: str,
    content: str,
    url_services: tuple[tuple[str, str], ...] = URL_SERVICES,
) -> list[ApiAnalysis]:
    """Emit one external API per base URL configured in a source file.

    Endpoints of external APIs are not enumerated.
    """
    code = mask_comments(content)
    matches = list(_BASE_URL.finditer(code))
    if not matches:
        return []

    authentication = detect_authentication(code)
    return [
        ApiAnalysis(
            name=service_name(match.group(2), relative, url_services),
            type=ApiType.EXTERNAL,
            base_url=match.group(2),
            file=relative,
            endpoints=[],
            authentication=authentication,
        )
        for match in matches
    ]


async def analyze_apis(
    root: Path, url_services: tuple[tuple[str, str], ...] = URL_SERVICES
) -> list[ApiAnalysis]:
    """Collect internal route endpoints and external API configurations.

    All internal endpoints are grouped under a single "Internal API" entry,
    present only when at least one route handler was found.

    Args:
        root: Project root directory.
        url_services: URL fragment -> API name table for external APIs.

    Returns:
        Internal API (if any) followed by external APIs.
    """
    endpoints, external = await asyncio.gather(
        scan(root, ROUTE_PATTERNS, extract_route_endpoints),
        scan(root, SOURCE_PATTERNS, partial(extract_external_apis, url_services=url_services)),
    )
    logger.debug(
        "Found %d internal endpoints and %d external APIs", len(endpoints), len(external)
    )

    apis = []
    if endpoints:
        apis.append(
            ApiAnalysis(
                name=INTERNAL_API_NAME,
                type=ApiType.INTERNAL,
                file=INTERNAL_API_ROOT,
                endpoints=endpoints,
            )
        )
    apis.extend(external)
    return apis
