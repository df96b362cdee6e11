"""Integration detection: manifest dependencies confirmed by source files."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import aiofiles

from quarry.catalog import DEPENDENCY_SERVICES, SOURCE_PATTERNS
from quarry.exceptions import ManifestError
from quarry.files import find_files
from quarry.models import IntegrationAnalysis, IntegrationType
from quarry.settings import get_settings

logger = logging.getLogger(__name__)

# Earlier sections win when a dependency is listed twice
_DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)


async def load_manifest_dependencies(root: Path) -> dict[str, str] | None:
    """Read dependency names and versions from the project manifest.

    Returns:
        Dependency name -> version spec, or None if there is no manifest.

    Raises:
        ManifestError: If the manifest exists but cannot be read or parsed.
    """
    manifest_path = root / get_settings().manifest_file
    if not manifest_path.is_file():
        return None

    try:
        async with aiofiles.open(manifest_path, encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Failed to read manifest {manifest_path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Malformed manifest {manifest_path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {manifest_path} is not a JSON object")

    dependencies: dict[str, str] = {}
    for section in _DEPENDENCY_SECTIONS:
        entries = data.get(section)
        if not isinstance(entries, dict):
            continue
        for name, version in entries.items():
            dependencies.setdefault(name, str(version))
    return dependencies


async def detect_integrations(
    root: Path, services: Mapping[str, str] = DEPENDENCY_SERVICES
) -> list[IntegrationAnalysis]:
    """Detect third-party services the project integrates with.

    A service is reported only when the manifest lists a dependency mapped to
    it and at least one source file path mentions the service by name.

    Args:
        root: Project root directory.
        services: Dependency name -> service name table.

    Returns:
        One integration per confirmed service, in table order.
    """
    try:
        dependencies = await load_manifest_dependencies(root)
    except ManifestError as e:
        logger.warning("%s", e)
        return []

    if dependencies is None:
        logger.debug("No %s in %s, skipping integrations", get_settings().manifest_file, root)
        return []

    wanted: dict[str, dict[str, str]] = {}
    for dependency, service in services.items():
        if dependency in dependencies:
            wanted.setdefault(service, {})[dependency] = dependencies[dependency]

    if not wanted:
        return []

    candidates = await find_files(root, SOURCE_PATTERNS)

    integrations = []
    for service, used in wanted.items():
        needle = service.lower()
        files = [path for path in candidates if needle in path.lower()]
        if not files:
            logger.debug("Skipping %s: listed in manifest but no files reference it", service)
            continue

        integrations.append(
            IntegrationAnalysis(
                service=service,
                type=IntegrationType.SDK,
                description=f"Integration with {service} using {', '.join(used)}",
                files=files,
                configuration={"dependencies": used},
            )
        )

    return integrations
