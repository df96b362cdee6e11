"""Filesystem helpers for extraction passes: locate, read and scan files."""

import asyncio
import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TypeVar

import aiofiles

from quarry.exceptions import InvalidPatternError
from quarry.settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (relative path, file text) -> records found in that file
Extractor = Callable[[str, str], list[T]]

# Dependency, build and tooling directories never scanned
SKIP_DIRS = frozenset({
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    "bower_components",
    "vendor",
    ".venv",
    "venv",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    ".tox",
    "dist",
    "build",
    "out",
    ".next",
    ".nuxt",
    ".output",
    ".vercel",
    "coverage",
    ".turbo",
    ".cache",
})

_TEST_FILE = re.compile(r"(?:^|/)(?:__tests__|__mocks__)/|\.(?:test|spec)\.[^/]+$")


def is_test_file(relative: str) -> bool:
    """Return True for test, spec and mock files."""
    return _TEST_FILE.search(relative) is not None


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into a regex matched against root-relative paths.

    Supports ``*``, ``?``, ``[...]``, ``**/`` (zero or more directories) and
    nested ``{a,b}`` alternation.

    Raises:
        InvalidPatternError: If the pattern is empty or malformed.
    """
    if not pattern:
        raise InvalidPatternError(pattern, "empty pattern")

    parts: list[str] = []
    depth = 0
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if pattern.startswith("**/", i) and (i == 0 or pattern[i - 1] in "/{,"):
            parts.append("(?:[^/]+/)*")
            i += 3
            continue
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
            continue
        if ch == "*":
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        elif ch == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                raise InvalidPatternError(pattern, "unterminated character class")
            body = pattern[i + 1 : end]
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append("[" + body.replace("\\", "\\\\") + "]")
            i = end
        elif ch == "{":
            depth += 1
            parts.append("(?:")
        elif ch == "," and depth:
            parts.append("|")
        elif ch == "}":
            if not depth:
                raise InvalidPatternError(pattern, "unbalanced '}'")
            depth -= 1
            parts.append(")")
        else:
            parts.append(re.escape(ch))
        i += 1

    if depth:
        raise InvalidPatternError(pattern, "unbalanced '{'")

    try:
        return re.compile("".join(parts))
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternation into the plain patterns it stands for."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    options = []
    piece_start = start + 1
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "," and depth == 1:
            options.append(pattern[piece_start:i])
            piece_start = i + 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[piece_start:i])
                head, tail = pattern[:start], pattern[i + 1 :]
                return [
                    expanded
                    for option in options
                    for expanded in expand_braces(head + option + tail)
                ]
    return [pattern]


def literal_prefixes(pattern: str) -> set[str]:
    """Directories that every match of pattern lies under.

    ``{app,src/app}/api/**/route.ts`` -> ``{"app/api", "src/app/api"}``. An
    empty prefix means the pattern can match anywhere.
    """
    prefixes = set()
    for expanded in expand_braces(pattern):
        fixed = []
        for segment in expanded.split("/")[:-1]:
            if any(ch in segment for ch in "*?["):
                break
            fixed.append(segment)
        prefixes.add("/".join(fixed))
    return prefixes


def _may_contain_matches(relative_dir: str, prefixes: set[str]) -> bool:
    return any(
        not prefix
        or relative_dir == prefix
        or prefix.startswith(relative_dir + "/")
        or relative_dir.startswith(prefix + "/")
        for prefix in prefixes
    )


def _find_sync(
    root: Path, patterns: list[re.Pattern[str]], prefixes: set[str], max_files: int
) -> list[str]:
    """Synchronous find for thread pool.

    Only directories that can hold a match are entered, and max_files caps
    the number of matches, not the number of files visited.
    """
    if not root.is_dir():
        logger.debug("Not a directory, nothing to scan: %s", root)
        return []

    found: list[str] = []

    def walk(directory: Path) -> None:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            if len(found) >= max_files:
                return

            if entry.is_symlink() and entry.is_dir():
                continue
            relative = entry.relative_to(root).as_posix()
            if entry.is_dir():
                if entry.name not in SKIP_DIRS and _may_contain_matches(relative, prefixes):
                    walk(entry)
            elif (
                entry.is_file()
                and not is_test_file(relative)
                and any(p.fullmatch(relative) for p in patterns)
            ):
                found.append(relative)

    walk(root)
    if len(found) >= max_files:
        logger.warning("File limit of %d matches reached under %s", max_files, root)
    return sorted(found)


async def find_files(root: Path, patterns: Iterable[str]) -> list[str]:
    """Find files under root matching any glob pattern.

    Invalid patterns are logged and match nothing; the remaining patterns
    still apply.

    Args:
        root: Project root directory.
        patterns: Glob patterns relative to root.

    Returns:
        Sorted root-relative POSIX paths, test files excluded.
    """
    compiled = []
    prefixes: set[str] = set()
    for pattern in patterns:
        try:
            compiled.append(compile_pattern(pattern))
        except InvalidPatternError as e:
            logger.warning("%s", e)
            continue
        prefixes |= literal_prefixes(pattern)

    if not compiled:
        return []

    settings = get_settings()
    return await asyncio.to_thread(_find_sync, root, compiled, prefixes, settings.max_files)


async def read_text(path: Path) -> str | None:
    """Read a file's full text. Returns None if it is unreadable or too large."""
    settings = get_settings()
    try:
        size = (await asyncio.to_thread(path.stat)).st_size
        if size > settings.max_file_size:
            logger.warning(
                "Skipping %s: %d bytes exceeds limit of %d", path, size, settings.max_file_size
            )
            return None
        async with aiofiles.open(path, encoding="utf-8", errors="replace") as f:
            return await f.read()
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None


async def extract_files(root: Path, files: Iterable[str], extract: Extractor[T]) -> list[T]:
    """Read files concurrently and run an extractor over each.

    Extractors run in worker threads. A file that cannot be read, or whose
    extraction raises, contributes nothing; the rest of the batch is
    unaffected.
    """
    semaphore = asyncio.Semaphore(get_settings().max_concurrent_reads)

    async def extract_one(relative: str) -> list[T]:
        async with semaphore:
            content = await read_text(root / relative)
        if content is None:
            return []
        try:
            return await asyncio.to_thread(extract, relative, content)
        except Exception as e:
            logger.warning("Failed to extract from %s: %s", relative, e)
            return []

    batches = await asyncio.gather(*(extract_one(relative) for relative in files))
    return [record for batch in batches for record in batch]


async def scan(root: Path, patterns: Iterable[str], extract: Extractor[T]) -> list[T]:
    """Locate files matching patterns and collect the records extracted from them."""
    patterns = tuple(patterns)
    files = await find_files(root, patterns)
    logger.debug("Scanning %d files for %s", len(files), ", ".join(patterns))
    return await extract_files(root, files, extract)
