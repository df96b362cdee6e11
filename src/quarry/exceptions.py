"""Exception hierarchy for quarry.

These are raised and handled inside the engine. None of them escape
``analyze_project``; they mark the point where a file, a declaration or a
whole pass degrades to "found nothing".
"""


class QuarryError(Exception):
    """Base exception for all quarry errors."""


class InvalidPatternError(QuarryError):
    """Glob pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")


class SchemaParseError(QuarryError):
    """Schema literal could not be parsed into a structural value."""


class ManifestError(QuarryError):
    """Dependency manifest is unreadable or malformed."""
