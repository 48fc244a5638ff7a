"""Errors raised while scanning README section markers."""

from __future__ import annotations

from typing import Sequence


class SectionError(RuntimeError):
    """Base class for malformed section markers or configuration."""


class MalformedConfigurationError(SectionError):
    """Raised when a start marker's inline JSON cannot be parsed or validated."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Invalid section configuration {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class EndTagWithoutStartTagError(SectionError):
    """Raised when an end marker appears with no open start marker."""

    def __init__(self, end_tag: str) -> None:
        super().__init__(f'End tag found without a corresponding start tag: "{end_tag}"')
        self.end_tag = end_tag


class StartTagWithoutEndTagError(SectionError):
    """Raised when start markers are still open at the end of the document."""

    def __init__(self, start_tags: Sequence[str]) -> None:
        joined = ", ".join(f'"{tag}"' for tag in start_tags)
        super().__init__(f"Start tag found without a corresponding end tag: {joined}")
        self.start_tags = list(start_tags)


__all__ = [
    "EndTagWithoutStartTagError",
    "MalformedConfigurationError",
    "SectionError",
    "StartTagWithoutEndTagError",
]
