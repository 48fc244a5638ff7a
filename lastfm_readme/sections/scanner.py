"""Locate Last.fm sections delimited by comment markers in a README."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..logging import get_logger
from ..models import SectionName
from .errors import (
    EndTagWithoutStartTagError,
    MalformedConfigurationError,
    StartTagWithoutEndTagError,
)
from .schema import SectionSettings, parse_section_config

_LOGGER = get_logger("sections.scanner")


@dataclass(frozen=True)
class Region:
    """One ``<!--START_...-->`` / ``<!--END_...-->`` span found in a document.

    ``full_text`` is the exact substring of the scanned document from the
    start marker line through the end marker line; ``offset`` is where it
    began in that document.
    """

    name: SectionName
    start: str
    end: str
    body: Tuple[str, ...]
    settings: SectionSettings
    offset: int

    @property
    def full_text(self) -> str:
        if self.body:
            return "\n".join((self.start, *self.body, self.end))
        return f"{self.start}\n{self.end}"


@dataclass
class _OpenRegion:
    start: str
    settings: SectionSettings
    offset: int
    body: List[str] = field(default_factory=list)


def start_prefix(name: SectionName) -> str:
    return f"<!--START_{name.marker}"


def end_prefix(name: SectionName) -> str:
    return f"<!--END_{name.marker}"


def scan_sections(name: SectionName, document: str) -> List[Region]:
    """Return every ``name`` section in ``document`` in the order they were opened.

    Start markers are closed first-in-first-out, so sections of the same
    family are expected to follow one another rather than nest. Body lines
    are only captured while exactly one section is open.

    Raises :class:`MalformedConfigurationError`,
    :class:`EndTagWithoutStartTagError` or :class:`StartTagWithoutEndTagError`;
    any of them aborts the scan for this family.
    """
    _LOGGER.debug("Searching for %s sections", name.marker)
    begin = start_prefix(name)
    finish = end_prefix(name)
    pattern = _start_pattern(name)

    opened: List[_OpenRegion] = []
    regions: List[Region] = []
    position = 0

    for line in document.split("\n"):
        offset = position
        position += len(line) + 1

        if line.startswith(begin):
            settings = _parse_start_line(pattern, line)
            opened.append(_OpenRegion(start=line, settings=settings, offset=offset))
        elif line.startswith(finish):
            if not opened:
                raise EndTagWithoutStartTagError(line)
            current = opened.pop(0)
            regions.append(
                Region(
                    name=name,
                    start=current.start,
                    end=line,
                    body=tuple(current.body),
                    settings=current.settings,
                    offset=current.offset,
                )
            )
        elif len(opened) == 1:
            opened[0].body.append(line)

    if opened:
        raise StartTagWithoutEndTagError([region.start for region in opened])

    _LOGGER.debug("Found %d %s sections", len(regions), name.marker)
    return regions


def _start_pattern(name: SectionName) -> re.Pattern[str]:
    return re.compile(
        rf"{re.escape(start_prefix(name))}(?::(?P<config>\{{.*\}}))?-->\s*"
    )


def _parse_start_line(pattern: re.Pattern[str], line: str) -> SectionSettings:
    match = pattern.fullmatch(line)
    if match is None:
        raise MalformedConfigurationError(line, _describe_bad_start(pattern, line))
    config: Optional[str] = match.group("config")
    return parse_section_config(config)


def _describe_bad_start(pattern: re.Pattern[str], line: str) -> str:
    expected = "start marker is not of the form <!--START_NAME[:{...}]-->"
    head = pattern.match(line)
    if head is not None:
        trailing = line[head.end():].strip()
        return f"{expected}; unexpected text after '-->': {trailing!r}"
    return expected


__all__ = ["Region", "end_prefix", "scan_sections", "start_prefix"]
