"""README section scanning, formatting and splicing."""

from .errors import (
    EndTagWithoutStartTagError,
    MalformedConfigurationError,
    SectionError,
    StartTagWithoutEndTagError,
)
from .formatting import NO_DATA_MESSAGE, SectionFormatter, section_title
from .markers import MarkerManager
from .scanner import Region, scan_sections
from .schema import DisplayOption, SectionSettings, TimePeriod, parse_section_config

__all__ = [
    "DisplayOption",
    "EndTagWithoutStartTagError",
    "MalformedConfigurationError",
    "MarkerManager",
    "NO_DATA_MESSAGE",
    "Region",
    "SectionError",
    "SectionFormatter",
    "SectionSettings",
    "StartTagWithoutEndTagError",
    "TimePeriod",
    "parse_section_config",
    "scan_sections",
    "section_title",
]
