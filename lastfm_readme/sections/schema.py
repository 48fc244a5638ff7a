"""Inline section configuration: schema, validation and defaults."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, List, Optional, Tuple

from pydantic import BaseModel, Field, StrictInt, ValidationError

from .errors import MalformedConfigurationError


class TimePeriod(str, Enum):
    """Aggregation windows supported by the Last.fm chart endpoints."""

    WEEK = "7day"
    MONTH = "1month"
    QUARTER = "3month"
    HALF_YEAR = "6month"
    YEAR = "12month"
    OVERALL = "overall"


class DisplayOption(str, Enum):
    """User-info fields that can be shown in a USER_INFO section."""

    REGISTERED = "registered"
    PLAYCOUNT = "playcount"
    ARTIST_COUNT = "artistCount"
    ALBUM_COUNT = "albumCount"
    TRACK_COUNT = "trackCount"


READABLE_PERIODS = {
    TimePeriod.WEEK: "Past Week",
    TimePeriod.MONTH: "Past Month",
    TimePeriod.QUARTER: "Past 3 Months",
    TimePeriod.HALF_YEAR: "Past 6 Months",
    TimePeriod.YEAR: "Past Year",
    TimePeriod.OVERALL: "All Time",
}

DISPLAY_LABELS = {
    DisplayOption.REGISTERED: "Registered",
    DisplayOption.PLAYCOUNT: "Playcount",
    DisplayOption.ARTIST_COUNT: "Artists",
    DisplayOption.ALBUM_COUNT: "Albums",
    DisplayOption.TRACK_COUNT: "Tracks",
}

DEFAULT_ROWS = 8
MAX_ROWS = 50
DEFAULT_PERIOD = TimePeriod.WEEK
DEFAULT_DISPLAY: Tuple[DisplayOption, ...] = tuple(DisplayOption)

Rows = Annotated[StrictInt, Field(ge=1, le=MAX_ROWS)]


class SectionConfig(BaseModel):
    """JSON object embedded in a start marker, e.g. ``{"rows": 5, "period": "1month"}``.

    Unknown keys are ignored; every known key is optional.
    """

    rows: Optional[Rows] = None
    period: Optional[TimePeriod] = None
    display: Optional[List[DisplayOption]] = None

    def resolve(self) -> "SectionSettings":
        """Apply defaults for every key left out of the marker."""
        return SectionSettings(
            rows=self.rows if self.rows is not None else DEFAULT_ROWS,
            period=self.period or DEFAULT_PERIOD,
            display=tuple(self.display) if self.display is not None else DEFAULT_DISPLAY,
        )


@dataclass(frozen=True)
class SectionSettings:
    """Effective settings for one section after defaults have been applied."""

    rows: int = DEFAULT_ROWS
    period: TimePeriod = DEFAULT_PERIOD
    display: Tuple[DisplayOption, ...] = DEFAULT_DISPLAY

    @property
    def readable_period(self) -> str:
        return READABLE_PERIODS[self.period]


def parse_section_config(raw: str | None) -> SectionSettings:
    """Parse and validate the inline JSON of a start marker.

    ``None`` or an empty string means the marker carries no configuration.
    Raises :class:`MalformedConfigurationError` for invalid JSON, a non-object
    payload, or values outside the schema.
    """
    text = raw if raw else "{}"
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedConfigurationError(text, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, dict):
        raise MalformedConfigurationError(text, "expected a JSON object")

    try:
        config = SectionConfig.model_validate(data)
    except ValidationError as exc:
        raise MalformedConfigurationError(text, _summarise(exc)) from exc
    return config.resolve()


def _summarise(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


__all__ = [
    "DEFAULT_DISPLAY",
    "DEFAULT_PERIOD",
    "DEFAULT_ROWS",
    "DISPLAY_LABELS",
    "DisplayOption",
    "READABLE_PERIODS",
    "SectionConfig",
    "SectionSettings",
    "TimePeriod",
    "parse_section_config",
]
