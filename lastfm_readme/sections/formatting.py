"""Render listening records as the Markdown body of a section."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Sequence

from babel import Locale, UnknownLocaleError
from babel.dates import format_date
from babel.numbers import format_decimal

from ..models import Album, Artist, Record, RecentTrack, SectionName, Track, UserInfo
from .schema import DISPLAY_LABELS, DisplayOption, SectionSettings

NO_DATA_MESSAGE = "No listening data found for the selected time period."

NOW_PLAYING_GLYPH = "🎶"
BULLET = "∙"

_USER_INFO_FIELDS = {
    DisplayOption.REGISTERED: "registered",
    DisplayOption.PLAYCOUNT: "playcount",
    DisplayOption.ARTIST_COUNT: "artist_count",
    DisplayOption.ALBUM_COUNT: "album_count",
    DisplayOption.TRACK_COUNT: "track_count",
}


def parse_locale(tag: str) -> Locale:
    """Parse a BCP-47 style tag such as ``en-US`` or ``de-DE``."""
    try:
        return Locale.parse(tag.strip(), sep="-")
    except (UnknownLocaleError, ValueError, TypeError) as exc:
        raise ValueError(f"Unsupported locale {tag!r}") from exc


class SectionFormatter:
    """Formats records for each section family using one locale and date pattern."""

    def __init__(self, locale: str = "en-US", date_format: str = "MM/dd/yyyy") -> None:
        self.locale = parse_locale(locale)
        self.date_format = date_format
        self._formatters: Dict[SectionName, Callable[[SectionSettings, Sequence[Record]], List[str]]] = {
            SectionName.TRACKS: self._chart_lines,
            SectionName.ARTISTS: self._chart_lines,
            SectionName.ALBUMS: self._chart_lines,
            SectionName.RECENT: self._recent_lines,
            SectionName.USER_INFO: self._user_info_lines,
        }

    def render(
        self,
        name: SectionName,
        settings: SectionSettings,
        records: Sequence[Record],
    ) -> str:
        """Return the section body (without markers) for ``records``."""
        if not records:
            return NO_DATA_MESSAGE
        return "\n".join(self._formatters[name](settings, records))

    def format_number(self, value: int) -> str:
        return format_decimal(value, locale=self.locale)

    def format_timestamp(self, timestamp: int) -> str:
        """Format a Unix timestamp (seconds) as a calendar date in UTC."""
        day = datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
        return format_date(day, format=self.date_format, locale=self.locale)

    # ------------------------------------------------------------------
    # Per-family line builders

    def _chart_lines(self, settings: SectionSettings, records: Sequence[Record]) -> List[str]:
        lines: List[str] = []
        for record in records:
            if isinstance(record, (Track, Album)):
                suffix = f" - [{record.artist.name}]({record.artist.url})"
            elif isinstance(record, Artist):
                suffix = ""
            else:
                raise TypeError(f"Unexpected record for chart section: {type(record).__name__}")
            plays = self.format_number(record.playcount)
            lines.append(f"> `{plays} ▶️` {BULLET} **[{record.name}]({record.url})**{suffix}<br/>")
        return lines

    def _recent_lines(self, settings: SectionSettings, records: Sequence[Record]) -> List[str]:
        # More plays than rows means the feed included the track playing right now.
        more_than_shown = len(records) > settings.rows
        lines: List[str] = []
        for index, record in enumerate(records[: settings.rows]):
            if not isinstance(record, RecentTrack):
                raise TypeError(f"Unexpected record for recent section: {type(record).__name__}")
            glyph = NOW_PLAYING_GLYPH if index == 0 and more_than_shown else BULLET
            lines.append(f"> {glyph} **[{record.name}]({record.url})** - {record.artist.name}<br/>")
        return lines

    def _user_info_lines(self, settings: SectionSettings, records: Sequence[Record]) -> List[str]:
        info = records[0]
        if not isinstance(info, UserInfo):
            raise TypeError(f"Unexpected record for user info section: {type(info).__name__}")
        lines: List[str] = []
        for option in settings.display:
            value = getattr(info, _USER_INFO_FIELDS[option])
            if value is None:
                continue
            if option is DisplayOption.REGISTERED:
                text = self.format_timestamp(value)
            else:
                text = self.format_number(value)
            lines.append(f"> **{DISPLAY_LABELS[option]}**: {text}<br/>")
        return lines


def section_title(name: SectionName, settings: SectionSettings, user: str) -> str:
    """Banner title shown above a section when titles are enabled."""
    if name is SectionName.TRACKS:
        return f"Top Tracks - {settings.readable_period}"
    if name is SectionName.ARTISTS:
        return f"Top Artists - {settings.readable_period}"
    if name is SectionName.ALBUMS:
        return f"Top Albums - {settings.readable_period}"
    if name is SectionName.RECENT:
        return "Recent Tracks"
    return f"[User Info - {user}](https://www.last.fm/user/{user})"


__all__ = ["NO_DATA_MESSAGE", "SectionFormatter", "parse_locale", "section_title"]
