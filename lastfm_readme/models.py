"""Core data models shared across lastfm-readme components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class SectionName(str, Enum):
    """Families of README sections, one per kind of listening chart."""

    RECENT = "RECENT"
    TRACKS = "TRACKS"
    ARTISTS = "ARTISTS"
    ALBUMS = "ALBUMS"
    USER_INFO = "USER_INFO"

    @property
    def marker(self) -> str:
        """Family name as written inside the README comment markers."""
        return f"LASTFM_{self.value}"


# Families are processed in this order on every run.
SECTION_ORDER = (
    SectionName.TRACKS,
    SectionName.ARTISTS,
    SectionName.ALBUMS,
    SectionName.RECENT,
    SectionName.USER_INFO,
)


@dataclass(frozen=True)
class ArtistRef:
    """Artist attached to a track, album or recent play."""

    name: str
    url: Optional[str] = None


@dataclass(frozen=True)
class Track:
    name: str
    url: str
    playcount: int
    artist: ArtistRef


@dataclass(frozen=True)
class Artist:
    name: str
    url: str
    playcount: int


@dataclass(frozen=True)
class Album:
    name: str
    url: str
    playcount: int
    artist: ArtistRef


@dataclass(frozen=True)
class RecentTrack:
    """A scrobble from the recent-plays feed.

    ``played_at`` is a Unix timestamp in seconds; it is ``None`` for the
    track that is currently playing.
    """

    name: str
    url: str
    artist: ArtistRef
    played_at: Optional[int] = None
    now_playing: bool = False


@dataclass(frozen=True)
class UserInfo:
    """Account summary; fields not requested for display are left as ``None``."""

    registered: Optional[int] = None
    playcount: Optional[int] = None
    artist_count: Optional[int] = None
    album_count: Optional[int] = None
    track_count: Optional[int] = None


Record = Union[Track, Artist, Album, RecentTrack, UserInfo]
