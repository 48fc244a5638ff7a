from __future__ import annotations

from pathlib import Path

import pytest

from lastfm_readme.config import LastFMConfig, ReadmeConfig, Settings
from lastfm_readme.models import Album, Artist, ArtistRef, RecentTrack, Track, UserInfo


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a README inside the pytest tmp_path."""
    return Settings(
        root=tmp_path,
        readme=ReadmeConfig(path=tmp_path / "README.md"),
        lastfm=LastFMConfig(api_key="key", user="rj"),
    )


@pytest.fixture
def album() -> Album:
    return Album(
        name="OK Computer",
        url="https://x/a",
        playcount=89,
        artist=ArtistRef(name="Radiohead", url="https://x/r"),
    )


@pytest.fixture
def track() -> Track:
    return Track(
        name="Karma Police",
        url="https://x/t",
        playcount=1234,
        artist=ArtistRef(name="Radiohead", url="https://x/r"),
    )


@pytest.fixture
def artist() -> Artist:
    return Artist(name="Radiohead", url="https://x/r", playcount=42)


@pytest.fixture
def recent_tracks() -> list[RecentTrack]:
    return [
        RecentTrack(
            name=f"Song {index}",
            url=f"https://x/s{index}",
            artist=ArtistRef(name=f"Band {index}"),
            played_at=None if index == 0 else 1_700_000_000 - index * 60,
            now_playing=index == 0,
        )
        for index in range(12)
    ]


@pytest.fixture
def user_info() -> UserInfo:
    return UserInfo(
        registered=1_037_793_040,
        playcount=123_456,
        artist_count=2_345,
        album_count=4_567,
        track_count=12_345,
    )
