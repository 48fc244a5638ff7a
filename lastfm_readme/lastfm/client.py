"""Client for the Last.fm user chart endpoints."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..logging import get_logger
from ..models import Album, Artist, ArtistRef, Record, RecentTrack, SectionName, Track, UserInfo
from ..sections.schema import DisplayOption, SectionSettings


class LastFMError(RuntimeError):
    """Raised when listening data cannot be fetched or understood."""


class LastFMClient:
    """Fetches listening records for README sections."""

    DEFAULT_BASE_URL = "https://ws.audioscrobbler.com/2.0"
    USER_AGENT = "lastfm-readme"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        request_timeout: Optional[float] = 30.0,
    ) -> None:
        if not api_key:
            raise LastFMError("A Last.fm API key is required.")
        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.request_timeout = request_timeout
        self.logger = get_logger("lastfm")

    def fetch(self, kind: SectionName, user: str, settings: SectionSettings) -> List[Record]:
        """Return the records backing a section of family ``kind``."""
        if kind is SectionName.RECENT:
            return self.recent_tracks(user, limit=settings.rows)
        if kind is SectionName.TRACKS:
            return self.top_tracks(user, limit=settings.rows, period=settings.period.value)
        if kind is SectionName.ARTISTS:
            return self.top_artists(user, limit=settings.rows, period=settings.period.value)
        if kind is SectionName.ALBUMS:
            return self.top_albums(user, limit=settings.rows, period=settings.period.value)
        return [self.user_info(user, display=settings.display)]

    def recent_tracks(self, user: str, *, limit: int) -> List[Record]:
        payload = self._call("user.getrecenttracks", user=user, limit=limit, extended=1)
        tracks: List[Record] = []
        for item in _items(payload, "recenttracks", "track"):
            attributes = _as_dict(item.get("@attr"))
            date = _as_dict(item.get("date"))
            tracks.append(
                RecentTrack(
                    name=_text(item, "name"),
                    url=_text(item, "url"),
                    artist=_artist(item.get("artist")),
                    played_at=_to_int(date.get("uts"), "date.uts") if date else None,
                    now_playing=str(attributes.get("nowplaying", "")).lower() == "true",
                )
            )
        return tracks

    def top_tracks(self, user: str, *, limit: int, period: str) -> List[Record]:
        payload = self._call("user.gettoptracks", user=user, limit=limit, period=period)
        return [
            Track(
                name=_text(item, "name"),
                url=_text(item, "url"),
                playcount=_to_int(item.get("playcount"), "playcount"),
                artist=_artist(item.get("artist")),
            )
            for item in _items(payload, "toptracks", "track")
        ]

    def top_artists(self, user: str, *, limit: int, period: str) -> List[Record]:
        payload = self._call("user.gettopartists", user=user, limit=limit, period=period)
        return [
            Artist(
                name=_text(item, "name"),
                url=_text(item, "url"),
                playcount=_to_int(item.get("playcount"), "playcount"),
            )
            for item in _items(payload, "topartists", "artist")
        ]

    def top_albums(self, user: str, *, limit: int, period: str) -> List[Record]:
        payload = self._call("user.gettopalbums", user=user, limit=limit, period=period)
        return [
            Album(
                name=_text(item, "name"),
                url=_text(item, "url"),
                playcount=_to_int(item.get("playcount"), "playcount"),
                artist=_artist(item.get("artist")),
            )
            for item in _items(payload, "topalbums", "album")
        ]

    def user_info(self, user: str, *, display: tuple[DisplayOption, ...]) -> UserInfo:
        payload = self._call("user.getinfo", user=user)
        info = _as_dict(payload.get("user"))
        if not info:
            raise LastFMError(f"Failed to fetch user info: no user data returned for {user!r}")

        wanted = set(display)
        registered = None
        if DisplayOption.REGISTERED in wanted:
            raw_registered = info.get("registered")
            if isinstance(raw_registered, dict):
                raw_registered = raw_registered.get("unixtime", raw_registered.get("#text"))
            registered = _to_int(raw_registered, "registered")

        def _count(option: DisplayOption, key: str) -> Optional[int]:
            if option not in wanted:
                return None
            return _to_int(info.get(key), key)

        return UserInfo(
            registered=registered,
            playcount=_count(DisplayOption.PLAYCOUNT, "playcount"),
            artist_count=_count(DisplayOption.ARTIST_COUNT, "artist_count"),
            album_count=_count(DisplayOption.ALBUM_COUNT, "album_count"),
            track_count=_count(DisplayOption.TRACK_COUNT, "track_count"),
        )

    # ------------------------------------------------------------------
    # Transport

    def _call(self, method: str, **params: Any) -> Dict[str, Any]:
        query = {"method": method, "api_key": self.api_key, "format": "json"}
        query.update({key: str(value) for key, value in params.items()})
        endpoint = f"{self.base_url}/?{urlencode(query)}"
        request = Request(endpoint, headers={"User-Agent": self.USER_AGENT}, method="GET")
        timeout = self.request_timeout or 30.0
        self.logger.debug("Calling Last.fm %s for %s", method, params.get("user"))

        try:
            with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = _error_message(detail) or exc.reason
            raise LastFMError(f"Last.fm {method} failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise LastFMError(f"Last.fm {method} failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LastFMError(f"Last.fm {method} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise LastFMError(f"Last.fm {method} returned an unexpected payload")
        if "error" in payload:
            raise LastFMError(
                f"Last.fm {method} failed with error {payload.get('error')}: {payload.get('message', 'unknown error')}"
            )
        return payload


def _error_message(detail: str) -> str:
    try:
        data = json.loads(detail)
    except json.JSONDecodeError:
        return detail.strip()
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return detail.strip()


def _items(payload: Mapping[str, Any], container: str, key: str) -> List[Dict[str, Any]]:
    block = _as_dict(payload.get(container))
    items = block.get(key, [])
    # A single result is sometimes returned as an object instead of a list.
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        raise LastFMError(f"Unexpected {container}.{key} payload from Last.fm")
    return [item for item in items if isinstance(item, dict)]


def _artist(value: Any) -> ArtistRef:
    if isinstance(value, dict):
        name = value.get("name", value.get("#text", ""))
        url = value.get("url")
        return ArtistRef(name=str(name), url=str(url) if url else None)
    if isinstance(value, str):
        return ArtistRef(name=value)
    raise LastFMError("Missing artist information in Last.fm response")


def _text(item: Mapping[str, Any], key: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise LastFMError(f"Missing {key!r} in Last.fm response")
    return value


def _to_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise LastFMError(f"Invalid {field} value in Last.fm response: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise LastFMError(f"Invalid {field} value in Last.fm response: {value!r}")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = ["LastFMClient", "LastFMError"]
