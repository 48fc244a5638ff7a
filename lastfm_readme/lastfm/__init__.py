"""Last.fm listening data source."""

from .client import LastFMClient, LastFMError

__all__ = ["LastFMClient", "LastFMError"]
