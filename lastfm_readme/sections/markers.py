"""Marker reassembly and in-place replacement of README sections."""

from __future__ import annotations

from ..logging import get_logger
from .scanner import Region

LASTFM_LOGO = (
    '<a href="https://last.fm" target="_blank">'
    '<img src="https://user-images.githubusercontent.com/17434202/215290617-e793598d-d7c9-428f-9975-156db1ba89cc.svg"'
    ' alt="Last.fm Logo" width="18" height="13"/></a>'
)


class MarkerManager:
    """Rebuilds marked sections and splices them back into a document."""

    def __init__(self) -> None:
        self.logger = get_logger("sections.markers")

    def wrap(
        self,
        start: str,
        end: str,
        body: str,
        *,
        title: str = "",
        show_title: bool = True,
    ) -> str:
        """Surround ``body`` with the original markers and an optional title banner."""
        if show_title:
            return f"{start}\n{LASTFM_LOGO} **{title}**\n\n{body}\n{end}"
        return f"{start}\n{body}\n{end}"

    def splice(self, document: str, region: Region, replacement: str, *, shift: int = 0) -> str:
        """Replace ``region`` inside ``document`` with ``replacement``.

        ``shift`` is how far the region has moved since it was scanned (the
        total length change of earlier replacements in the same document).
        When the captured text is no longer at that offset the first literal
        occurrence of it is replaced instead.
        """
        old = region.full_text
        index = region.offset + shift
        if 0 <= index and document[index:index + len(old)] == old:
            return document[:index] + replacement + document[index + len(old):]

        if old not in document:
            self.logger.warning("Section %s no longer present in document; leaving it untouched", region.start)
            return document
        self.logger.debug("Section %s moved since scan; replacing first occurrence", region.start)
        return document.replace(old, replacement, 1)


__all__ = ["LASTFM_LOGO", "MarkerManager"]
