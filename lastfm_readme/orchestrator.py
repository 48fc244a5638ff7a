"""Pipeline orchestration for README chart updates."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from .config import Settings
from .lastfm import LastFMClient
from .logging import get_logger
from .models import SECTION_ORDER, Record, SectionName
from .sections import MarkerManager, Region, SectionFormatter, scan_sections, section_title
from .sections.schema import SectionSettings
from .stores import DocumentStore, GitCommitter, GitHubDocumentStore, LocalDocumentStore


class ListeningSource(Protocol):
    """Anything that can supply records for a section family."""

    def fetch(self, kind: SectionName, user: str, settings: SectionSettings) -> Sequence[Record]:
        ...


@dataclass
class UpdateOutcome:
    """Result of a README update that changed content."""

    locator: str
    diff: str
    dry_run: bool
    sections_processed: int
    sections_updated: int


class Orchestrator:
    """Scans the README, regenerates every Last.fm section and writes it back once."""

    def __init__(
        self,
        settings: Settings,
        *,
        source: ListeningSource | None = None,
        store: DocumentStore | None = None,
        formatter: SectionFormatter | None = None,
        marker_manager: MarkerManager | None = None,
    ) -> None:
        self.settings = settings
        self._source = source
        self._store = store
        self.formatter = formatter or SectionFormatter(
            locale=settings.readme.locale,
            date_format=settings.readme.date_format,
        )
        self.marker_manager = marker_manager or MarkerManager()
        self.logger = get_logger("orchestrator")

    @property
    def source(self) -> ListeningSource:
        if self._source is None:
            lastfm = self.settings.lastfm
            self._source = LastFMClient(
                lastfm.api_key or "",
                base_url=lastfm.base_url,
                request_timeout=lastfm.request_timeout,
            )
        return self._source

    @property
    def store(self) -> DocumentStore:
        if self._store is None:
            self._store = self._build_store()
        return self._store

    def run_update(self, *, dry_run: bool = False) -> UpdateOutcome | None:
        """Regenerate all sections; return ``None`` when the README is already current."""
        document = self.store.read()
        self.logger.info("Starting update run for %s", document.locator)

        updated, processed, changed = self.render_document(document.content)

        if updated == document.content:
            self.logger.info("Skipping update, chart content is up to date")
            return None

        diff_text = self._render_diff(document.content, updated)
        if dry_run:
            self.logger.info("Dry-run completed; README changes not written")
        else:
            self.store.write(
                updated,
                version=document.version,
                message=self.settings.store.commit_message,
            )
            self.logger.info("README updated with new charts (%d of %d sections changed)", changed, processed)
        return UpdateOutcome(
            locator=document.locator,
            diff=diff_text,
            dry_run=dry_run,
            sections_processed=processed,
            sections_updated=changed,
        )

    def render_document(self, content: str) -> Tuple[str, int, int]:
        """Fold every section of every family into ``content``.

        Returns the new document plus the number of sections processed and
        the number whose text changed. Any error aborts the whole fold.
        """
        processed = 0
        changed = 0
        for name in SECTION_ORDER:
            regions = scan_sections(name, content)
            if not regions:
                continue
            self.logger.info("Processing %d %s section(s)", len(regions), name.marker)
            shift = 0
            for region in regions:
                processed += 1
                replacement = self.render_region(region)
                if replacement == region.full_text:
                    self.logger.debug("No changes: %s", region.start)
                else:
                    changed += 1
                    self.logger.debug("Updated section: %s", region.start)
                content = self.marker_manager.splice(content, region, replacement, shift=shift)
                shift += len(replacement) - len(region.full_text)
        return content, processed, changed

    def render_region(self, region: Region) -> str:
        """Fetch fresh records for ``region`` and return its replacement text."""
        user = self.settings.lastfm.user or ""
        records = list(self.source.fetch(region.name, user, region.settings))
        body = self.formatter.render(region.name, region.settings, records)
        return self.marker_manager.wrap(
            region.start,
            region.end,
            body,
            title=section_title(region.name, region.settings, user),
            show_title=self.settings.readme.show_title,
        )

    def inspect(self, content: str) -> List[Tuple[SectionName, List[Region]]]:
        """Return the sections found for each family, without fetching data."""
        found: List[Tuple[SectionName, List[Region]]] = []
        for name in SECTION_ORDER:
            regions = scan_sections(name, content)
            if regions:
                found.append((name, regions))
        return found

    def _build_store(self) -> DocumentStore:
        store_cfg = self.settings.store
        if store_cfg.mode == "github":
            github = self.settings.github
            return GitHubDocumentStore(
                github.repository or "",
                github.token or "",
                api_url=github.api_url,
            )
        committer: Optional[GitCommitter] = GitCommitter() if store_cfg.commit else None
        return LocalDocumentStore(self.settings.readme.path, committer=committer)

    @staticmethod
    def _render_diff(original: str, updated: str) -> str:
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile="README.md (original)",
            tofile="README.md (updated)",
        )
        return "".join(diff)


__all__ = ["ListeningSource", "Orchestrator", "UpdateOutcome"]
