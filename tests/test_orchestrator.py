"""Tests for the README update pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from lastfm_readme.lastfm import LastFMError
from lastfm_readme.models import SectionName
from lastfm_readme.orchestrator import Orchestrator
from lastfm_readme.sections import EndTagWithoutStartTagError
from lastfm_readme.sections.markers import LASTFM_LOGO
from lastfm_readme.stores import GitHubDocumentStore, LocalDocumentStore, StoredDocument


@dataclass
class FakeStore:
    content: str
    writes: list[dict[str, object]] = field(default_factory=list)

    def read(self) -> StoredDocument:
        return StoredDocument(content=self.content, version="v1", locator="memory:README.md")

    def write(self, content: str, *, version: Optional[str], message: str) -> None:
        self.writes.append({"content": content, "version": version, "message": message})
        self.content = content


class FakeSource:
    def __init__(self, records, *, fail_on=None) -> None:
        self.records = records
        self.fail_on = fail_on
        self.calls = []

    def fetch(self, kind, user, settings):
        self.calls.append((kind, user, settings.rows))
        if kind is self.fail_on:
            raise LastFMError("Last.fm user.gettopartists failed with status 500: boom")
        return self.records.get(kind, [])


README = """# About me

<!--START_LASTFM_ALBUMS-->
stale
<!--END_LASTFM_ALBUMS-->

<!--START_LASTFM_ARTISTS:{"rows": 3}-->
<!--END_LASTFM_ARTISTS-->
"""


def test_run_update_writes_every_section_once(settings, album, artist) -> None:
    store = FakeStore(README)
    source = FakeSource({SectionName.ALBUMS: [album], SectionName.ARTISTS: [artist]})
    orchestrator = Orchestrator(settings, source=source, store=store)

    result = orchestrator.run_update()

    assert result is not None
    assert result.dry_run is False
    assert result.locator == "memory:README.md"
    assert result.sections_processed == 2
    assert result.sections_updated == 2
    assert len(store.writes) == 1
    assert store.writes[0]["version"] == "v1"
    assert store.writes[0]["message"] == settings.store.commit_message
    assert store.content == (
        "# About me\n"
        "\n"
        "<!--START_LASTFM_ALBUMS-->\n"
        f"{LASTFM_LOGO} **Top Albums - Past Week**\n"
        "\n"
        "> `89 ▶️` ∙ **[OK Computer](https://x/a)** - [Radiohead](https://x/r)<br/>\n"
        "<!--END_LASTFM_ALBUMS-->\n"
        "\n"
        '<!--START_LASTFM_ARTISTS:{"rows": 3}-->\n'
        f"{LASTFM_LOGO} **Top Artists - Past Week**\n"
        "\n"
        "> `42 ▶️` ∙ **[Radiohead](https://x/r)**<br/>\n"
        "<!--END_LASTFM_ARTISTS-->\n"
    )
    assert (SectionName.ARTISTS, "rj", 3) in source.calls


def test_second_run_is_unchanged(settings, album) -> None:
    store = FakeStore(README)
    source = FakeSource({SectionName.ALBUMS: [album]})
    orchestrator = Orchestrator(settings, source=source, store=store)

    assert orchestrator.run_update() is not None
    assert orchestrator.run_update() is None
    assert len(store.writes) == 1


def test_dry_run_reports_diff_without_writing(settings, album) -> None:
    store = FakeStore(README)
    orchestrator = Orchestrator(settings, source=FakeSource({SectionName.ALBUMS: [album]}), store=store)

    result = orchestrator.run_update(dry_run=True)

    assert result is not None
    assert result.dry_run is True
    assert "+> `89 ▶️`" in result.diff
    assert "-stale" in result.diff
    assert store.writes == []


def test_fetch_failure_aborts_without_writing(settings, album) -> None:
    store = FakeStore(README)
    source = FakeSource({SectionName.ALBUMS: [album]}, fail_on=SectionName.ARTISTS)

    with pytest.raises(LastFMError):
        Orchestrator(settings, source=source, store=store).run_update()

    assert store.writes == []


def test_malformed_markers_abort_before_fetching(settings) -> None:
    store = FakeStore("<!--END_LASTFM_TRACKS-->\n")
    source = FakeSource({})

    with pytest.raises(EndTagWithoutStartTagError):
        Orchestrator(settings, source=source, store=store).run_update()

    assert source.calls == []
    assert store.writes == []


def test_hidden_titles_and_empty_data(settings) -> None:
    settings.readme.show_title = False
    store = FakeStore("<!--START_LASTFM_RECENT-->\n<!--END_LASTFM_RECENT-->")

    Orchestrator(settings, source=FakeSource({}), store=store).run_update()

    assert store.content == (
        "<!--START_LASTFM_RECENT-->\n"
        "No listening data found for the selected time period.\n"
        "<!--END_LASTFM_RECENT-->"
    )


def test_identical_sections_are_all_updated(settings, artist) -> None:
    pair = "<!--START_LASTFM_ARTISTS-->\n<!--END_LASTFM_ARTISTS-->"
    store = FakeStore(f"{pair}\n\n{pair}\n")
    source = FakeSource({SectionName.ARTISTS: [artist]})

    result = Orchestrator(settings, source=source, store=store).run_update()

    assert result is not None
    assert result.sections_processed == 2
    assert store.content.count("**[Radiohead](https://x/r)**") == 2


def test_inspect_lists_sections_without_fetching(settings) -> None:
    source = FakeSource({})
    found = Orchestrator(settings, source=source, store=FakeStore("")).inspect(README)

    assert [(name, len(regions)) for name, regions in found] == [
        (SectionName.ARTISTS, 1),
        (SectionName.ALBUMS, 1),
    ]
    assert source.calls == []


def test_store_is_built_from_settings(settings, tmp_path: Path) -> None:
    assert isinstance(Orchestrator(settings).store, LocalDocumentStore)

    settings.store.mode = "github"
    settings.github.repository = "octo/site"
    settings.github.token = "tok"
    assert isinstance(Orchestrator(settings).store, GitHubDocumentStore)


def test_local_store_round_trip(settings, album) -> None:
    settings.readme.path.write_text(README, encoding="utf-8")
    orchestrator = Orchestrator(settings, source=FakeSource({SectionName.ALBUMS: [album]}))

    result = orchestrator.run_update()

    assert result is not None
    assert result.locator == str(settings.readme.path.resolve())
    assert "[OK Computer](https://x/a)" in settings.readme.path.read_text(encoding="utf-8")
