"""Tests for section body formatting."""

from __future__ import annotations

import pytest

from lastfm_readme.models import SectionName, UserInfo
from lastfm_readme.sections import NO_DATA_MESSAGE, SectionFormatter, parse_section_config, section_title
from lastfm_readme.sections.formatting import parse_locale


def test_chart_line_for_albums(album) -> None:
    formatter = SectionFormatter()

    body = formatter.render(SectionName.ALBUMS, parse_section_config(None), [album])

    assert body == "> `89 ▶️` ∙ **[OK Computer](https://x/a)** - [Radiohead](https://x/r)<br/>"


def test_chart_line_for_artists_has_no_suffix(artist) -> None:
    body = SectionFormatter().render(SectionName.ARTISTS, parse_section_config(None), [artist])

    assert body == "> `42 ▶️` ∙ **[Radiohead](https://x/r)**<br/>"


def test_playcounts_follow_locale(track) -> None:
    settings = parse_section_config(None)

    english = SectionFormatter(locale="en-US").render(SectionName.TRACKS, settings, [track])
    german = SectionFormatter(locale="de-DE").render(SectionName.TRACKS, settings, [track])

    assert english.startswith("> `1,234 ▶️`")
    assert german.startswith("> `1.234 ▶️`")


def test_empty_records_render_sentinel() -> None:
    formatter = SectionFormatter()
    settings = parse_section_config(None)

    for name in SectionName:
        assert formatter.render(name, settings, []) == NO_DATA_MESSAGE


def test_recent_tracks_truncate_and_mark_now_playing(recent_tracks) -> None:
    body = SectionFormatter().render(SectionName.RECENT, parse_section_config(None), recent_tracks)

    lines = body.split("\n")
    assert len(lines) == 8
    assert lines[0] == "> 🎶 **[Song 0](https://x/s0)** - Band 0<br/>"
    assert all(line.startswith("> ∙ ") for line in lines[1:])
    assert lines[-1] == "> ∙ **[Song 7](https://x/s7)** - Band 7<br/>"


def test_recent_tracks_without_overflow_use_bullets(recent_tracks) -> None:
    settings = parse_section_config('{"rows": 12}')

    lines = SectionFormatter().render(SectionName.RECENT, settings, recent_tracks).split("\n")

    assert len(lines) == 12
    assert lines[0].startswith("> ∙ **[Song 0]")


def test_user_info_follows_display_order(user_info) -> None:
    settings = parse_section_config('{"display": ["playcount", "registered", "artistCount"]}')

    body = SectionFormatter().render(SectionName.USER_INFO, settings, [user_info])

    assert body.split("\n") == [
        "> **Playcount**: 123,456<br/>",
        "> **Registered**: 11/20/2002<br/>",
        "> **Artists**: 2,345<br/>",
    ]


def test_user_info_date_pattern_and_locale(user_info) -> None:
    formatter = SectionFormatter(locale="de-DE", date_format="dd.MM.yyyy")
    settings = parse_section_config('{"display": ["registered", "albumCount"]}')

    body = formatter.render(SectionName.USER_INFO, settings, [user_info])

    assert body == "> **Registered**: 20.11.2002<br/>\n> **Albums**: 4.567<br/>"


def test_user_info_skips_missing_fields() -> None:
    settings = parse_section_config('{"display": ["trackCount", "playcount"]}')

    body = SectionFormatter().render(SectionName.USER_INFO, settings, [UserInfo(playcount=7)])

    assert body == "> **Playcount**: 7<br/>"


def test_formatter_rejects_mismatched_records(artist) -> None:
    with pytest.raises(TypeError):
        SectionFormatter().render(SectionName.RECENT, parse_section_config(None), [artist])


def test_section_titles() -> None:
    month = parse_section_config('{"period": "1month"}')

    assert section_title(SectionName.TRACKS, month, "rj") == "Top Tracks - Past Month"
    assert section_title(SectionName.ARTISTS, month, "rj") == "Top Artists - Past Month"
    assert section_title(SectionName.ALBUMS, month, "rj") == "Top Albums - Past Month"
    assert section_title(SectionName.RECENT, month, "rj") == "Recent Tracks"
    assert section_title(SectionName.USER_INFO, month, "rj") == "[User Info - rj](https://www.last.fm/user/rj)"


def test_parse_locale_rejects_unknown_tags() -> None:
    assert str(parse_locale("de-DE")) == "de_DE"
    with pytest.raises(ValueError):
        parse_locale("not a locale")
