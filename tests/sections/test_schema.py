"""Tests for inline section configuration parsing."""

from __future__ import annotations

import pytest

from lastfm_readme.sections import DisplayOption, MalformedConfigurationError, TimePeriod, parse_section_config
from lastfm_readme.sections.schema import DEFAULT_DISPLAY


def test_missing_configuration_uses_defaults() -> None:
    for raw in (None, "", "{}"):
        settings = parse_section_config(raw)
        assert settings.rows == 8
        assert settings.period is TimePeriod.WEEK
        assert settings.display == DEFAULT_DISPLAY
        assert settings.readable_period == "Past Week"


def test_configuration_accepts_row_bounds() -> None:
    assert parse_section_config('{"rows": 1}').rows == 1
    assert parse_section_config('{"rows": 50}').rows == 50


@pytest.mark.parametrize("raw", ['{"rows": 0}', '{"rows": 51}', '{"rows": "5"}', '{"rows": 2.5}'])
def test_configuration_rejects_invalid_rows(raw: str) -> None:
    with pytest.raises(MalformedConfigurationError):
        parse_section_config(raw)


def test_configuration_parses_every_period() -> None:
    assert parse_section_config('{"period": "overall"}').readable_period == "All Time"
    assert parse_section_config('{"period": "12month"}').period is TimePeriod.YEAR
    assert parse_section_config('{"period": "3month"}').readable_period == "Past 3 Months"


def test_configuration_rejects_unknown_period() -> None:
    with pytest.raises(MalformedConfigurationError) as excinfo:
        parse_section_config('{"period": "fortnight"}')

    assert excinfo.value.raw == '{"period": "fortnight"}'
    assert "period" in excinfo.value.reason


def test_configuration_keeps_display_order() -> None:
    settings = parse_section_config('{"display": ["trackCount", "registered"]}')

    assert settings.display == (DisplayOption.TRACK_COUNT, DisplayOption.REGISTERED)


@pytest.mark.parametrize("raw", ['{"display": ["followers"]}', '{"display": "playcount"}'])
def test_configuration_rejects_invalid_display(raw: str) -> None:
    with pytest.raises(MalformedConfigurationError):
        parse_section_config(raw)


def test_configuration_ignores_unknown_keys_and_nulls() -> None:
    settings = parse_section_config('{"rows": null, "colour": "red"}')

    assert settings.rows == 8


@pytest.mark.parametrize("raw", ['{"rows": 5', "[1, 2]", '"text"'])
def test_configuration_rejects_non_object_json(raw: str) -> None:
    with pytest.raises(MalformedConfigurationError):
        parse_section_config(raw)
