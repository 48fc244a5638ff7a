"""Configuration loading for lastfm-readme (.lastfm-readme.yml + environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .sections.formatting import parse_locale

CONFIG_FILENAME = ".lastfm-readme.yml"
ENV_FILENAME = ".env"
DEFAULT_COMMIT_MESSAGE = "chore: update Last.fm charts"
STORE_MODES = ("local", "github")


class ConfigError(RuntimeError):
    """Raised when the configuration is missing, unreadable or invalid."""


@dataclass
class LastFMConfig:
    """Credentials and endpoint for the Last.fm API."""

    api_key: Optional[str] = None
    user: Optional[str] = None
    base_url: Optional[str] = None
    request_timeout: Optional[float] = None


@dataclass
class ReadmeConfig:
    """Where the README lives and how its sections are formatted."""

    path: Path
    show_title: bool = True
    locale: str = "en-US"
    date_format: str = "MM/dd/yyyy"


@dataclass
class StoreConfig:
    """How the updated README is written back."""

    mode: str = "local"
    commit: bool = False
    commit_message: str = DEFAULT_COMMIT_MESSAGE


@dataclass
class GitHubConfig:
    """Repository settings for the GitHub store."""

    repository: Optional[str] = None
    token: Optional[str] = None
    api_url: Optional[str] = None


@dataclass
class Settings:
    """Represents the settings defined in .lastfm-readme.yml and the environment."""

    root: Path
    readme: ReadmeConfig
    lastfm: LastFMConfig = field(default_factory=LastFMConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)


def load_config(
    config_path: Path | str = ".",
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load configuration from disk, then apply environment overrides.

    Variables from a `.env` file next to the config are applied too; the
    process environment takes precedence over them.
    """
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()
    data = _read_config(config_file) if config_file.exists() else {}

    lastfm_data = _as_dict(data.get("lastfm"))
    lastfm = LastFMConfig(
        api_key=_as_str(lastfm_data.get("api_key")),
        user=_as_str(lastfm_data.get("user")),
        base_url=_as_str(lastfm_data.get("base_url")),
        request_timeout=_as_float(lastfm_data.get("request_timeout")),
    )

    readme_data = _as_dict(data.get("readme"))
    readme = ReadmeConfig(path=root / (_as_str(readme_data.get("path")) or "README.md"))
    show_title = _as_bool(readme_data.get("show_title"))
    if show_title is not None:
        readme.show_title = show_title
    readme.locale = _as_str(readme_data.get("locale")) or readme.locale
    readme.date_format = _as_str(readme_data.get("date_format")) or readme.date_format

    store_data = _as_dict(data.get("store"))
    store = StoreConfig(
        mode=(_as_str(store_data.get("mode")) or "local").lower(),
        commit=_as_bool(store_data.get("commit")) or False,
    )
    commit_message = _as_str(store_data.get("commit_message"))
    if commit_message is not None:
        store.commit_message = commit_message

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig(
        repository=_as_str(github_data.get("repository")),
        token=_as_str(github_data.get("token")),
        api_url=_as_str(github_data.get("api_url")),
    )

    settings = Settings(root=root, readme=readme, lastfm=lastfm, store=store, github=github)
    process_env = os.environ if environ is None else environ
    _apply_environment(settings, {**_read_env_file(root / ENV_FILENAME), **process_env})
    return settings


def validate_settings(settings: Settings, *, require_lastfm: bool = True) -> Settings:
    """Check the settings needed for a run; raise :class:`ConfigError` otherwise."""
    if require_lastfm:
        if not settings.lastfm.api_key:
            raise ConfigError("A Last.fm API key is required (lastfm.api_key or LASTFM_API_KEY).")
        if not settings.lastfm.user:
            raise ConfigError("A Last.fm user is required (lastfm.user or LASTFM_USER).")

    if settings.store.mode not in STORE_MODES:
        raise ConfigError(
            f"Unknown store mode {settings.store.mode!r}; expected one of {', '.join(STORE_MODES)}."
        )
    if not settings.store.commit_message.strip():
        raise ConfigError("The commit message cannot be empty.")

    if settings.store.mode == "github":
        repository = settings.github.repository
        if not repository:
            raise ConfigError("github.repository (or REPOSITORY) is required in github mode.")
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigError(
                f'The repository was provided in an invalid format ({repository!r}). Use "owner/repo".'
            )
        if not settings.github.token:
            raise ConfigError("A GitHub token is required in github mode (github.token or GH_TOKEN).")

    try:
        parse_locale(settings.readme.locale)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if not settings.readme.date_format.strip():
        raise ConfigError("The date format cannot be empty.")
    return settings


def _apply_environment(settings: Settings, environ: Mapping[str, str]) -> None:
    def _env(*keys: str) -> Optional[str]:
        for key in keys:
            value = environ.get(key)
            if value:
                return value
        return None

    settings.lastfm.api_key = _env("LASTFM_API_KEY") or settings.lastfm.api_key
    settings.lastfm.user = _env("LASTFM_USER") or settings.lastfm.user

    readme_path = _env("README_PATH")
    if readme_path:
        settings.readme.path = settings.root / Path(readme_path).expanduser()
    show_title = _env("SHOW_TITLE")
    if show_title is not None:
        parsed = _as_bool(show_title)
        if parsed is None:
            raise ConfigError(f"SHOW_TITLE must be true or false, got {show_title!r}")
        settings.readme.show_title = parsed
    settings.readme.locale = _env("LOCALE") or settings.readme.locale
    settings.readme.date_format = _env("DATE_FORMAT") or settings.readme.date_format

    settings.store.mode = (_env("LASTFM_README_STORE") or settings.store.mode).lower()
    settings.store.commit_message = _env("COMMIT_MESSAGE") or settings.store.commit_message

    settings.github.token = _env("GH_TOKEN", "GITHUB_TOKEN") or settings.github.token
    settings.github.repository = _env("REPOSITORY", "GITHUB_REPOSITORY") or settings.github.repository


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _read_env_file(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "ConfigError",
    "GitHubConfig",
    "LastFMConfig",
    "ReadmeConfig",
    "Settings",
    "StoreConfig",
    "load_config",
    "validate_settings",
]
