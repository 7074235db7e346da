"""
logo_importer/config.py

Environment-driven configuration for the logo importer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 LogoImporter/1.0"
)


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _project_root() / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ImporterSettings:
    """
    Runtime settings for the scrape + reconcile pipeline.
    """

    data_dir: str = "data"
    input_file: str = "data/in.csv"
    cache_filename: str = "cache.json"
    log_filename: str = "log.json"
    concurrency_limit: int = 15
    favicon_on_home_failure: bool = True

    @property
    def cache_path(self) -> Path:
        return Path(self.data_dir) / self.cache_filename

    @property
    def log_path(self) -> Path:
        return Path(self.data_dir) / self.log_filename


@dataclass(frozen=True)
class ScrapeHTTPSettings:
    """
    HTTP behavior for homepage, manifest and asset fetches.
    """

    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = 15.0
    max_retries: int = 1
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class StoryblokSettings:
    """
    Storyblok API endpoints and request behavior.
    """

    management_base_url: str = "https://mapi.storyblok.com/v1"
    cdn_base_url: str = "https://api.storyblok.com/v2"
    rate_limit_per_second: float = 3.0
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_initial_seconds: float = 1.0
    backoff_multiplier: float = 2.0


@lru_cache(maxsize=1)
def get_importer_settings() -> ImporterSettings:
    """
    Return cached importer settings from environment variables.
    """

    return ImporterSettings(
        data_dir=_get_str_env("LOGO_IMPORT_DATA_DIR", "data"),
        input_file=_get_str_env("LOGO_IMPORT_INPUT_FILE", "data/in.csv"),
        cache_filename=_get_str_env("LOGO_IMPORT_CACHE_FILENAME", "cache.json"),
        log_filename=_get_str_env("LOGO_IMPORT_LOG_FILENAME", "log.json"),
        concurrency_limit=max(1, _get_int_env("LOGO_IMPORT_CONCURRENCY", 15)),
        favicon_on_home_failure=_get_bool_env("LOGO_IMPORT_FAVICON_ON_HOME_FAILURE", True),
    )


@lru_cache(maxsize=1)
def get_scrape_http_settings() -> ScrapeHTTPSettings:
    """
    Return scraping HTTP settings from environment variables.
    """

    return ScrapeHTTPSettings(
        user_agent=_get_str_env("LOGO_IMPORT_USER_AGENT", DEFAULT_USER_AGENT),
        timeout_seconds=max(1.0, _get_float_env("LOGO_IMPORT_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("LOGO_IMPORT_MAX_RETRIES", 1)),
        backoff_initial_seconds=max(0.1, _get_float_env("LOGO_IMPORT_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("LOGO_IMPORT_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_storyblok_settings() -> StoryblokSettings:
    """
    Return Storyblok client settings from environment variables.
    """

    return StoryblokSettings(
        management_base_url=_get_str_env(
            "STORYBLOK_MANAGEMENT_BASE_URL", "https://mapi.storyblok.com/v1"
        ).rstrip("/"),
        cdn_base_url=_get_str_env("STORYBLOK_CDN_BASE_URL", "https://api.storyblok.com/v2").rstrip("/"),
        rate_limit_per_second=max(0.1, _get_float_env("STORYBLOK_RATE_LIMIT_PER_SECOND", 3.0)),
        timeout_seconds=max(1.0, _get_float_env("STORYBLOK_TIMEOUT_SECONDS", 30.0)),
        max_retries=max(0, _get_int_env("STORYBLOK_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("STORYBLOK_BACKOFF_INITIAL_SECONDS", 1.0)),
        backoff_multiplier=max(1.0, _get_float_env("STORYBLOK_BACKOFF_MULTIPLIER", 2.0)),
    )
