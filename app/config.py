"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

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
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class BusinessImportSettings:
    """
    Runtime settings for bulk business CSV imports.
    """

    batch_size: int = 50
    update_duplicates: bool = False
    skip_duplicates: bool = True
    preview_rows: int = 10
    max_upload_bytes: int = 10 * 1024 * 1024
    default_country_code: str = "AU"
    log_row_errors: bool = True


@dataclass(frozen=True)
class BusinessCacheSettings:
    """
    TTLs (milliseconds) for cached business datasets and the sweep interval.

    Featured listings change rarely; random listings are meant to rotate.
    """

    featured_ttl_ms: int = 5 * 60 * 1000
    random_ttl_ms: int = 2 * 60 * 1000
    stats_ttl_ms: int = 15 * 60 * 1000
    cleanup_interval_seconds: int = 5 * 60


@dataclass(frozen=True)
class BusinessQuerySettings:
    """
    Pagination defaults for business listing queries.
    """

    default_limit: int = 50
    max_limit: int = 200
    featured_default_limit: int = 6
    random_default_limit: int = 9


@lru_cache(maxsize=1)
def get_business_import_settings() -> BusinessImportSettings:
    """
    Return cached import settings from environment variables.
    """

    return BusinessImportSettings(
        batch_size=max(1, _get_int_env("BUSINESS_IMPORT_BATCH_SIZE", 50)),
        update_duplicates=_get_bool_env("BUSINESS_IMPORT_UPDATE_DUPLICATES", False),
        skip_duplicates=_get_bool_env("BUSINESS_IMPORT_SKIP_DUPLICATES", True),
        preview_rows=max(1, _get_int_env("BUSINESS_IMPORT_PREVIEW_ROWS", 10)),
        max_upload_bytes=max(1, _get_int_env("BUSINESS_IMPORT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)),
        default_country_code=_get_str_env("BUSINESS_IMPORT_DEFAULT_COUNTRY_CODE", "AU"),
        log_row_errors=_get_bool_env("BUSINESS_IMPORT_LOG_ROW_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_business_cache_settings() -> BusinessCacheSettings:
    """
    Return cached business cache settings from environment variables.
    """

    return BusinessCacheSettings(
        featured_ttl_ms=max(0, _get_int_env("BUSINESS_CACHE_FEATURED_TTL_MS", 5 * 60 * 1000)),
        random_ttl_ms=max(0, _get_int_env("BUSINESS_CACHE_RANDOM_TTL_MS", 2 * 60 * 1000)),
        stats_ttl_ms=max(0, _get_int_env("BUSINESS_CACHE_STATS_TTL_MS", 15 * 60 * 1000)),
        cleanup_interval_seconds=max(1, _get_int_env("BUSINESS_CACHE_CLEANUP_INTERVAL_SECONDS", 5 * 60)),
    )


@lru_cache(maxsize=1)
def get_business_query_settings() -> BusinessQuerySettings:
    """
    Return cached query pagination settings from environment variables.
    """

    max_limit = max(1, _get_int_env("BUSINESS_QUERY_MAX_LIMIT", 200))
    return BusinessQuerySettings(
        default_limit=min(max_limit, max(1, _get_int_env("BUSINESS_QUERY_DEFAULT_LIMIT", 50))),
        max_limit=max_limit,
        featured_default_limit=max(1, _get_int_env("BUSINESS_FEATURED_DEFAULT_LIMIT", 6)),
        random_default_limit=max(1, _get_int_env("BUSINESS_RANDOM_DEFAULT_LIMIT", 9)),
    )
