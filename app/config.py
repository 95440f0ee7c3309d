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


@dataclass(frozen=True)
class AnalyticsSettings:
    """
    Runtime settings for analytics queries and exports.
    """

    export_row_limit: int = 50_000
    default_lookback_days: int = 30
    top_reasons_limit: int = 10


@lru_cache(maxsize=1)
def get_analytics_settings() -> AnalyticsSettings:
    """
    Return cached analytics settings from environment variables.
    """

    return AnalyticsSettings(
        export_row_limit=max(1, _get_int_env("EXPORT_ROW_LIMIT", 50_000)),
        default_lookback_days=max(1, _get_int_env("DEFAULT_LOOKBACK_DAYS", 30)),
        top_reasons_limit=max(1, _get_int_env("TOP_REASONS_LIMIT", 10)),
    )
