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


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class CSVImportSettings:
    """
    Runtime settings for the clinic CSV import.
    """

    preview_rows: int = 5
    batch_size: int = 500
    max_errors_in_response: int = 10
    max_upload_bytes: int = 10 * 1024 * 1024
    upload_dir: str = "data/uploads"
    log_row_errors: bool = True
    catalogs_file: str | None = None


@dataclass(frozen=True)
class ReportSettings:
    """
    Constants used by the report endpoints.
    """

    estimated_revenue_per_appointment: int = 50000
    doctor_stats_window_days: int = 30


@lru_cache(maxsize=1)
def get_csv_import_settings() -> CSVImportSettings:
    """
    Return cached CSV import settings from environment variables.
    """

    return CSVImportSettings(
        preview_rows=max(1, _get_int_env("CSV_IMPORT_PREVIEW_ROWS", 5)),
        batch_size=max(1, _get_int_env("CSV_IMPORT_BATCH_SIZE", 500)),
        max_errors_in_response=max(0, _get_int_env("CSV_IMPORT_MAX_ERRORS_IN_RESPONSE", 10)),
        max_upload_bytes=max(1, _get_int_env("CSV_IMPORT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)),
        upload_dir=_get_str_env("CSV_IMPORT_UPLOAD_DIR", "data/uploads"),
        log_row_errors=_get_bool_env("CSV_IMPORT_LOG_ROW_ERRORS", True),
        catalogs_file=_get_optional_str_env("CSV_IMPORT_CATALOGS_FILE"),
    )


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report settings from environment variables.
    """

    return ReportSettings(
        estimated_revenue_per_appointment=max(
            0, _get_int_env("REPORT_ESTIMATED_REVENUE_PER_APPOINTMENT", 50000)
        ),
        doctor_stats_window_days=max(1, _get_int_env("REPORT_DOCTOR_STATS_WINDOW_DAYS", 30)),
    )
