from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from csv_chart_generator.utils.log import default_log_path

ROW_LIMIT_ENV = "CSV_CHART_ROW_LIMIT"
PREVIEW_ROWS_ENV = "CSV_CHART_PREVIEW_ROWS"
ERROR_TIMEOUT_ENV = "CSV_CHART_ERROR_TIMEOUT"
MAX_UPLOAD_BYTES_ENV = "CSV_CHART_MAX_UPLOAD_BYTES"

DEFAULT_ROW_LIMIT = 100
DEFAULT_PREVIEW_ROWS = 50
DEFAULT_ERROR_TIMEOUT_S = 6.0
DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    row_limit: int = DEFAULT_ROW_LIMIT
    preview_rows: int = DEFAULT_PREVIEW_ROWS
    error_timeout_s: float = DEFAULT_ERROR_TIMEOUT_S
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_path: Path | None = None


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_app_config() -> AppConfig:
    return AppConfig(
        row_limit=_positive_int(ROW_LIMIT_ENV, DEFAULT_ROW_LIMIT),
        preview_rows=_positive_int(PREVIEW_ROWS_ENV, DEFAULT_PREVIEW_ROWS),
        error_timeout_s=_positive_float(ERROR_TIMEOUT_ENV, DEFAULT_ERROR_TIMEOUT_S),
        max_upload_bytes=_positive_int(MAX_UPLOAD_BYTES_ENV, DEFAULT_MAX_UPLOAD_BYTES),
        log_path=default_log_path(),
    )
