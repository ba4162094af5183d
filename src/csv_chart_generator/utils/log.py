import os
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_PATH_ENV = "CSV_CHART_LOG_PATH"
DEFAULT_LOG_PATH = Path.home() / "CsvChartGenerator_error.log"


def default_log_path() -> Path:
    explicit = os.getenv(LOG_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return DEFAULT_LOG_PATH


def _safe_text(value: Any, max_len: int = 800) -> str:
    try:
        text = str(value)
    except Exception:
        text = repr(value)
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def log_event(context: str, message: str, log_path: Path | None = None) -> None:
    """Append a concise single-line diagnostic event to a log file."""
    path = log_path or default_log_path()
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{datetime.now().isoformat()}  |  {context}  |  {_safe_text(message)}\n")
    except Exception:
        pass


def log_exception(context: str, log_path: Path | None = None) -> None:
    """Append the current exception traceback to a log file."""
    path = log_path or default_log_path()
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write("\n\n" + "=" * 80 + "\n")
            f.write(f"{datetime.now().isoformat()}  |  {context}\n")
            traceback.print_exc(file=f)
    except Exception:
        # Never crash the app due to logging failures
        pass
