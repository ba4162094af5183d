from __future__ import annotations

from typing import Optional

from csv_chart_generator.core.bindings import BindingSet, ChartKind, resolve
from csv_chart_generator.core.dataset import Dataset
from csv_chart_generator.core.errors import ParseError
from csv_chart_generator.core.schema import derive_schema, schema_changed
from csv_chart_generator.core.state import DisplaySettings, SessionState, clear_error, set_error
from csv_chart_generator.data.loaders import ingest
from csv_chart_generator.utils.log import log_event


def load_dataset(state: SessionState, dataset: Dataset, source_name: str = "") -> None:
    """Replace the dataset and reset everything derived from the previous one."""
    schema = derive_schema(dataset)
    if schema_changed(state.schema, schema):
        log_event("load_dataset", f"schema {list(state.schema)} -> {list(schema)}", state.config.log_path)
    bindings = resolve(schema, ChartKind.BAR, BindingSet())
    state.dataset = dataset
    state.schema = schema
    state.bindings = bindings
    state.chart_kind = ChartKind.BAR
    state.display = DisplaySettings()
    state.source_name = str(source_name)
    state.dataset_version += 1
    clear_error(state)


def begin_ingestion(state: SessionState) -> int:
    """
    Mark an ingestion as in flight and return its token.

    A newer call supersedes any ingestion still running: only the result
    carrying the latest token is applied (cancel-and-replace).
    """
    state.ingest_generation += 1
    state.loading = True
    return state.ingest_generation


def _is_current(state: SessionState, token: int, context: str) -> bool:
    if token != state.ingest_generation:
        log_event(context, f"discarding stale result {token} (current {state.ingest_generation})", state.config.log_path)
        return False
    return True


def complete_ingestion(state: SessionState, token: int, dataset: Dataset, source_name: str = "") -> bool:
    if not _is_current(state, token, "complete_ingestion"):
        return False
    state.loading = False
    load_dataset(state, dataset, source_name)
    log_event(
        "ingest",
        f"{source_name or '<unnamed>'}: {len(dataset)} rows x {len(dataset.headers)} columns",
        state.config.log_path,
    )
    return True


def fail_ingestion(state: SessionState, token: int, message: str, now: Optional[float] = None) -> bool:
    if not _is_current(state, token, "fail_ingestion"):
        return False
    state.loading = False
    set_error(state, message, now=now)
    log_event("ingest rejected", message, state.config.log_path)
    return True


def ingest_upload(state: SessionState, file_bytes: bytes, filename: str) -> bool:
    """Parse an uploaded file and apply it; parse failures become the session error."""
    token = begin_ingestion(state)
    try:
        dataset = ingest(file_bytes, filename, max_bytes=state.config.max_upload_bytes)
    except ParseError as exc:
        fail_ingestion(state, token, str(exc))
        return False
    return complete_ingestion(state, token, dataset, filename)
