from __future__ import annotations

import time
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

from csv_chart_generator.core.bindings import (
    USER_FIELDS,
    BindingField,
    BindingSet,
    ChartKind,
    resolve,
)
from csv_chart_generator.core.dataset import Dataset
from csv_chart_generator.core.errors import InvalidBindingError
from csv_chart_generator.core.schema import Schema
from csv_chart_generator.utils.config import AppConfig
from csv_chart_generator.utils.log import log_event

WIDTH_RANGE = (400, 1200)
HEIGHT_RANGE = (300, 800)


@dataclass
class DisplaySettings:
    title: str = "Data Visualization"
    show_legend: bool = True
    show_grid: bool = True
    limit_rows: bool = True
    show_all_table_rows: bool = False
    show_table: bool = True
    width: int = 700
    height: int = 400


DISPLAY_KEYS = tuple(f.name for f in fields(DisplaySettings))


@dataclass
class SessionState:
    """Everything one user session can see and change. Nothing is persisted."""

    dataset: Dataset = field(default_factory=Dataset.empty)
    schema: Schema = ()
    bindings: BindingSet = field(default_factory=BindingSet)
    chart_kind: ChartKind = ChartKind.BAR
    display: DisplaySettings = field(default_factory=DisplaySettings)
    source_name: str = ""
    loading: bool = False
    error: Optional[str] = None
    error_set_at: Optional[float] = None
    ingest_generation: int = 0
    dataset_version: int = 0
    config: AppConfig = field(default_factory=AppConfig)

    @property
    def has_data(self) -> bool:
        return not self.dataset.is_empty

    def clear(self) -> None:
        """Drop the dataset and supersede any ingestion still in flight."""
        self.ingest_generation += 1
        self.dataset_version += 1
        self.dataset = Dataset.empty()
        self.schema = ()
        self.bindings = BindingSet()
        self.chart_kind = ChartKind.BAR
        self.display = DisplaySettings()
        self.source_name = ""
        self.loading = False
        self.error = None
        self.error_set_at = None


def set_chart_kind(state: SessionState, kind: "str | ChartKind") -> None:
    new_kind = ChartKind.parse(kind)
    previous = state.chart_kind
    state.bindings = resolve(state.schema, new_kind, state.bindings, previous_kind=previous)
    state.chart_kind = new_kind


def set_binding(state: SessionState, binding: "str | BindingField", header: str) -> None:
    try:
        binding_field = BindingField(binding)
    except ValueError:
        raise KeyError(f"Unknown binding field: {binding!r}") from None
    if binding_field not in USER_FIELDS:
        raise KeyError(f"Binding field is derived and cannot be set: {binding_field.value}")
    if header not in state.schema:
        log_event("set_binding rejected", f"{binding_field.value}={header!r}", state.config.log_path)
        raise InvalidBindingError(binding_field.value, str(header))
    state.bindings = state.bindings.with_field(binding_field, header)


def _clamp(key: str, value: Any, bounds: tuple[int, int], log_path) -> int:
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}") from None
    low, high = bounds
    clamped = max(low, min(high, number))
    if clamped != number:
        log_event("set_display_option clamped", f"{key}={number} -> {clamped}", log_path)
    return clamped


def set_display_option(state: SessionState, key: str, value: Any) -> None:
    if key not in DISPLAY_KEYS:
        raise KeyError(f"Unknown display option: {key!r}")
    log_path = state.config.log_path
    if key == "width":
        value = _clamp(key, value, WIDTH_RANGE, log_path)
    elif key == "height":
        value = _clamp(key, value, HEIGHT_RANGE, log_path)
    elif key == "title":
        value = "" if value is None else str(value)
    else:
        value = bool(value)
    state.display = replace(state.display, **{key: value})


def set_error(state: SessionState, message: str, now: Optional[float] = None) -> None:
    state.error = str(message)
    state.error_set_at = time.monotonic() if now is None else now


def clear_error(state: SessionState) -> None:
    state.error = None
    state.error_set_at = None


def visible_error(state: SessionState, now: Optional[float] = None) -> Optional[str]:
    """Return the current error, clearing it once it has been shown long enough."""
    if state.error is None:
        return None
    now = time.monotonic() if now is None else now
    if state.error_set_at is not None and now - state.error_set_at >= state.config.error_timeout_s:
        clear_error(state)
        return None
    return state.error
