from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from csv_chart_generator.core.bindings import ChartKind
from csv_chart_generator.core.dataset import Cell, CellKind, Dataset, Row
from csv_chart_generator.core.state import DisplaySettings, SessionState
from csv_chart_generator.utils.config import DEFAULT_PREVIEW_ROWS, DEFAULT_ROW_LIMIT

CHART_ROW_LIMIT = DEFAULT_ROW_LIMIT
TABLE_PREVIEW_ROWS = DEFAULT_PREVIEW_ROWS

COLOR_PALETTE = (
    "#0078D4", "#2B88D8", "#71AFE5", "#B4E0FA", "#E5E5E5",
    "#FFB900", "#FF8C00", "#E81123", "#B4009E", "#5C2D91",
    "#00B294", "#0099BC", "#BAD80A", "#FFF100", "#E3008C",
)


def derive_view(dataset: Dataset, limit_rows: bool, row_limit: int = CHART_ROW_LIMIT) -> list[Row]:
    """Rows fed to the chart: the first ``row_limit`` rows when limiting, else all, in order."""
    if limit_rows:
        return list(dataset.rows[:row_limit])
    return list(dataset.rows)


def table_preview(dataset: Dataset, show_all: bool, preview_rows: int = TABLE_PREVIEW_ROWS) -> list[Row]:
    if show_all:
        return list(dataset.rows)
    return list(dataset.rows[:preview_rows])


def format_cell(cell: Cell) -> str:
    if cell.kind is CellKind.ABSENT:
        return "N/A"
    if cell.kind is CellKind.BOOLEAN:
        return "true" if cell.value else "false"
    if cell.kind is CellKind.NUMBER:
        value = cell.value
        if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return str(value)
    return str(cell.value)


@dataclass
class ChartData:
    kind: ChartKind
    rows: list[Row] = field(default_factory=list)
    headers: tuple[str, ...] = ()
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    name_column: Optional[str] = None
    value_column: Optional[str] = None
    x_label: str = "X Axis"
    y_label: str = "Y Axis"
    title: str = ""
    total_rows: int = 0
    truncated: bool = False


@dataclass
class TablePreview:
    headers: tuple[str, ...] = ()
    cells: list[list[str]] = field(default_factory=list)
    total_rows: int = 0
    showing_all: bool = False

    @property
    def caption(self) -> str:
        if self.showing_all:
            return f"Data Preview (All {self.total_rows} Rows)"
        return f"Data Preview (First {len(self.cells)} Rows)"

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.cells, columns=list(self.headers))


def prepare_chart_data(state: SessionState) -> ChartData:
    display: DisplaySettings = state.display
    row_limit = state.config.row_limit
    rows = derive_view(state.dataset, display.limit_rows, row_limit)
    bindings = state.bindings
    kind = state.chart_kind
    return ChartData(
        kind=kind,
        rows=rows,
        headers=state.schema,
        x_column=bindings.x_column if kind.uses_axes else None,
        y_column=bindings.y_column if kind.uses_axes else None,
        name_column=bindings.category_column if kind is ChartKind.PIE else None,
        value_column=bindings.pie_value_column if kind is ChartKind.PIE else None,
        x_label=bindings.x_column or "X Axis",
        y_label=bindings.y_column or "Y Axis",
        title=display.title,
        total_rows=len(state.dataset),
        truncated=display.limit_rows and len(state.dataset) > row_limit,
    )


def prepare_table_preview(state: SessionState) -> TablePreview:
    show_all = state.display.show_all_table_rows
    rows = table_preview(state.dataset, show_all, state.config.preview_rows)
    cols = state.schema
    return TablePreview(
        headers=cols,
        cells=[[format_cell(row[h]) for h in cols] for row in rows],
        total_rows=len(state.dataset),
        showing_all=show_all,
    )
