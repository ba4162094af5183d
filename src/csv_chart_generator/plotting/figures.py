from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from csv_chart_generator.core.bindings import ChartKind
from csv_chart_generator.core.plotting import COLOR_PALETTE, ChartData, format_cell
from csv_chart_generator.core.state import DisplaySettings

DPI = 100
PIE_SIZE_RANGE = (350, 600)
MAX_X_TICKS = 20


def pie_size(display: DisplaySettings) -> tuple[int, int]:
    low, high = PIE_SIZE_RANGE
    return (
        max(low, min(display.width, high)),
        max(low, min(display.height, high)),
    )


def palette_colors(count: int) -> list[str]:
    return [COLOR_PALETTE[i % len(COLOR_PALETTE)] for i in range(count)]


def numeric_values(chart: ChartData, column: Optional[str]) -> np.ndarray:
    """Numeric values for a column; text and absent cells become NaN."""
    if not column:
        return np.full(len(chart.rows), np.nan)
    raw = []
    for row in chart.rows:
        value = row[column].raw
        raw.append(float(value) if isinstance(value, bool) else value)
    return pd.to_numeric(pd.Series(raw, dtype=object), errors="coerce").to_numpy(dtype=float)


def label_values(chart: ChartData, column: Optional[str]) -> list[str]:
    if not column:
        return [""] * len(chart.rows)
    return [format_cell(row[column]) for row in chart.rows]


def _pie_slices(chart: ChartData) -> tuple[list[str], np.ndarray]:
    names = label_values(chart, chart.name_column)
    values = numeric_values(chart, chart.value_column)
    values = np.where(np.isfinite(values) & (values > 0), values, 0.0)
    return names, values


def build_matplotlib_figure(chart: ChartData, display: DisplaySettings) -> Figure:
    """Render prepared chart data onto a matplotlib Figure sized in pixels."""
    if chart.kind is ChartKind.PIE:
        width, height = pie_size(display)
    else:
        width, height = display.width, display.height
    fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax = fig.add_subplot(111)
    if chart.title:
        ax.set_title(chart.title)

    if chart.kind is ChartKind.PIE:
        names, values = _pie_slices(chart)
        if values.sum() <= 0:
            ax.text(0.5, 0.5, "No positive values to plot", ha="center", va="center", transform=ax.transAxes)
            ax.set_axis_off()
            return fig
        wedges, _texts = ax.pie(values, colors=palette_colors(len(values)), startangle=90, counterclock=False)
        ax.axis("equal")
        if display.show_legend:
            ax.legend(wedges, names, loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=min(len(names), 5), fontsize=8)
        return fig

    y = numeric_values(chart, chart.y_column)
    color = COLOR_PALETTE[0]
    if chart.kind is ChartKind.SCATTER:
        x = numeric_values(chart, chart.x_column)
        ax.scatter(x, y, color=color, label=chart.y_label)
    else:
        positions = np.arange(len(chart.rows))
        labels = label_values(chart, chart.x_column)
        if chart.kind is ChartKind.BAR:
            ax.bar(positions, y, color=color, label=chart.y_label)
        elif chart.kind is ChartKind.LINE:
            ax.plot(positions, y, color=color, label=chart.y_label)
        else:
            ax.fill_between(positions, np.nan_to_num(y), color=color, alpha=0.6, label=chart.y_label)
            ax.plot(positions, y, color=color)
        step = max(1, int(np.ceil(len(positions) / MAX_X_TICKS)))
        ax.set_xticks(positions[::step])
        ax.set_xticklabels(labels[::step], rotation=45 if step > 1 else 0, ha="right" if step > 1 else "center")
        ax.yaxis.set_major_locator(MaxNLocator(nbins=8))

    ax.set_xlabel(chart.x_label)
    ax.set_ylabel(chart.y_label)
    if display.show_grid:
        ax.grid(True, linestyle="--", alpha=0.6)
    if display.show_legend:
        ax.legend()
    fig.tight_layout()
    return fig


def build_plotly_figure(chart: ChartData, display: DisplaySettings) -> go.Figure:
    """Interactive rendering of the same prepared chart data."""
    fig = go.Figure()
    if chart.kind is ChartKind.PIE:
        width, height = pie_size(display)
        names, values = _pie_slices(chart)
        fig.add_trace(go.Pie(
            labels=names,
            values=values,
            marker=dict(colors=palette_colors(len(values))),
            sort=False,
        ))
        fig.update_layout(
            title=chart.title,
            width=width,
            height=height,
            showlegend=display.show_legend,
            legend=dict(orientation="h"),
        )
        return fig

    y = numeric_values(chart, chart.y_column)
    color = COLOR_PALETTE[0]
    if chart.kind is ChartKind.SCATTER:
        fig.add_trace(go.Scatter(
            x=numeric_values(chart, chart.x_column), y=y,
            mode="markers", name=chart.y_label, marker=dict(color=color),
        ))
    else:
        x = label_values(chart, chart.x_column)
        if chart.kind is ChartKind.BAR:
            fig.add_trace(go.Bar(x=x, y=y, name=chart.y_label, marker_color=color))
        elif chart.kind is ChartKind.LINE:
            fig.add_trace(go.Scatter(x=x, y=y, mode="lines", name=chart.y_label, line=dict(color=color)))
        else:
            fig.add_trace(go.Scatter(
                x=x, y=y, mode="lines", fill="tozeroy",
                name=chart.y_label, line=dict(color=color),
            ))
    fig.update_layout(
        title=chart.title,
        width=display.width,
        height=display.height,
        showlegend=display.show_legend,
        xaxis_title=chart.x_label,
        yaxis_title=chart.y_label,
    )
    fig.update_xaxes(showgrid=display.show_grid)
    fig.update_yaxes(showgrid=display.show_grid)
    return fig
