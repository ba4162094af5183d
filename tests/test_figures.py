from __future__ import annotations

import numpy as np
import pytest
from matplotlib.figure import Figure

from csv_chart_generator.core.bindings import ChartKind
from csv_chart_generator.core.dataset import Dataset
from csv_chart_generator.core.datasets import load_dataset
from csv_chart_generator.core.plotting import COLOR_PALETTE, prepare_chart_data
from csv_chart_generator.core.state import (
    DisplaySettings,
    SessionState,
    set_chart_kind,
    set_display_option,
)
from csv_chart_generator.plotting.figures import (
    build_matplotlib_figure,
    build_plotly_figure,
    numeric_values,
    palette_colors,
    pie_size,
)


@pytest.fixture
def fruit_session(session: SessionState) -> SessionState:
    dataset = Dataset.from_records(
        ["fruit", "count", "weight"],
        [
            {"fruit": "apple", "count": 3, "weight": 1.5},
            {"fruit": "pear", "count": "n/a", "weight": 2.0},
            {"fruit": "plum", "count": -1, "weight": None},
        ],
    )
    load_dataset(session, dataset)
    return session


def test_numeric_values_coerce_text_to_nan(fruit_session: SessionState) -> None:
    chart = prepare_chart_data(fruit_session)

    values = numeric_values(chart, "count")

    assert values[0] == 3.0
    assert np.isnan(values[1])
    assert values[2] == -1.0


@pytest.mark.parametrize("kind", list(ChartKind))
def test_matplotlib_surface_for_every_kind(fruit_session: SessionState, kind: ChartKind) -> None:
    set_chart_kind(fruit_session, kind)
    set_display_option(fruit_session, "width", 800)
    set_display_option(fruit_session, "height", 500)

    fig = build_matplotlib_figure(prepare_chart_data(fruit_session), fruit_session.display)

    assert isinstance(fig, Figure)
    width, height = fig.get_size_inches() * fig.dpi
    if kind is ChartKind.PIE:
        assert (round(width), round(height)) == (600, 500)
    else:
        assert (round(width), round(height)) == (800, 500)
        ax = fig.axes[0]
        assert ax.get_xlabel() == "fruit"
        assert ax.get_ylabel() == "count"


def test_matplotlib_pie_without_positive_values(session: SessionState) -> None:
    load_dataset(session, Dataset.from_records(["k", "v"], [{"k": "a", "v": 0}]))
    set_chart_kind(session, "pie")

    fig = build_matplotlib_figure(prepare_chart_data(session), session.display)

    assert fig.axes[0].texts[0].get_text() == "No positive values to plot"


def test_plotly_traces_follow_chart_kind(fruit_session: SessionState) -> None:
    expected = {
        ChartKind.BAR: "bar",
        ChartKind.LINE: "scatter",
        ChartKind.AREA: "scatter",
        ChartKind.SCATTER: "scatter",
        ChartKind.PIE: "pie",
    }
    for kind, trace_type in expected.items():
        set_chart_kind(fruit_session, kind)
        fig = build_plotly_figure(prepare_chart_data(fruit_session), fruit_session.display)
        assert fig.data[0].type == trace_type

    set_chart_kind(fruit_session, ChartKind.AREA)
    fig = build_plotly_figure(prepare_chart_data(fruit_session), fruit_session.display)
    assert fig.data[0].fill == "tozeroy"


def test_plotly_pie_uses_first_column_names(fruit_session: SessionState) -> None:
    set_chart_kind(fruit_session, ChartKind.PIE)

    fig = build_plotly_figure(prepare_chart_data(fruit_session), fruit_session.display)
    pie = fig.data[0]

    assert list(pie.labels) == ["apple", "pear", "plum"]
    assert list(pie.values) == [3.0, 0.0, 0.0]


def test_plotly_layout_uses_display_settings(fruit_session: SessionState) -> None:
    set_display_option(fruit_session, "show_legend", False)
    set_display_option(fruit_session, "title", "Fruit")

    fig = build_plotly_figure(prepare_chart_data(fruit_session), fruit_session.display)

    assert fig.layout.showlegend is False
    assert fig.layout.title.text == "Fruit"
    assert fig.layout.width == 700


def test_pie_size_and_palette() -> None:
    assert pie_size(DisplaySettings(width=1200, height=300)) == (600, 350)
    colors = palette_colors(17)
    assert colors[0] == COLOR_PALETTE[0]
    assert colors[15] == COLOR_PALETTE[0]
