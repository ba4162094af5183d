from __future__ import annotations

import itertools

import pytest

from csv_chart_generator.core.bindings import (
    BindingField,
    BindingSet,
    ChartKind,
    relevant_fields,
    resolve,
)

SCHEMA = ("region", "cost", "revenue")


def test_empty_schema_unsets_everything() -> None:
    prior = BindingSet(x_column="gone", y_column="gone")

    assert resolve((), ChartKind.BAR, prior) == BindingSet()


def test_defaults_use_first_two_headers() -> None:
    bindings = resolve(SCHEMA, ChartKind.LINE)

    assert bindings == BindingSet(
        x_column="region",
        y_column="cost",
        category_column=None,
        pie_value_column="cost",
    )


def test_single_header_collapses_every_field() -> None:
    bindings = resolve(("only",), ChartKind.PIE)

    assert bindings.x_column == "only"
    assert bindings.y_column == "only"
    assert bindings.pie_value_column == "only"
    assert bindings.category_column == "only"


def test_valid_prior_choices_are_preserved() -> None:
    prior = BindingSet(x_column="revenue", y_column="region", pie_value_column="revenue")

    bindings = resolve(SCHEMA, ChartKind.SCATTER, prior)

    assert bindings.x_column == "revenue"
    assert bindings.y_column == "region"
    assert bindings.pie_value_column == "revenue"


def test_only_invalid_fields_are_repaired() -> None:
    prior = BindingSet(x_column="revenue", y_column="profit")

    bindings = resolve(SCHEMA, ChartKind.BAR, prior)

    assert bindings.x_column == "revenue"
    assert bindings.y_column == "cost"


def test_pie_category_is_always_the_first_header() -> None:
    prior = BindingSet(category_column="revenue", pie_value_column="revenue")

    bindings = resolve(SCHEMA, ChartKind.PIE, prior)

    assert bindings.category_column == "region"
    assert bindings.pie_value_column == "revenue"


def test_switching_to_pie_carries_the_y_column() -> None:
    prior = BindingSet(x_column="region", y_column="revenue", pie_value_column="cost")

    bindings = resolve(SCHEMA, ChartKind.PIE, prior, previous_kind=ChartKind.BAR)

    assert bindings.pie_value_column == "revenue"
    assert bindings.category_column == "region"


def test_switching_back_from_pie_keeps_axis_choices() -> None:
    prior = BindingSet(x_column="revenue", y_column="region", category_column="region", pie_value_column="cost")

    bindings = resolve(SCHEMA, ChartKind.AREA, prior, previous_kind=ChartKind.PIE)

    assert bindings.x_column == "revenue"
    assert bindings.y_column == "region"
    assert bindings.category_column is None


def _candidate_binding_sets():
    values = (None, "region", "revenue", "missing")
    for x, y, pie in itertools.product(values, repeat=3):
        yield BindingSet(x_column=x, y_column=y, pie_value_column=pie)


@pytest.mark.parametrize("kind", list(ChartKind))
def test_resolve_is_idempotent_and_valid(kind: ChartKind) -> None:
    for prior in _candidate_binding_sets():
        once = resolve(SCHEMA, kind, prior)
        assert resolve(SCHEMA, kind, once) == once
        assert once.is_valid_for(SCHEMA)


def test_chart_kind_parsing_and_labels() -> None:
    assert ChartKind.parse("Pie") is ChartKind.PIE
    assert ChartKind.parse(ChartKind.AREA) is ChartKind.AREA
    assert ChartKind.SCATTER.label == "Scatter Chart"
    with pytest.raises(ValueError):
        ChartKind.parse("radar")


def test_relevant_fields() -> None:
    assert relevant_fields(ChartKind.PIE) == (BindingField.PIE_VALUE, BindingField.CATEGORY)
    assert relevant_fields(ChartKind.BAR) == (BindingField.X, BindingField.Y)


def test_binding_set_helpers() -> None:
    bindings = BindingSet().with_field(BindingField.Y, "cost")

    assert bindings.get(BindingField.Y) == "cost"
    assert bindings.get("y_column") == "cost"
    assert not BindingSet(x_column="nope").is_valid_for(SCHEMA)
