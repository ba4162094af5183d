from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"
    SCATTER = "scatter"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Chart"

    @property
    def uses_axes(self) -> bool:
        return self is not ChartKind.PIE

    @classmethod
    def parse(cls, value: "str | ChartKind") -> "ChartKind":
        try:
            return cls(str(getattr(value, "value", value)).strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown chart kind: {value!r} (expected one of {choices})") from None


class BindingField(str, Enum):
    X = "x_column"
    Y = "y_column"
    CATEGORY = "category_column"
    PIE_VALUE = "pie_value_column"


# Fields a user may set directly; the pie category is derived.
USER_FIELDS = (BindingField.X, BindingField.Y, BindingField.PIE_VALUE)


@dataclass(frozen=True)
class BindingSet:
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    category_column: Optional[str] = None
    pie_value_column: Optional[str] = None

    def get(self, field: BindingField) -> Optional[str]:
        return getattr(self, BindingField(field).value)

    def with_field(self, field: BindingField, header: Optional[str]) -> "BindingSet":
        return replace(self, **{BindingField(field).value: header})

    def is_valid_for(self, schema: Sequence[str]) -> bool:
        known = set(schema)
        return all(self.get(f) is None or self.get(f) in known for f in BindingField)


def relevant_fields(kind: ChartKind) -> tuple[BindingField, ...]:
    if ChartKind.parse(kind) is ChartKind.PIE:
        return (BindingField.PIE_VALUE, BindingField.CATEGORY)
    return (BindingField.X, BindingField.Y)


def resolve(
    schema: Sequence[str],
    kind: ChartKind,
    prior: Optional[BindingSet] = None,
    previous_kind: Optional[ChartKind] = None,
) -> BindingSet:
    """
    Produce a binding set valid for ``schema``.

    Prior choices that still name a column in the schema are kept; only
    invalid or unset fields fall back to the defaults:
      x         -> schema[0]
      y, value  -> schema[1], or schema[0] for a single-column schema
    The pie category is always schema[0]. When switching from an axis
    chart to pie, a valid y column becomes the pie value.
    """
    kind = ChartKind.parse(kind)
    headers = tuple(schema)
    if not headers:
        return BindingSet()
    prior = prior or BindingSet()
    known = set(headers)

    def keep(value: Optional[str], default: str) -> str:
        return value if value is not None and value in known else default

    default_x = headers[0]
    default_y = headers[1] if len(headers) > 1 else headers[0]

    pie_value = prior.pie_value_column
    if (
        kind is ChartKind.PIE
        and previous_kind is not None
        and ChartKind.parse(previous_kind).uses_axes
        and prior.y_column in known
    ):
        pie_value = prior.y_column

    return BindingSet(
        x_column=keep(prior.x_column, default_x),
        y_column=keep(prior.y_column, default_y),
        category_column=headers[0] if kind is ChartKind.PIE else None,
        pie_value_column=keep(pie_value, default_y),
    )
