from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Union


CellRaw = Union[int, float, bool, str, None]


class CellKind(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"
    ABSENT = "absent"


@dataclass(frozen=True)
class Cell:
    """One typed CSV field. Absent is a separate kind from empty text."""

    kind: CellKind
    value: CellRaw = None

    @classmethod
    def number(cls, value: Union[int, float]) -> "Cell":
        return cls(CellKind.NUMBER, value)

    @classmethod
    def boolean(cls, value: bool) -> "Cell":
        return cls(CellKind.BOOLEAN, bool(value))

    @classmethod
    def text(cls, value: str) -> "Cell":
        return cls(CellKind.TEXT, str(value))

    @classmethod
    def absent(cls) -> "Cell":
        return ABSENT

    @property
    def is_blank(self) -> bool:
        return self.kind is CellKind.ABSENT or (self.kind is CellKind.TEXT and self.value == "")

    @property
    def raw(self) -> CellRaw:
        return None if self.kind is CellKind.ABSENT else self.value


ABSENT = Cell(CellKind.ABSENT)

Row = Mapping[str, Cell]


@dataclass(frozen=True)
class Dataset:
    """Rows and their headers, fixed together at ingestion time."""

    headers: tuple[str, ...] = ()
    rows: tuple[Row, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        headers = tuple(str(h) for h in self.headers)
        if len(set(headers)) != len(headers):
            raise ValueError("Dataset headers must be unique.")
        if self.rows and not headers:
            raise ValueError("A non-empty dataset needs at least one header.")
        known = set(headers)
        rows: list[Row] = []
        for idx, row in enumerate(self.rows):
            extra = set(row.keys()) - known
            if extra:
                raise ValueError(f"Row {idx} has unknown columns: {sorted(extra)}")
            rows.append(MappingProxyType({h: row.get(h, ABSENT) for h in headers}))
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "rows", tuple(rows))

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    @classmethod
    def from_records(
        cls,
        headers: Iterable[str],
        records: Iterable[Mapping[str, Any]],
    ) -> "Dataset":
        """Build a dataset from plain Python values (None means absent)."""
        rows = []
        for rec in records:
            rows.append({str(k): _cell_from_raw(v) for k, v in rec.items()})
        return cls(tuple(headers), tuple(rows))

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def _cell_from_raw(value: Any) -> Cell:
    if isinstance(value, Cell):
        return value
    if value is None:
        return ABSENT
    if isinstance(value, bool):
        return Cell.boolean(value)
    if isinstance(value, (int, float)):
        return Cell.number(value)
    return Cell.text(str(value))
