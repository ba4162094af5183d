from __future__ import annotations

from typing import Sequence

from csv_chart_generator.core.dataset import Dataset

Schema = tuple[str, ...]


def derive_schema(dataset: Dataset) -> Schema:
    return tuple(dataset.headers)


def schema_changed(old: Sequence[str], new: Sequence[str]) -> bool:
    """True iff the header sequences differ by content or order."""
    return tuple(old) != tuple(new)
