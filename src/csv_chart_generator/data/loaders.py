from __future__ import annotations

import csv
import io
import re
from typing import List, Optional

from csv_chart_generator.core.dataset import Cell, Dataset, Row
from csv_chart_generator.core.errors import MalformedCsvError, WrongExtensionError
from csv_chart_generator.utils.config import DEFAULT_MAX_UPLOAD_BYTES

CSV_SUFFIX = ".csv"

FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$", re.ASCII)
INT_RE = re.compile(r"^\s*-?\d+\s*$", re.ASCII)
BOOL_LITERALS = {"true": True, "TRUE": True, "false": False, "FALSE": False}
MAX_EXACT_INT = 2 ** 53


def check_extension(filename: str) -> None:
    """Reject anything whose name does not end in '.csv' (case-sensitive)."""
    if not str(filename).endswith(CSV_SUFFIX):
        raise WrongExtensionError(str(filename))


def coerce_cell(field: str) -> Cell:
    """
    Type a single raw field (ignoring surrounding whitespace), independent
    of every other field:
      'true'/'TRUE'/'false'/'FALSE' -> boolean
      numeric literal -> number
      anything else, including '' -> text
    Integer literals too large to be exact stay text.
    """
    stripped = field.strip()
    if stripped in BOOL_LITERALS:
        return Cell.boolean(BOOL_LITERALS[stripped])
    if FLOAT_RE.match(field):
        if INT_RE.match(field):
            value = int(stripped)
            if abs(value) > MAX_EXACT_INT:
                return Cell.text(field)
            return Cell.number(value)
        return Cell.number(float(stripped))
    return Cell.text(field)


def make_unique_name(name: str, existing_names: set) -> str:
    base = str(name) if str(name).strip() else "Column"
    if base not in existing_names:
        return base
    i = 2
    while f"{base} ({i})" in existing_names:
        i += 1
    return f"{base} ({i})"


def normalize_headers(raw_headers: List[str]) -> List[str]:
    headers: List[str] = []
    existing: set = set()
    for idx, raw in enumerate(raw_headers, start=1):
        name = str(raw) if str(raw).strip() else f"Column {idx}"
        name = make_unique_name(name, existing)
        existing.add(name)
        headers.append(name)
    return headers


def _decode(file_bytes: bytes) -> str:
    try:
        return file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedCsvError(f"file is not valid UTF-8 text ({exc.reason})") from exc


def _row_is_blank(row: Row) -> bool:
    return all(cell.is_blank for cell in row.values())


def parse_csv_text(text: str) -> Dataset:
    """
    Parse CSV text whose first line holds the headers.

    Any row-level problem (field count differing from the header count,
    unterminated quote) rejects the whole input. Physically empty lines
    are skipped; rows whose fields are all empty are dropped.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    raw_headers: Optional[List[str]] = None
    headers: List[str] = []
    rows: List[Row] = []
    try:
        for record in reader:
            if not record:
                continue
            if raw_headers is None:
                raw_headers = record
                headers = normalize_headers(raw_headers)
                continue
            if len(record) != len(headers):
                kind = "too few" if len(record) < len(headers) else "too many"
                raise MalformedCsvError(
                    f"{kind} fields: expected {len(headers)}, found {len(record)}",
                    row=reader.line_num,
                )
            row: Row = {h: coerce_cell(value) for h, value in zip(headers, record)}
            if _row_is_blank(row):
                continue
            rows.append(row)
    except csv.Error as exc:
        raise MalformedCsvError(str(exc), row=reader.line_num) from exc

    if raw_headers is None:
        return Dataset.empty()
    return Dataset(tuple(headers), tuple(rows))


def ingest(
    file_bytes: bytes,
    filename: str,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> Dataset:
    """Turn an uploaded file into a typed Dataset, or raise a ParseError."""
    check_extension(filename)
    if len(file_bytes) > max_bytes:
        raise MalformedCsvError(f"file is larger than {max_bytes} bytes")
    return parse_csv_text(_decode(file_bytes))
