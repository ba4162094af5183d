from __future__ import annotations

from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from csv_chart_generator.core.dataset import Dataset  # noqa: E402
from csv_chart_generator.core.datasets import load_dataset  # noqa: E402
from csv_chart_generator.core.state import SessionState  # noqa: E402
from csv_chart_generator.utils.config import AppConfig  # noqa: E402

SALES_CSV = (
    "region,cost,revenue,active\n"
    "north,10,120.5,true\n"
    "south,12,98,false\n"
    "east,,75,TRUE\n"
    "west,9,n/a,\n"
)


@pytest.fixture(autouse=True)
def log_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "chart.log"
    monkeypatch.setenv("CSV_CHART_LOG_PATH", str(path))
    return path


@pytest.fixture
def sales_csv() -> bytes:
    return SALES_CSV.encode("utf-8")


@pytest.fixture
def session() -> SessionState:
    return SessionState(config=AppConfig())


def make_dataset(headers: list[str], count: int) -> Dataset:
    records = [{h: i * 10 + j for j, h in enumerate(headers)} for i in range(count)]
    return Dataset.from_records(headers, records)


@pytest.fixture
def loaded_session(session: SessionState) -> SessionState:
    load_dataset(session, make_dataset(["region", "cost", "revenue"], 5), "sales.csv")
    return session
