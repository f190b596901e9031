# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from sheetdash.logging.init import reset_logging
from sheetdash.models import JoinKind, JoinSpec, NormalizedTable, RawTable


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def orders_raw() -> RawTable:
    return RawTable(
        id="t-orders",
        name="orders",
        grid=[
            ["order_id", "customer_id", "region", "amount"],
            ["1", "10", "east", "100"],
            ["2", "11", "west", "50.5"],
            ["3", "10", "east", "25"],
            ["4", "99", "north", "10"],
        ],
    )


@pytest.fixture()
def customers_raw() -> RawTable:
    return RawTable(
        id="t-customers",
        name="customers",
        grid=[
            ["id", "segment"],
            ["10", "Consumer"],
            ["11", "Corporate"],
            ["12", "Home Office"],
        ],
    )


@pytest.fixture()
def table_a() -> NormalizedTable:
    return NormalizedTable(table_id="a", name="A", headers=["k"], rows=[{"k": "1"}, {"k": "2"}])


@pytest.fixture()
def table_b() -> NormalizedTable:
    return NormalizedTable(
        table_id="b",
        name="B",
        headers=["k", "v"],
        rows=[{"k": "1", "v": "x"}, {"k": "1", "v": "y"}, {"k": "3", "v": "z"}],
    )


@pytest.fixture()
def make_join():
    def _make(kind: JoinKind = JoinKind.INNER, **kwargs) -> JoinSpec:
        params = dict(id="j1", left_table_id="a", right_table_id="b", left_key="k", right_key="k", kind=kind)
        params.update(kwargs)
        return JoinSpec(**params)
    return _make


SAMPLE_ORDERS_CSV = """Orders export
order_id,customer_id,region,amount
1,10,east,100
2,11,west,50.5
3,10,east,25
4,99,north,10
"""

SAMPLE_CUSTOMERS_CSV = """id,segment
10,Consumer
11,Corporate
12,Home Office
"""


@pytest.fixture()
def sample_config_yaml() -> str:
    return """name: Sales overview
tables:
  - id: orders
    path: ../data/orders.csv
    header_index: 1
  - id: customers
    path: ../data/customers.csv
joins:
  - id: orders-customers
    left_table: orders
    right_table: customers
    left_key: customer_id
    right_key: id
    kind: LEFT
columns: [orders.region, orders.amount, customers.segment]
charts:
  - id: by-region
    title: Sales by region
    kind: BAR
    dimension: orders.region
    metric: orders.amount
    aggregation: SUM
  - id: total
    title: Total sales
    kind: KPI
    metric: orders.amount
    aggregation: SUM
"""


@pytest.fixture()
def sample_data_files(temp_workdir: Path) -> list[Path]:
    orders = temp_workdir / "data" / "orders.csv"
    customers = temp_workdir / "data" / "customers.csv"
    orders.write_text(SAMPLE_ORDERS_CSV, encoding="utf-8")
    customers.write_text(SAMPLE_CUSTOMERS_CSV, encoding="utf-8")
    return [orders, customers]


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str, sample_data_files: list[Path]) -> Path:
    cfg = temp_workdir / "config" / "dashboard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
