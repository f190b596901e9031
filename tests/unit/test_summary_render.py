from __future__ import annotations

import pytest

from sheetdash.models import ChartKind, ChartSpec, DashboardResult, DataModel
from sheetdash.services.summary import format_seconds, render_summary_line

"""Unit tests for the SUMMARY line."""


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0"), (-1, "0"), (2.0, "2"), (1.23456, "1.235"), (0.5, "0.5"), (0.000123, "0.000123")],
)
def test_format_seconds(seconds: float, expected: str) -> None:
    assert format_seconds(seconds) == expected


def test_render_summary_line() -> None:
    model = DataModel(
        name="m",
        rows=[],
        columns=["t.a", "t.b", "t.c"],
        numeric_columns=["t.b"],
        categorical_columns=["t.a", "t.c"],
    )
    chart = ChartSpec(id="c", title="C", kind=ChartKind.BAR, dimension_column="t.a", metric_column="t.b")
    result = DashboardResult(
        data_model=model, charts=[chart], series={"c": []}, table_count=2, join_count=1,
        merged_rows=7, elapsed_seconds=0.25, rejected_charts=3,
    )

    assert render_summary_line(result) == (
        "SUMMARY tables=2 joins=1 merged_rows=7 columns=3 numeric=1 categorical=2 "
        "charts=1 rejected_charts=3 elapsed_sec=0.25"
    )
