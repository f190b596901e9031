from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from sheetdash.services.normalizer import normalize
from sheetdash.sources.reader import TableReadError, raw_table_from_values, read_table_file

"""Unit tests for the CSV / Excel reader."""


def test_read_csv_keeps_title_row_and_trims_ragged(tmp_path: Path) -> None:
    path = tmp_path / "orders.csv"
    path.write_text("Orders export\norder_id,amount\n1,100\n\n2,50.5\n", encoding="utf-8")

    tables = read_table_file(path)

    assert len(tables) == 1
    t = tables[0]
    assert t.id == "csv-orders"
    assert t.name == "orders"
    assert t.grid == [["Orders export"], ["order_id", "amount"], ["1", "100"], ["2", "50.5"]]


def test_read_csv_keeps_text_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "codes.csv"
    path.write_text("code,flag\n007,NA\n", encoding="utf-8")

    grid = read_table_file(path, name="Codes")[0].grid

    assert grid[1] == ["007", "NA"]


def test_read_csv_utf8_bom(tmp_path: Path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffname,qty\nりんご,3\n".encode("utf-8"))

    grid = read_table_file(path)[0].grid

    assert grid == [["name", "qty"], ["りんご", "3"]]


def test_read_empty_csv(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    tables = read_table_file(path)

    assert tables[0].grid == []


def test_read_xlsx_every_sheet(tmp_path: Path) -> None:
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"region": ["east", "west"], "sales": [10, 20.5]}).to_excel(writer, sheet_name="Sales", index=False)
        pd.DataFrame({"region": ["east"], "manager": ["Sato"]}).to_excel(writer, sheet_name="Managers", index=False)

    tables = read_table_file(path)

    assert [t.name for t in tables] == ["Sales", "Managers"]
    assert tables[0].id == "sheet-Sales"
    assert tables[0].grid == [["region", "sales"], ["east", "10"], ["west", "20.5"]]


def test_read_xlsx_single_sheet_with_name(tmp_path: Path) -> None:
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"a": [1]}).to_excel(writer, sheet_name="S1", index=False)
        pd.DataFrame({"b": [2]}).to_excel(writer, sheet_name="S2", index=False)

    tables = read_table_file(path, sheet="S2", name="second")

    assert len(tables) == 1
    assert tables[0].name == "second"
    assert tables[0].grid == [["b"], ["2"]]


def test_read_xlsx_unknown_sheet(tmp_path: Path) -> None:
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"a": [1]}).to_excel(writer, sheet_name="S1", index=False)

    with pytest.raises(TableReadError, match="sheet 'Nope' not found"):
        read_table_file(path, sheet="Nope")


def test_read_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TableReadError, match="file not found"):
        read_table_file(tmp_path / "missing.csv")


def test_read_unsupported_suffix(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("x", encoding="utf-8")
    with pytest.raises(TableReadError, match="unsupported file type"):
        read_table_file(path)


def test_raw_table_from_values() -> None:
    raw = raw_table_from_values("live", "Live", [["h1", "h2", ""], [1.0, None], [], ["  x ", 2.5]])

    assert raw.id == "live"
    assert raw.grid == [["h1", "h2"], ["1"], [], ["x", "2.5"]]


def test_raw_table_from_values_none() -> None:
    assert raw_table_from_values("live", "Live", None).grid == []


def test_blank_live_rows_keep_their_position() -> None:
    raw = raw_table_from_values("s", "s", [["title"], [], ["a", "b"], ["1", "2"], ["", ""], ["3", "4"]])

    nt = normalize(raw, header_index=2)

    assert nt.headers == ["a", "b"]
    assert nt.rows == [{"a": "1", "b": "2"}, {"a": "", "b": ""}, {"a": "3", "b": "4"}]


def test_read_xlsx_keeps_blank_rows_between_data(tmp_path: Path) -> None:
    path = tmp_path / "gaps.xlsx"
    frame = pd.DataFrame([["a", "b"], [1, 2], [None, None], [3, 4]])
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name="S", index=False, header=False)

    grid = read_table_file(path)[0].grid

    assert grid == [["a", "b"], ["1", "2"], [], ["3", "4"]]
