from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.tables import RawTable

"""Spreadsheet / CSV reader producing RawTable grids.

The header row is NOT applied here; every row (including the one a user will
later pick as header) is kept as a string grid. pandas is used with
``header=None`` and NA conversion disabled so that cell text survives as-is:

- every cell -> trimmed str (NaN / None -> "")
- blank rows are kept as ``[]`` so row positions (header_index) stay aligned
  with the source; only empty CSV lines are skipped by read_csv
- trailing blank cells are trimmed from each row (ragged grids are legal)
"""

__all__ = [
    "TableReadError",
    "SUPPORTED_SUFFIXES",
    "read_table_file",
    "raw_table_from_values",
    "frame_to_grid",
]

SUPPORTED_SUFFIXES = {".csv", ".xlsx", ".xls"}


class TableReadError(Exception):
    """Raised when a source file cannot be turned into RawTable grids."""


def _cell_text(val: Any) -> str:
    if val is None:
        return ""
    try:
        if pd.isna(val):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(val, float) and val.is_integer():
        # Excel の数値セルは float で返るため "12.0" -> "12"
        return str(int(val))
    if hasattr(val, "isoformat"):
        return val.isoformat()
    return str(val).strip()


def _clean_grid(rows: list[list[Any]]) -> list[list[str]]:
    grid: list[list[str]] = []
    for raw in rows:
        cells = [_cell_text(v) for v in raw]
        while cells and cells[-1] == "":
            cells.pop()
        grid.append(cells)
    return grid


def frame_to_grid(df: pd.DataFrame) -> list[list[str]]:
    """Convert a header-less DataFrame into a cleaned string grid."""
    return _clean_grid(df.values.tolist())


def raw_table_from_values(table_id: str, name: str, values: list[list[Any]] | None) -> RawTable:
    """Build a RawTable from a live sheet ``values`` payload (list of row lists)."""
    return RawTable(id=table_id, name=name, grid=_clean_grid([list(r) for r in (values or [])]))


def _csv_width(path: Path) -> int:
    """Widest row in the file; read_csv needs it up front for ragged CSVs."""
    with path.open(newline="", encoding="utf-8-sig") as f:
        return max((len(r) for r in csv.reader(f)), default=0)


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip())


def read_table_file(path: Path, sheet: str | None = None, name: str | None = None) -> list[RawTable]:
    """Read a CSV or Excel file into one RawTable per sheet.

    Args:
        path: CSV / XLSX / XLS file
        sheet: Excel sheet name restriction (None = every sheet)
        name: table name override (only meaningful for a single resulting table)

    Raises:
        TableReadError: missing file, unsupported suffix, unknown sheet or parse failure
    """
    if not path.exists():
        raise TableReadError(f"file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise TableReadError(f"unsupported file type '{suffix}': {path.name}")

    if suffix == ".csv":
        try:
            width = _csv_width(path)
            df = pd.read_csv(
                path,
                header=None,
                names=list(range(width)) if width else None,
                encoding="utf-8-sig",
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except (pd.errors.ParserError, csv.Error, UnicodeDecodeError) as e:
            raise TableReadError(f"cannot parse csv {path.name}: {e}") from e
        table_name = name or path.stem
        return [RawTable(id=f"csv-{_slug(table_name)}", name=table_name, grid=frame_to_grid(df))]

    try:
        xls = pd.ExcelFile(path)
    except Exception as e:  # openpyxl / xlrd raise assorted errors on broken files
        raise TableReadError(f"cannot open workbook {path.name}: {e}") from e
    sheet_names = [str(s) for s in xls.sheet_names]
    if sheet is not None and sheet not in sheet_names:
        raise TableReadError(f"sheet '{sheet}' not found in {path.name} (available: {sheet_names})")

    tables: list[RawTable] = []
    for sname in sheet_names:
        if sheet is not None and sname != sheet:
            continue
        # ヘッダなしで生読み (ヘッダ行はユーザー指定)
        df = xls.parse(sname, header=None, keep_default_na=False)
        grid = frame_to_grid(df)
        if not any(grid):
            continue
        table_name = name if (name and sheet is not None) else sname
        tables.append(RawTable(id=f"sheet-{_slug(table_name)}", name=table_name, grid=grid))
    return tables
