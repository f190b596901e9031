from __future__ import annotations

from dataclasses import dataclass, field

from .cells import CellValue

"""Table models: RawTable -> NormalizedTable -> MergedRowSet.

RawTable is what the import collaborator (CSV / Excel / live sheet) hands us.
NormalizedTable is a RawTable resolved against a header row.
MergedRowSet is the result of folding joins over normalized tables; every
column name is prefixed ``<table name>.<column>``.
"""

__all__ = [
    "RawTable",
    "NormalizedTable",
    "MergedRowSet",
]


@dataclass(frozen=True)
class RawTable:
    """Unprocessed imported grid of string cells plus identity.

    Rows may be ragged; a missing cell reads as the empty string.
    Immutable: a re-import or live refresh replaces the whole table.
    """
    id: str  # unique within one workspace
    name: str  # sheet name / file stem, used as column prefix after joins
    grid: list[list[str]]  # header row is chosen later via header_index

    @property
    def row_count(self) -> int:
        return len(self.grid)

    def cell(self, row: int, col: int) -> str:
        """Return grid[row][col] or "" when the row is shorter."""
        cells = self.grid[row]
        if col < len(cells) and cells[col] is not None:
            return cells[col]
        return ""


@dataclass(frozen=True)
class NormalizedTable:
    """RawTable resolved against a header row into named columns."""
    table_id: str
    name: str
    headers: list[str]  # unique, order-preserving
    rows: list[dict[str, str]] = field(default_factory=list)

    def prefixed_columns(self) -> list[str]:
        return [f"{self.name}.{h}" for h in self.headers]

    def prefixed_rows(self) -> list[dict[str, CellValue]]:
        prefix = f"{self.name}."
        return [{prefix + k: v for k, v in row.items()} for row in self.rows]


@dataclass(frozen=True)
class MergedRowSet:
    """Flat row set produced by the join engine."""
    columns: list[str]
    rows: list[dict[str, CellValue]] = field(default_factory=list)
    table_names: list[str] = field(default_factory=list)  # contributing tables, fold order

    def __len__(self) -> int:
        return len(self.rows)

    @staticmethod
    def empty() -> MergedRowSet:
        return MergedRowSet(columns=[], rows=[], table_names=[])
