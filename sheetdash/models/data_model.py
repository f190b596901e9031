from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

"""DataModel: the finalized, typed, column-selected dataset.

Created once at finalize time from a MergedRowSet and a column type decision.
Immutable afterwards; a live refresh derives a new DataModel sharing the same
columns / type partition but fresh rows.
"""

__all__ = [
    "ColumnType",
    "TypedRow",
    "DataModel",
]

TypedRow = dict[str, Union[int, float, str]]


class ColumnType(Enum):
    NUMERIC = "number"
    CATEGORICAL = "string"


@dataclass(frozen=True)
class DataModel:
    """Final typed dataset ready for chart aggregation.

    numeric_columns and categorical_columns partition columns (disjoint);
    every row carries exactly the keys in columns.
    """
    name: str
    rows: list[TypedRow]
    columns: list[str]
    numeric_columns: list[str] = field(default_factory=list)
    categorical_columns: list[str] = field(default_factory=list)

    def column_type(self, column: str) -> ColumnType | None:
        if column in self.numeric_columns:
            return ColumnType.NUMERIC
        if column in self.categorical_columns:
            return ColumnType.CATEGORICAL
        return None

    def to_dict(self) -> dict[str, Any]:
        """Plain structure for the persistence collaborator (camelCase keys)."""
        return {
            "name": self.name,
            "rows": [dict(r) for r in self.rows],
            "columns": list(self.columns),
            "numericColumns": list(self.numeric_columns),
            "categoricalColumns": list(self.categorical_columns),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> DataModel:
        """Inverse of to_dict (also accepts the legacy ``data`` key for rows)."""
        rows = data.get("rows")
        if rows is None:
            rows = data.get("data", [])
        return DataModel(
            name=str(data.get("name", "")),
            rows=[dict(r) for r in rows],
            columns=list(data.get("columns", [])),
            numeric_columns=list(data.get("numericColumns", [])),
            categorical_columns=list(data.get("categoricalColumns", [])),
        )
