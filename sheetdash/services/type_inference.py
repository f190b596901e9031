from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.cells import CellValue, is_blank, parse_number, to_number, to_text
from ..models.data_model import ColumnType, DataModel, TypedRow
from ..models.tables import MergedRowSet

"""Column type inference & coercion: MergedRowSet -> DataModel (finalize).

Classification samples the first SAMPLE_SIZE rows of each selected column:
numeric iff (non-blank values parsing to a finite number) / (sample size)
is strictly greater than NUMERIC_RATIO. Blank values stay in the denominator.

Coercion then applies to every row:
- numeric     : blank -> 0, otherwise the parsed number (unparseable -> 0)
- categorical : None -> "", otherwise the text form
"""

__all__ = [
    "SelectionError",
    "SAMPLE_SIZE",
    "NUMERIC_RATIO",
    "filter_selection",
    "infer_column_type",
    "infer_column_types",
    "coerce_rows",
    "type_and_coerce",
    "refresh_data_model",
    "default_model_name",
]

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 100
NUMERIC_RATIO = 0.8


class SelectionError(ValueError):
    """Raised at finalize time when no valid column is selected."""


def filter_selection(merged: MergedRowSet, selected_columns: Sequence[str]) -> list[str]:
    """Keep selected columns that exist in ``merged`` (selection order, no duplicates)."""
    available = set(merged.columns)
    out: list[str] = []
    for col in selected_columns:
        if col in available and col not in out:
            out.append(col)
    dropped = [c for c in selected_columns if c not in available]
    if dropped:
        logger.debug(f"selection: dropped columns not present after join: {dropped}")
    return out


def infer_column_type(values: Sequence[CellValue]) -> ColumnType:
    """Classify one column from its sampled values.

    Args:
        values: Sampled cells; blanks count in the denominator

    Returns:
        NUMERIC when strictly more than NUMERIC_RATIO of the values parse as
        numbers, otherwise CATEGORICAL
    """
    if not values:
        return ColumnType.CATEGORICAL
    numeric = sum(1 for v in values if not is_blank(v) and parse_number(v) is not None)
    return ColumnType.NUMERIC if numeric / len(values) > NUMERIC_RATIO else ColumnType.CATEGORICAL


def infer_column_types(merged: MergedRowSet, columns: Sequence[str]) -> dict[str, ColumnType]:
    sample = merged.rows[:SAMPLE_SIZE]
    return {col: infer_column_type([row.get(col) for row in sample]) for col in columns}


def coerce_rows(
    rows: Sequence[dict[str, CellValue]],
    columns: Sequence[str],
    types: dict[str, ColumnType],
) -> list[TypedRow]:
    numeric = {c for c in columns if types.get(c) is ColumnType.NUMERIC}
    typed: list[TypedRow] = []
    for row in rows:
        out: TypedRow = {}
        for col in columns:
            val = row.get(col)
            out[col] = to_number(val) if col in numeric else to_text(val)
        typed.append(out)
    return typed


def default_model_name(merged: MergedRowSet) -> str:
    return " + ".join(merged.table_names) if merged.table_names else "Dashboard"


def type_and_coerce(
    merged: MergedRowSet,
    selected_columns: Sequence[str],
    name: str | None = None,
) -> DataModel:
    """Finalize the merged row set into a typed DataModel.

    Args:
        merged: Joined rows
        selected_columns: Requested columns; unknown ones are dropped
        name: Model name; defaults to the contributing table names

    Returns:
        DataModel with coerced rows and the numeric / categorical partition

    Raises:
        SelectionError: when no selected column exists in ``merged``
    """
    columns = filter_selection(merged, selected_columns)
    if not columns:
        raise SelectionError("select at least one column")

    types = infer_column_types(merged, columns)
    numeric_columns = [c for c in columns if types[c] is ColumnType.NUMERIC]
    categorical_columns = [c for c in columns if types[c] is ColumnType.CATEGORICAL]
    logger.debug(f"finalize: numeric={numeric_columns} categorical={categorical_columns}")

    model_name = name.strip() if name and name.strip() else default_model_name(merged)
    return DataModel(
        name=model_name,
        rows=coerce_rows(merged.rows, columns, types),
        columns=columns,
        numeric_columns=numeric_columns,
        categorical_columns=categorical_columns,
    )


def refresh_data_model(model: DataModel, merged: MergedRowSet) -> DataModel:
    """Re-derive rows from fresh data keeping the model's columns and type partition.

    Used after a live sheet refresh; types are not re-inferred, columns missing
    from the fresh data coerce to 0 / "".
    """
    types = {c: ColumnType.NUMERIC for c in model.numeric_columns}
    types.update({c: ColumnType.CATEGORICAL for c in model.categorical_columns})
    return DataModel(
        name=model.name,
        rows=coerce_rows(merged.rows, model.columns, types),
        columns=list(model.columns),
        numeric_columns=list(model.numeric_columns),
        categorical_columns=list(model.categorical_columns),
    )
