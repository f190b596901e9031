from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..models.cells import CellValue, key_string
from ..models.join_spec import JoinDiagnostic, JoinKind, JoinSpec
from ..models.tables import MergedRowSet, NormalizedTable, RawTable
from .normalizer import normalize

"""Join engine: fold an ordered list of JoinSpec over normalized tables.

The first table is the base; every column is prefixed ``<table name>.<column>``.
Each JoinSpec joins the accumulated rows (left) with one more table (right):

1. right key -> ``<right name>.<right_key>``
2. left key  -> verbatim when dotted, else ``<left table name>.<left_key>``
   where the left table is the one named by the JoinSpec
3. right rows are grouped by the string form of the key (1:N supported,
   bucket order = right row order)
4. accumulated rows probe the lookup; unmatched rows are kept null-filled for
   LEFT / FULL
5. RIGHT / FULL append never-matched right rows with the accumulated columns null
6. columns = ordered union (never shrinks)

Incomplete configuration (unknown table id, empty key) degrades the step to a
pass-through instead of raising: the live preview must keep working while the
user is still editing a join.
"""

__all__ = [
    "join_tables",
    "perform_joins",
    "resolve_left_key",
    "resolve_right_key",
    "build_right_lookup",
    "join_step",
    "union_columns",
]

logger = logging.getLogger(__name__)

Row = dict[str, CellValue]


def resolve_left_key(spec: JoinSpec, left_table_name: str) -> str:
    key = spec.left_key.strip()
    if "." in key:
        return key
    return f"{left_table_name}.{key}"


def resolve_right_key(spec: JoinSpec, right_table_name: str) -> str:
    return f"{right_table_name}.{spec.right_key.strip()}"


def union_columns(current: Sequence[str], added: Sequence[str]) -> list[str]:
    """Ordered union: current columns first, then new ones in their order."""
    seen = set(current)
    merged = list(current)
    for col in added:
        if col not in seen:
            seen.add(col)
            merged.append(col)
    return merged


def build_right_lookup(rows: Sequence[Row], key: str) -> dict[str, list[int]]:
    """Group right row indices by the string form of ``row[key]``.

    Rows whose key is missing / None are left out: a null key never matches.
    """
    lookup: dict[str, list[int]] = {}
    for idx, row in enumerate(rows):
        k = key_string(row.get(key))
        if k is None:
            continue
        lookup.setdefault(k, []).append(idx)
    return lookup


def join_step(
    left_columns: Sequence[str],
    left_rows: Sequence[Row],
    right_columns: Sequence[str],
    right_rows: Sequence[Row],
    left_key: str,
    right_key: str,
    kind: JoinKind,
) -> tuple[list[str], list[Row]]:
    """Join accumulated rows with one prefixed right table.

    Args:
        left_columns: Accumulated column order
        left_rows: Accumulated rows
        right_columns: Prefixed columns of the right table
        right_rows: Prefixed rows of the right table
        left_key: Resolved left key column
        right_key: Resolved right key column
        kind: Join kind

    Returns:
        (columns, rows). Emission order: left-row-major, then bucket order,
        then unmatched right rows.
    """
    lookup = build_right_lookup(right_rows, right_key)
    null_right = dict.fromkeys(right_columns)
    matched_right: set[int] = set()
    out: list[Row] = []

    for left_row in left_rows:
        k = key_string(left_row.get(left_key))
        matches = lookup.get(k) if k is not None else None
        if matches:
            for idx in matches:
                out.append({**left_row, **right_rows[idx]})
                matched_right.add(idx)
        elif kind.keeps_unmatched_left:
            out.append({**left_row, **null_right})

    if kind.keeps_unmatched_right:
        null_left = dict.fromkeys(left_columns)
        for idx, right_row in enumerate(right_rows):
            if idx not in matched_right:
                out.append({**null_left, **right_row})

    return union_columns(left_columns, right_columns), out


def _degrade(
    spec: JoinSpec,
    reason: str,
    detail: str,
    columns: list[str],
    rows: list[Row],
    right: NormalizedTable | None,
    diagnostics: list[JoinDiagnostic] | None,
) -> tuple[list[str], list[Row]]:
    logger.debug(f"join '{spec.id}' skipped: {reason} ({detail})")
    if diagnostics is not None:
        diagnostics.append(JoinDiagnostic(join_id=spec.id, reason=reason, detail=detail))
    if right is None:
        return columns, rows
    right_columns = right.prefixed_columns()
    # 既存列は上書きしない (同名テーブルの再 join 時)
    passthrough = [{**row, **{c: None for c in right_columns if c not in row}} for row in rows]
    return union_columns(columns, right_columns), passthrough


def join_tables(
    tables: Sequence[NormalizedTable],
    specs: Sequence[JoinSpec],
    diagnostics: list[JoinDiagnostic] | None = None,
) -> MergedRowSet:
    """Fold ``specs`` left to right over ``tables`` (tables[0] is the base).

    Args:
        tables: normalized tables; table_id must be unique
        specs: ordered join steps
        diagnostics: optional list receiving one JoinDiagnostic per degraded step
    """
    if not tables:
        return MergedRowSet.empty()

    by_id: Mapping[str, NormalizedTable] = {t.table_id: t for t in tables}
    base = tables[0]
    columns = base.prefixed_columns()
    rows: list[Row] = base.prefixed_rows()
    contributing = [base.name]

    for spec in specs:
        right = by_id.get(spec.right_table_id)
        left = by_id.get(spec.left_table_id)
        if right is None:
            columns, rows = _degrade(
                spec, "UNKNOWN_RIGHT_TABLE", f"right_table_id={spec.right_table_id!r}",
                columns, rows, None, diagnostics,
            )
            continue
        if right.name not in contributing:
            contributing.append(right.name)
        if left is None:
            columns, rows = _degrade(
                spec, "UNKNOWN_LEFT_TABLE", f"left_table_id={spec.left_table_id!r}",
                columns, rows, right, diagnostics,
            )
            continue
        if not spec.left_key.strip() or not spec.right_key.strip():
            columns, rows = _degrade(
                spec, "EMPTY_KEY", f"left_key={spec.left_key!r} right_key={spec.right_key!r}",
                columns, rows, right, diagnostics,
            )
            continue

        left_key = resolve_left_key(spec, left.name)
        right_key = resolve_right_key(spec, right.name)
        before = len(rows)
        columns, rows = join_step(
            columns, rows,
            right.prefixed_columns(), right.prefixed_rows(),
            left_key, right_key, spec.kind,
        )
        logger.debug(
            f"join '{spec.id}' {spec.kind.value} {left_key} = {right_key}: "
            f"{before} -> {len(rows)} rows, {len(columns)} columns"
        )

    return MergedRowSet(columns=columns, rows=rows, table_names=contributing)


def perform_joins(
    tables: Sequence[RawTable],
    specs: Sequence[JoinSpec],
    header_indices: Mapping[str, int] | None = None,
    diagnostics: list[JoinDiagnostic] | None = None,
) -> MergedRowSet:
    """Normalize every RawTable with its header index then join.

    Args:
        tables: Imported tables; tables[0] is the base
        specs: Ordered join steps
        header_indices: Table id -> header row (default 0)
        diagnostics: Optional list receiving degraded-step diagnostics

    Returns:
        MergedRowSet with ``<table name>.<column>`` columns
    """
    header_indices = header_indices or {}
    normalized = [normalize(t, header_indices.get(t.id, 0)) for t in tables]
    return join_tables(normalized, specs, diagnostics)
