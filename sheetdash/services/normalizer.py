from __future__ import annotations

import logging

from ..models.tables import NormalizedTable, RawTable

"""Table normalizer: RawTable + header index -> NormalizedTable.

- Header row is chosen by the caller (default 0); any row may be the header.
- Blank header cells get a positional placeholder ``Column_<i>``.
- Duplicate header names are suffixed ``_2``, ``_3``, ... so headers stay unique.
- Every row after the header becomes one data row; short rows are padded with "".
- Values stay raw strings (no coercion here).
"""

__all__ = [
    "normalize",
    "resolve_headers",
    "PLACEHOLDER_PREFIX",
]

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "Column_"


def resolve_headers(header_cells: list[str | None]) -> list[str]:
    """Trim header cells, fill blanks with placeholders and make names unique."""
    headers: list[str] = []
    seen: set[str] = set()
    for i, cell in enumerate(header_cells):
        name = cell.strip() if isinstance(cell, str) else ("" if cell is None else str(cell).strip())
        if not name:
            name = f"{PLACEHOLDER_PREFIX}{i}"
        candidate = name
        n = 2
        while candidate in seen:
            candidate = f"{name}_{n}"
            n += 1
        seen.add(candidate)
        headers.append(candidate)
    return headers


def normalize(raw: RawTable, header_index: int = 0) -> NormalizedTable:
    """Normalize a raw grid using ``grid[header_index]`` as header row.

    An out-of-range header index (negative or >= row count) yields an empty
    table rather than an error.

    Args:
        raw: Imported grid
        header_index: 0-based row used as header; rows above it are ignored

    Returns:
        NormalizedTable whose rows map every header to a string (missing
        trailing cells become "")
    """
    if header_index < 0 or header_index >= len(raw.grid):
        logger.debug(f"table '{raw.name}': header index {header_index} out of range ({len(raw.grid)} rows)")
        return NormalizedTable(table_id=raw.id, name=raw.name, headers=[], rows=[])

    headers = resolve_headers(list(raw.grid[header_index]))
    rows: list[dict[str, str]] = []
    for row_idx in range(header_index + 1, len(raw.grid)):
        rows.append({h: raw.cell(row_idx, i) for i, h in enumerate(headers)})
    return NormalizedTable(table_id=raw.id, name=raw.name, headers=headers, rows=rows)
