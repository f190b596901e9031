from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

"""Cell value helpers shared by the normalizer, join engine, type inference and aggregator.

A cell is one of:
- None            : empty / null (null-filled outer join side, missing column)
- str             : raw text as imported
- int | float     : coerced numeric value (after finalize)

All conversions between these forms go through the functions below so that the
join key matching, numeric classification and aggregation agree on one rule set.
"""

__all__ = [
    "CellValue",
    "is_blank",
    "parse_number",
    "to_number",
    "to_text",
    "key_string",
    "round2",
]

CellValue = Union[str, int, float, None]


def is_blank(value: CellValue) -> bool:
    """Return True for None and the empty string.

    Whitespace-only text is not blank; see parse_number for how it is classified.
    """
    return value is None or value == ""


def parse_number(value: CellValue) -> float | None:
    """Parse a cell as a finite number.

    Whitespace-only text parses as 0.0; the empty string is blank and parses
    as None.

    Args:
        value: Raw or coerced cell value

    Returns:
        The finite float value, or None when the value is blank, not numeric or
        not finite (``nan`` / ``inf`` 文字列も数値扱いしない)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if value == "":
        return None
    text = str(value).strip()
    if not text:
        return 0.0
    if "_" in text:
        # float() は "1_000" を受け付けるが表計算の値としては数値扱いしない
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _compact(number: int | float) -> int | float:
    if isinstance(number, int):
        return number
    return int(number) if number.is_integer() else number


def to_number(value: CellValue) -> int | float:
    """Coerce a cell to a number; blank or unparseable values become 0."""
    number = parse_number(value)
    if number is None:
        return 0
    return _compact(number)


def to_text(value: CellValue) -> str:
    """Coerce a cell to text; None becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def key_string(value: CellValue) -> str | None:
    """String form used for join keys and group keys.

    ``"5"``, ``5`` and ``5.0`` all map to ``"5"``. None stays None so callers can
    decide how to treat missing keys.
    """
    if value is None:
        return None
    return to_text(value)


def round2(value: int | float) -> int | float:
    """Round to 2 decimal places, exact halves away from zero.

    The binary value is rounded as stored (0.125 -> 0.13, 1.005 -> 1), the
    same result a ``toFixed(2)`` based chart renderer shows.

    Args:
        value: Aggregated number

    Returns:
        The rounded number; integral results are returned as int
    """
    if isinstance(value, int) or not math.isfinite(value):
        return value
    rounded = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return _compact(float(rounded))
