"""Import adapters turning CSV / Excel files and live sheet payloads into RawTable grids."""

from .reader import TableReadError, raw_table_from_values, read_table_file

__all__ = [
    "TableReadError",
    "raw_table_from_values",
    "read_table_file",
]
