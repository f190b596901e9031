from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress bar for table loading (TTY only).

Reading large workbooks is the only slow step of a build, so one bar counts
configured sources; the postfix shows how many tables (sheets) and grid rows
have been read so far. Disabled when stdout is not a TTY (CI, pipes).
"""

__all__ = [
    "TableProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class TableProgressTracker:
    """Counts sources, tables and rows; drives a tqdm bar when enabled."""

    def __init__(self, total_sources: int, *, description: str = "Loading tables") -> None:
        self.total_sources = total_sources
        self.description = description
        self.current_source = 0
        self.loaded_tables = 0
        self.loaded_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sources,
                desc=description,
                unit="source",
                leave=False,
                ncols=80,
                ascii=True,
            )

    def start_source(self, label: str) -> None:
        self.current_source += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({label})")

    def finish_source(self, tables_loaded: int = 1, rows_loaded: int = 0) -> None:
        self.loaded_tables += tables_loaded
        self.loaded_rows += rows_loaded
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(tables=self.loaded_tables, rows=self.loaded_rows)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> TableProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
