from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .join_spec import JoinSpec

"""Config dataclasses for the dashboard build.

These are produced by sheetdash.config.loader from the YAML dashboard file and
passed explicitly into the pipeline; the engine itself keeps no selection state.
"""

__all__ = [
    "TableSourceConfig",
    "OutputConfig",
    "DashboardConfig",
]


@dataclass(frozen=True)
class TableSourceConfig:
    """One source file entry.

    An Excel entry without ``sheet`` expands to one table per sheet; those
    tables are identified by sheet name instead of ``id``.
    """
    id: str  # join 参照用 ID
    path: Path  # 絶対パス (config ファイル基準で解決済)
    sheet: str | None = None
    name: str | None = None  # 列プレフィックスに使うテーブル名 (省略時 sheet / ファイル名)
    header_index: int = 0


@dataclass(frozen=True)
class OutputConfig:
    json_path: Path | None = None
    csv_path: Path | None = None


@dataclass(frozen=True)
class DashboardConfig:
    """Root configuration object for one dashboard build."""
    tables: list[TableSourceConfig]
    joins: list[JoinSpec] = field(default_factory=list)
    columns: list[str] | None = None  # None = every merged column
    charts: list[dict[str, Any]] = field(default_factory=list)  # untyped, parsed at build time
    name: str | None = None
    output: OutputConfig = field(default_factory=OutputConfig)
    base_dir: Path = Path(".")
