from __future__ import annotations

import json
import logging
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.config_models import DashboardConfig, OutputConfig, TableSourceConfig
from ..models.join_spec import JoinDiagnostic
from ..models.processing_result import DashboardResult, StageTimer
from ..models.tables import MergedRowSet, RawTable
from ..sources.reader import TableReadError, read_table_file
from .aggregator import aggregate_charts
from .chart_specs import parse_chart_specs
from .join_engine import perform_joins
from .progress import TableProgressTracker
from .type_inference import refresh_data_model, type_and_coerce

"""Dashboard build orchestration.

Coordinates one synchronous build:

1. load every configured source into RawTables (CSV / Excel via pandas)
2. normalize with per-table header indices and fold the joins
3. finalize the selected columns into a typed DataModel
4. parse the chart specs and aggregate one plot series per chart

Each call receives its full input and returns a fresh DashboardResult; nothing
is cached between calls.
"""

__all__ = [
    "PipelineError",
    "load_tables",
    "build_dashboard",
    "refresh_dashboard",
    "preview_rows",
    "write_outputs",
]

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 20


class PipelineError(Exception):
    """Fatal error that prevents a dashboard build (unreadable source etc.)."""


def _tables_for_source(source: TableSourceConfig) -> list[RawTable]:
    tables = read_table_file(source.path, sheet=source.sheet, name=source.name)
    if len(tables) == 1:
        # 単一テーブルは設定上の ID で参照できるようにする
        t = tables[0]
        return [RawTable(id=source.id, name=t.name, grid=t.grid)]
    # 複数シート展開時はシート名を ID とする
    return [RawTable(id=t.name, name=t.name, grid=t.grid) for t in tables]


def load_tables(config: DashboardConfig) -> tuple[list[RawTable], dict[str, int]]:
    """Read every configured source.

    Returns:
        (raw_tables, header_indices) where header_indices maps table id -> header row

    Raises:
        PipelineError: when a source cannot be read or two tables share an id
    """
    raw_tables: list[RawTable] = []
    header_indices: dict[str, int] = {}
    with TableProgressTracker(len(config.tables)) as progress:
        for source in config.tables:
            progress.start_source(source.path.name)
            try:
                tables = _tables_for_source(source)
            except TableReadError as e:
                raise PipelineError(f"table '{source.id}': {e}") from e
            for t in tables:
                if t.id in header_indices:
                    raise PipelineError(f"duplicate table id after loading: '{t.id}'")
                header_indices[t.id] = source.header_index
                raw_tables.append(t)
                logger.debug(f"loaded table id={t.id} name={t.name} rows={t.row_count}")
            progress.finish_source(len(tables), sum(t.row_count for t in tables))
    return raw_tables, header_indices


def preview_rows(merged: MergedRowSet, limit: int = PREVIEW_LIMIT) -> list[dict[str, Any]]:
    """First ``limit`` merged rows for a live preview table."""
    return [dict(r) for r in merged.rows[:max(limit, 0)]]


def _merge(
    raw_tables: Sequence[RawTable],
    config: DashboardConfig,
    header_indices: dict[str, int],
    diagnostics: list[JoinDiagnostic],
) -> MergedRowSet:
    merged = perform_joins(raw_tables, config.joins, header_indices, diagnostics)
    for d in diagnostics:
        logger.info(f"join '{d.join_id}' not applied: {d.reason} {d.detail}")
    return merged


def build_dashboard(
    config: DashboardConfig,
    raw_tables: Sequence[RawTable] | None = None,
    header_indices: dict[str, int] | None = None,
) -> DashboardResult:
    """Run the full pipeline for one dashboard config.

    Args:
        config: dashboard configuration
        raw_tables: pre-loaded tables (e.g. a live sheet payload); read from
            config.tables when None
        header_indices: table id -> header row; defaults to the config entries

    Raises:
        PipelineError: unreadable source
        SelectionError: no selected column exists after the joins
    """
    timer = StageTimer()

    start = time.perf_counter()
    if raw_tables is None:
        raw_tables, loaded_indices = load_tables(config)
        header_indices = {**loaded_indices, **(header_indices or {})}
    elif header_indices is None:
        header_indices = {s.id: s.header_index for s in config.tables}
    timer.measure("load", start)

    start = time.perf_counter()
    diagnostics: list[JoinDiagnostic] = []
    merged = _merge(raw_tables, config, header_indices, diagnostics)
    timer.measure("join", start)

    start = time.perf_counter()
    selection = config.columns if config.columns is not None else merged.columns
    model = type_and_coerce(merged, selection, name=config.name)
    timer.measure("finalize", start)

    start = time.perf_counter()
    charts, rejected = parse_chart_specs(config.charts)
    series = aggregate_charts(model, charts)
    timer.measure("aggregate", start)

    logger.debug("stage timings: " + " ".join(f"{k}={v:.4f}s" for k, v in timer.stages.items()))
    return DashboardResult(
        data_model=model,
        charts=charts,
        series=series,
        table_count=len(raw_tables),
        join_count=len(config.joins),
        merged_rows=len(merged),
        elapsed_seconds=timer.total,
        rejected_charts=rejected,
        diagnostics=diagnostics,
        stage_seconds=dict(timer.stages),
    )


def refresh_dashboard(
    previous: DashboardResult,
    config: DashboardConfig,
    raw_tables: Sequence[RawTable],
    header_indices: dict[str, int] | None = None,
) -> DashboardResult:
    """Re-derive a dashboard from refreshed source tables (live sheet refresh).

    The previous DataModel's columns and type partition are kept; only the rows
    and the chart series are recomputed.

    Args:
        previous: Result of the earlier build
        config: Dashboard configuration (joins, header indices)
        raw_tables: Refreshed tables
        header_indices: Table id -> header row; defaults to the config entries

    Returns:
        A new DashboardResult; ``previous`` is not modified
    """
    timer = StageTimer()
    if header_indices is None:
        header_indices = {s.id: s.header_index for s in config.tables}
    diagnostics: list[JoinDiagnostic] = []
    merged = _merge(raw_tables, config, header_indices, diagnostics)
    model = refresh_data_model(previous.data_model, merged)
    series = aggregate_charts(model, previous.charts)
    return DashboardResult(
        data_model=model,
        charts=list(previous.charts),
        series=series,
        table_count=len(raw_tables),
        join_count=len(config.joins),
        merged_rows=len(merged),
        elapsed_seconds=timer.total,
        rejected_charts=previous.rejected_charts,
        diagnostics=diagnostics,
    )


def write_outputs(result: DashboardResult, output: OutputConfig) -> list[Path]:
    """Write the JSON bundle and/or the typed rows as CSV.

    Args:
        result: Dashboard build result
        output: Target paths; None entries are skipped

    Returns:
        Written paths, JSON first
    """
    written: list[Path] = []
    if output.json_path is not None:
        output.json_path.parent.mkdir(parents=True, exist_ok=True)
        output.json_path.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        written.append(output.json_path)
    if output.csv_path is not None:
        output.csv_path.parent.mkdir(parents=True, exist_ok=True)
        model = result.data_model
        df = pd.DataFrame(model.rows, columns=model.columns)
        df.to_csv(output.csv_path, index=False)
        written.append(output.csv_path)
    return written
