from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import DashboardConfig, OutputConfig
from ..services.join_engine import perform_joins
from ..services.normalizer import normalize
from ..services.pipeline import PipelineError, build_dashboard, load_tables, preview_rows, write_outputs
from ..services.summary import render_summary_line
from ..services.type_inference import SelectionError

"""CLI entrypoint.

Flow:
- Load the dashboard config (YAML, schema validated)
- Read the source tables, fold the joins, finalize the DataModel
- Aggregate every chart spec and write the optional JSON / CSV outputs
- Print a SUMMARY line

Exit codes: 0 all good, 1 fatal (config / source / selection error),
2 partial (some chart specs were rejected).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build dashboard chart data from CSV / Excel tables")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Dashboard YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print table headers & first rows then exit")
    p.add_argument("--output-json", type=Path, default=None, help="Write DataModel + chart series as JSON")
    p.add_argument("--output-csv", type=Path, default=None, help="Write typed rows as CSV")
    return p.parse_args(argv)


def _inspect_data(cfg: DashboardConfig) -> int:
    try:
        raw_tables, header_indices = load_tables(cfg)
    except PipelineError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not raw_tables:
        print("inspect: no tables")
        return EXIT_SUCCESS_ALL
    for t in raw_tables:
        nt = normalize(t, header_indices.get(t.id, 0))
        print(f"TABLE: {t.id} name={t.name} header_index={header_indices.get(t.id, 0)} cols={nt.headers}")
        print("    sample_rows=", nt.rows[:3])
    merged = perform_joins(raw_tables, cfg.joins, header_indices)
    print(f"MERGED: rows={len(merged)} cols={merged.columns}")
    print("    preview=", preview_rows(merged, limit=3))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: main([]) をテストから呼ぶ場合に sys.argv[1:] (pytest の引数) を拾わないよう
    #       None のときのみシステム引数を読む。
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.output_json is not None or args.output_csv is not None:
        cfg = replace(
            cfg,
            output=OutputConfig(
                json_path=args.output_json or cfg.output.json_path,
                csv_path=args.output_csv or cfg.output.csv_path,
            ),
        )

    logger.info(f"Building dashboard from: {args.config}")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result = build_dashboard(cfg)
    except PipelineError as e:
        logger.error(f"pipeline: {e}")
        return EXIT_FATAL
    except SelectionError as e:
        logger.error(f"finalize: {e}")
        return EXIT_FATAL

    for path in write_outputs(result, cfg.output):
        logger.info(f"wrote {path}")

    logger.info(f"model={result.data_model.name!r} rows={len(result.data_model.rows)}")
    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " ラベルを付与するため除去して渡す
    log_summary(summary_line[len("SUMMARY "):])

    if result.has_rejections:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
