from __future__ import annotations

from ..models.processing_result import DashboardResult

"""SUMMARY line rendering for the dashboard build CLI.

Format:
SUMMARY tables={n} joins={n} merged_rows={n} columns={n} numeric={n}
categorical={n} charts={n} rejected_charts={n} elapsed_sec={x}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Format elapsed seconds without scientific notation."""
    if seconds <= 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".") or "0"
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: DashboardResult) -> str:
    """Render the SUMMARY line for one dashboard build.

    Args:
        result: Dashboard build result

    Returns:
        Single line starting with "SUMMARY "

    Examples:
        >>> from sheetdash.models import DataModel
        >>> model = DataModel(name="t", rows=[], columns=["t.a"], numeric_columns=["t.a"])
        >>> result = DashboardResult(
        ...     data_model=model, charts=[], series={}, table_count=1, join_count=0,
        ...     merged_rows=0, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY tables=1 joins=0 merged_rows=0 columns=1 numeric=1 categorical=0 charts=0 rejected_charts=0 elapsed_sec=2'
    """
    model = result.data_model
    return (
        f"SUMMARY tables={result.table_count} "
        f"joins={result.join_count} "
        f"merged_rows={result.merged_rows} "
        f"columns={len(model.columns)} "
        f"numeric={len(model.numeric_columns)} "
        f"categorical={len(model.categorical_columns)} "
        f"charts={len(result.charts)} "
        f"rejected_charts={result.rejected_charts} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
