from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..models.cells import CellValue, key_string, round2, to_number
from ..models.chart_spec import Aggregation, ChartKind, ChartSpec
from ..models.data_model import DataModel

"""Chart aggregation: typed rows + ChartSpec -> plot points.

KPI               : one ``{"value", "label"}`` record
NONE + LINE/AREA  : first TREND_POINT_LIMIT rows, dimension + metric only
NONE + BAR/PIE    : first CATEGORY_POINT_LIMIT rows
SUM/COUNT/AVERAGE : grouped by the dimension's string form, first-seen order

Missing dimension / metric columns are tolerated (treated as empty / zero).
"""

__all__ = [
    "TREND_POINT_LIMIT",
    "CATEGORY_POINT_LIMIT",
    "UNKNOWN_GROUP",
    "aggregate",
    "aggregate_charts",
]

TREND_POINT_LIMIT = 2000
CATEGORY_POINT_LIMIT = 50
UNKNOWN_GROUP = "Unknown"

Row = Mapping[str, CellValue]


def _kpi(rows: Sequence[Row], spec: ChartSpec) -> list[dict[str, Any]]:
    if spec.aggregation is Aggregation.COUNT:
        return [{"value": len(rows), "label": spec.title}]
    total = sum(to_number(row.get(spec.metric_column)) for row in rows)
    if spec.aggregation is Aggregation.AVERAGE:
        value = total / len(rows) if rows else 0
    else:
        value = total
    return [{"value": round2(value), "label": spec.title}]


def _raw_points(rows: Sequence[Row], spec: ChartSpec) -> list[dict[str, Any]]:
    limit = TREND_POINT_LIMIT if spec.kind.is_trend else CATEGORY_POINT_LIMIT
    dim, metric = spec.dimension_column, spec.metric_column
    points: list[dict[str, Any]] = []
    for row in rows[:limit]:
        point: dict[str, Any] = {dim: row[dim] if row.get(dim) is not None else ""}
        point[metric] = row[metric] if row.get(metric) is not None else 0
        points.append(point)
    return points


def _grouped(rows: Sequence[Row], spec: ChartSpec) -> list[dict[str, Any]]:
    dim, metric = spec.dimension_column, spec.metric_column
    groups: dict[str, list[float]] = {}  # key -> [count, sum] (dict は挿入順を保持)
    for row in rows:
        key = key_string(row.get(dim))
        if key is None:
            key = UNKNOWN_GROUP
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = [0, 0.0]
        acc[0] += 1
        acc[1] += to_number(row.get(metric))

    points: list[dict[str, Any]] = []
    for key, (count, total) in groups.items():
        if spec.aggregation is Aggregation.COUNT:
            value = count
        elif spec.aggregation is Aggregation.AVERAGE:
            value = total / count
        else:
            value = total
        points.append({dim: key, metric: round2(value)})
    return points


def aggregate(rows: Sequence[Row], spec: ChartSpec) -> list[dict[str, Any]]:
    """Compute the plot points for one chart.

    Args:
        rows: Typed rows (DataModel.rows)
        spec: Chart definition

    Returns:
        KPI: ``[{"value", "label"}]``; NONE: raw ``{dimension, metric}`` points;
        otherwise one ``{dimension: key, metric: value}`` point per group.
        Missing columns never raise.
    """
    if spec.kind is ChartKind.KPI:
        return _kpi(rows, spec)
    if spec.aggregation is Aggregation.NONE:
        return _raw_points(rows, spec)
    return _grouped(rows, spec)


def aggregate_charts(model: DataModel, specs: Sequence[ChartSpec]) -> dict[str, list[dict[str, Any]]]:
    """Run every chart spec against the model rows; keyed by chart id."""
    return {spec.id: aggregate(model.rows, spec) for spec in specs}
