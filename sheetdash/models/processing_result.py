from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from .chart_spec import ChartSpec
from .data_model import DataModel
from .join_spec import JoinDiagnostic

"""Dashboard build result models.

DashboardResult aggregates everything one pipeline run produces: the finalized
DataModel, one plot series per chart, join diagnostics and timing used for the
SUMMARY output line.
"""

__all__ = [
    "DashboardResult",
    "StageTimer",
]


@dataclass(frozen=True)
class DashboardResult:
    """Result of one synchronous dashboard build."""
    data_model: DataModel
    charts: list[ChartSpec]  # accepted specs, input order
    series: dict[str, list[dict[str, Any]]]  # chart id -> plot points
    table_count: int  # 読み込んだテーブル数
    join_count: int  # 設定された join 数 (degraded 含む)
    merged_rows: int  # join 後の行数
    elapsed_seconds: float
    rejected_charts: int = 0  # 不正な chart spec 数
    diagnostics: list[JoinDiagnostic] = field(default_factory=list)
    stage_seconds: dict[str, float] = field(default_factory=dict)

    @property
    def has_rejections(self) -> bool:
        return self.rejected_charts > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "dataModel": self.data_model.to_dict(),
            "charts": [
                {
                    "id": c.id,
                    "title": c.title,
                    "description": c.description,
                    "type": c.kind.value,
                    "xAxisKey": c.dimension_column,
                    "dataKey": c.metric_column,
                    "aggregation": c.aggregation.value,
                    "color": c.color,
                }
                for c in self.charts
            ],
            "series": {k: list(v) for k, v in self.series.items()},
        }


class StageTimer:
    """Collects wall-clock seconds per pipeline stage."""

    def __init__(self) -> None:
        self.stages: dict[str, float] = {}
        self._started = time.perf_counter()

    def measure(self, stage: str, start: float) -> None:
        self.stages[stage] = self.stages.get(stage, 0.0) + (time.perf_counter() - start)

    @property
    def total(self) -> float:
        return time.perf_counter() - self._started
