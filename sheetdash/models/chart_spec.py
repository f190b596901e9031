from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""ChartSpec model with ChartKind / Aggregation enums.

Chart specs come from outside (AI suggestion or user edit) and are consumed
only by the aggregator; they never mutate the DataModel.
"""

__all__ = [
    "ChartKind",
    "Aggregation",
    "ChartSpec",
]


class ChartKind(Enum):
    BAR = "BAR"
    LINE = "LINE"
    AREA = "AREA"
    PIE = "PIE"
    KPI = "KPI"

    @property
    def is_trend(self) -> bool:
        """LINE / AREA show raw trends and tolerate many more points."""
        return self in (ChartKind.LINE, ChartKind.AREA)


class Aggregation(Enum):
    SUM = "SUM"
    COUNT = "COUNT"
    AVERAGE = "AVERAGE"
    NONE = "NONE"


@dataclass(frozen=True)
class ChartSpec:
    """Declarative description of one chart.

    dimension_column / metric_column are MergedRowSet column names
    (``<table>.<column>``); they may not exist in the DataModel, in which case
    the aggregator treats the values as empty / zero.
    """
    id: str
    title: str
    kind: ChartKind
    dimension_column: str
    metric_column: str
    aggregation: Aggregation = Aggregation.SUM
    description: str = ""
    color: str | None = None
