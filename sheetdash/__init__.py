"""sheetdash: in-memory tabular data engine for chart dashboards.

RawTable grids are normalized against a header row, folded together with
relational joins, finalized into a typed DataModel and aggregated per chart.
"""

from .models import (
    Aggregation,
    ChartKind,
    ChartSpec,
    DataModel,
    JoinKind,
    JoinSpec,
    MergedRowSet,
    NormalizedTable,
    RawTable,
)
from .services.aggregator import aggregate, aggregate_charts
from .services.join_engine import join_tables, perform_joins
from .services.normalizer import normalize
from .services.type_inference import SelectionError, refresh_data_model, type_and_coerce

__version__ = "0.1.0"

__all__ = [
    "RawTable",
    "NormalizedTable",
    "MergedRowSet",
    "JoinKind",
    "JoinSpec",
    "DataModel",
    "ChartKind",
    "Aggregation",
    "ChartSpec",
    "SelectionError",
    "normalize",
    "join_tables",
    "perform_joins",
    "type_and_coerce",
    "refresh_data_model",
    "aggregate",
    "aggregate_charts",
]
