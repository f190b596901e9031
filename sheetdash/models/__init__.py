"""Domain models for the sheetdash tabular data engine.

This package contains the value types passed between the normalizer, the join
engine, type inference and the aggregator, plus the dashboard build result.
"""

from .cells import CellValue
from .config_models import DashboardConfig, OutputConfig, TableSourceConfig
from .chart_spec import Aggregation, ChartKind, ChartSpec
from .data_model import ColumnType, DataModel, TypedRow
from .join_spec import JoinDiagnostic, JoinKind, JoinSpec
from .processing_result import DashboardResult, StageTimer
from .tables import MergedRowSet, NormalizedTable, RawTable

__all__ = [
    # Table models
    "CellValue",
    "RawTable",
    "NormalizedTable",
    "MergedRowSet",
    # Configuration-like models
    "JoinKind",
    "JoinSpec",
    "JoinDiagnostic",
    "ChartKind",
    "Aggregation",
    "ChartSpec",
    # Output models
    "ColumnType",
    "TypedRow",
    "DataModel",
    "DashboardResult",
    "StageTimer",
    # Configuration models
    "TableSourceConfig",
    "OutputConfig",
    "DashboardConfig",
]
