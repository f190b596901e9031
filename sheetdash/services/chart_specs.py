from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import jsonschema
from jsonschema.exceptions import ValidationError

from ..models.chart_spec import Aggregation, ChartKind, ChartSpec

"""Chart spec intake for externally produced (AI suggested / user edited) charts.

Chart suggestions arrive as untyped dicts. Both the snake_case form used by the
dashboard config and the camelCase form of the web client are accepted:

    {"id", "title", "kind"|"type", "dimension"|"dimension_column"|"xAxisKey",
     "metric"|"metric_column"|"dataKey", "aggregation", "description", "color"}

Entries failing validation are dropped with a WARN log; they never abort the
dashboard build.
"""

__all__ = [
    "CHART_SPEC_SCHEMA",
    "parse_chart_spec",
    "parse_chart_specs",
]

logger = logging.getLogger(__name__)

_ALIASES = {
    "type": "kind",
    "dimension_column": "dimension",
    "xAxisKey": "dimension",
    "metric_column": "metric",
    "dataKey": "metric",
}

CHART_SPEC_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["title", "kind", "dimension", "metric"],
    "properties": {
        "id": {"type": ["string", "integer"]},
        "title": {"type": "string"},
        "kind": {"type": "string", "enum": [k.value for k in ChartKind]},
        "dimension": {"type": "string"},
        "metric": {"type": "string"},
        "aggregation": {"type": "string", "enum": [a.value for a in Aggregation]},
        "description": {"type": "string"},
        "color": {"type": ["string", "null"]},
    },
}


def _canonical(raw: dict[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in raw.items():
        data[_ALIASES.get(key, key)] = value
    # enum は大文字小文字を区別しない
    for key in ("kind", "aggregation"):
        if isinstance(data.get(key), str):
            data[key] = data[key].strip().upper()
    # KPI は dimension を使わない
    if data.get("kind") == ChartKind.KPI.value:
        data.setdefault("dimension", "")
    return data


def parse_chart_spec(raw: dict[str, Any], fallback_id: str) -> ChartSpec:
    """Validate and convert one chart dict.

    Args:
        raw: Chart dict (snake_case or the web client's camelCase keys)
        fallback_id: Id used when the dict carries none

    Returns:
        ChartSpec with upper-cased kind / aggregation

    Raises:
        ValueError: when the dict does not describe a usable chart
    """
    if not isinstance(raw, dict):
        raise ValueError(f"chart spec must be an object, got {type(raw).__name__}")
    data = _canonical(raw)
    try:
        jsonschema.validate(data, CHART_SPEC_SCHEMA)
    except ValidationError as e:
        raise ValueError(f"invalid chart spec: {e.message}") from e
    return ChartSpec(
        id=str(data.get("id") or fallback_id),
        title=data["title"],
        kind=ChartKind(data["kind"]),
        dimension_column=data["dimension"],
        metric_column=data["metric"],
        aggregation=Aggregation(data.get("aggregation", Aggregation.SUM.value)),
        description=data.get("description", ""),
        color=data.get("color"),
    )


def parse_chart_specs(raw_specs: Iterable[Any] | None) -> tuple[list[ChartSpec], int]:
    """Convert a list of chart dicts, dropping malformed entries.

    Args:
        raw_specs: Chart dicts in display order (None means no charts)

    Returns:
        (specs, rejected_count)
    """
    specs: list[ChartSpec] = []
    rejected = 0
    seen_ids: set[str] = set()
    for i, raw in enumerate(raw_specs or []):
        try:
            spec = parse_chart_spec(raw, fallback_id=f"chart-{i + 1}")
        except ValueError as e:
            rejected += 1
            logger.warning(f"chart #{i + 1} rejected: {e}")
            continue
        if spec.id in seen_ids:
            rejected += 1
            logger.warning(f"chart #{i + 1} rejected: duplicate id '{spec.id}'")
            continue
        seen_ids.add(spec.id)
        specs.append(spec)
    return specs, rejected
