from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DashboardConfig, OutputConfig, TableSourceConfig
from ..models.join_spec import JoinKind, JoinSpec

"""Dashboard config loader.

Responsibilities:
- Load the YAML dashboard file (default config/dashboard.yml)
- Validate it against config_schema.json (shipped next to this module)
- Resolve relative paths against the config file's directory
- Build frozen DashboardConfig / TableSourceConfig / JoinSpec objects
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "parse_config",
]

DEFAULT_CONFIG_PATH = Path("config/dashboard.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If any of the following occurs:
            - The schema file does not exist or is not valid JSON.
            - The config data fails schema validation (missing required keys,
              wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _resolve(base_dir: Path, raw: str) -> Path:
    p = Path(raw).expanduser()
    return p if p.is_absolute() else (base_dir / p)


def _table_entry(base_dir: Path, raw: dict[str, Any]) -> TableSourceConfig:
    path = _resolve(base_dir, raw["path"])
    table_id = raw.get("id") or raw.get("name") or raw.get("sheet") or path.stem
    return TableSourceConfig(
        id=table_id,
        path=path,
        sheet=raw.get("sheet"),
        name=raw.get("name"),
        header_index=raw.get("header_index", 0),
    )


def _join_entry(index: int, raw: dict[str, Any]) -> JoinSpec:
    return JoinSpec(
        id=raw.get("id") or f"join-{index + 1}",
        left_table_id=raw["left_table"],
        right_table_id=raw["right_table"],
        # 未入力キーは空文字のまま保持 (join エンジン側で pass-through)
        left_key=raw.get("left_key", ""),
        right_key=raw.get("right_key", ""),
        kind=JoinKind.parse(raw.get("kind", "INNER")),
    )


def parse_config(data: dict[str, Any], base_dir: Path) -> DashboardConfig:
    """Build a DashboardConfig from already-loaded YAML data.

    Args:
        data: Parsed YAML mapping
        base_dir: Directory relative paths are resolved against

    Returns:
        Validated DashboardConfig

    Raises:
        ConfigError: Schema violation or duplicate table ids
    """
    _validate_config_schema(data)

    tables = [_table_entry(base_dir, t) for t in data["tables"]]
    ids = [t.id for t in tables]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ConfigError(f"duplicate table ids: {duplicates}")

    joins = [_join_entry(i, j) for i, j in enumerate(data.get("joins") or [])]
    out_raw = data.get("output") or {}
    output = OutputConfig(
        json_path=_resolve(base_dir, out_raw["json"]) if out_raw.get("json") else None,
        csv_path=_resolve(base_dir, out_raw["csv"]) if out_raw.get("csv") else None,
    )
    columns = data.get("columns")
    return DashboardConfig(
        tables=tables,
        joins=joins,
        columns=list(columns) if columns is not None else None,
        charts=list(data.get("charts") or []),
        name=data.get("name"),
        output=output,
        base_dir=base_dir,
    )


def load_config(path: Path) -> DashboardConfig:
    """Load and validate a dashboard YAML file.

    Args:
        path: YAML file; relative table paths resolve against its directory

    Returns:
        Validated DashboardConfig

    Raises:
        ConfigError: Missing file, invalid YAML or schema violation
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return parse_config(data, base_dir=path.resolve().parent)
