from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the batch import CLI.

Responsibilities:
- Load YAML config (default config/import.yml)
- Validate against the bundled JSON schema (unknown keys rejected)
- Apply defaults (timezone=UTC, first sheet)
- ORDER_INGEST_STORE environment variable overrides store_path
"""

__all__ = [
    "SCHEMA_PATH",
    "STORE_ENV_VAR",
    "ConfigError",
    "ImportConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
STORE_ENV_VAR = "ORDER_INGEST_STORE"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    store_path: str
    sheet_name: str | None = None  # None: 先頭シート
    timezone: str = "UTC"
    header_aliases: dict[str, list[str]] = field(default_factory=dict)

    def today(self) -> date:
        """Current date in the configured timezone (fallback for undated rows)."""
        return datetime.now(ZoneInfo(self.timezone)).date()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
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


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    tz = data.get("timezone", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    return ImportConfig(
        source_directory=data["source_directory"],
        store_path=os.getenv(STORE_ENV_VAR) or data["store_path"],
        sheet_name=data.get("sheet_name"),
        timezone=tz,
        header_aliases={k: list(v) for k, v in (data.get("header_aliases") or {}).items()},
    )
