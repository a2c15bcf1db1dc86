from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ..models.config_models import DEFAULT_LABEL_COLUMNS, DEFAULT_WORKBOOK_NAME, LedgerConfig, TemplateConfig

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/inventory.yml``)
- Validate against the bundled JSON schema (``config_schema.json``)
- Apply defaults (workbook name, templates, label columns)
- Let DATA_DIR from the environment override ``data_dir``
"""

DEFAULT_CONFIG_PATH = Path("config/inventory.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DATA_DIR_ENV = "DATA_DIR"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or broken, or the data
            violates it (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except SchemaValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> LedgerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    data_dir = os.getenv(DATA_DIR_ENV) or data["data_dir"]
    template_dir = data.get("template_dir")
    templates_raw = data.get("templates") or {}
    return LedgerConfig(
        data_dir=Path(data_dir),
        workbook_name=data.get("workbook_name", DEFAULT_WORKBOOK_NAME),
        template_dir=Path(template_dir) if template_dir else None,
        templates=TemplateConfig(**templates_raw),
        label_columns_per_row=data.get("label_columns_per_row", DEFAULT_LABEL_COLUMNS),
    )
