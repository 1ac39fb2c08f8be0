"""
Schema Validation Utilities

Validates configuration files and statistics reports against the JSON
Schemas shipped next to this module.

- `config.schema.json`: keys accepted by `gradebook.config.load_config`
- `report.schema.json`: output of `gradebook.serialization.report.build_report`

Validation fails fast on the first violation and reports its JSON path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


CONFIG_SCHEMA = "config"
REPORT_SCHEMA = "report"
REPORT_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(data: Any, name: str) -> None:
    schema = _load_schema(name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path)
        where = f" at '{path}'" if path else ""
        raise ValidationError(
            f"{name} schema validation failed{where}: {e.message}",
            path=path,
            errors=[e.message],
        )


def validate_config(data: dict[str, Any]) -> None:
    """
    Validate a configuration mapping.

    Raises:
        ValidationError: If data has unknown keys or values of the wrong type
    """
    if not isinstance(data, dict):
        raise ValidationError("Configuration must be a JSON object", path="")
    _validate(data, CONFIG_SCHEMA)


def validate_report(data: dict[str, Any]) -> None:
    """
    Validate a statistics report.

    Raises:
        ValidationError: If the report does not match report.schema.json
    """
    _validate(data, REPORT_SCHEMA)
