"""
JSON Schemas for gradebook configuration files and statistics reports.
"""

from .validator import (
    CONFIG_SCHEMA,
    REPORT_SCHEMA,
    REPORT_SCHEMA_VERSION,
    ValidationError,
    validate_config,
    validate_report,
)

__all__ = [
    "CONFIG_SCHEMA",
    "REPORT_SCHEMA",
    "REPORT_SCHEMA_VERSION",
    "ValidationError",
    "validate_config",
    "validate_report",
]
