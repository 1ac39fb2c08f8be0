"""
Module: config

Purpose:
    Configuration dataclass for the gradebook pipeline. Immutable
    configuration with validation on construction, optionally loaded from
    a JSON file.

Key Classes:
    - GradebookConfig: Paths, ordering and queries for one run
    - ConfigError: Configuration file missing, malformed or invalid

Key Functions:
    - load_config(): Read and validate a JSON configuration file
    - config_from_dict(): Build a config from an already-parsed mapping

Dependencies:
    - json (std)
    - gradebook.core.schemas.validator: config schema

Used By:
    - controller: run_gradebook
    - cli: flag handling
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from gradebook.core.models import SortKey, SortOrder
from gradebook.core.schemas.validator import ValidationError, validate_config

logger = logging.getLogger(__name__)

DEFAULT_INPUT = Path("input_list.txt")
DEFAULT_OUTPUT = Path("output_list.txt")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Configuration file missing, malformed or invalid."""
    pass


@dataclass(frozen=True)
class GradebookConfig:
    """
    Configuration for one gradebook run (immutable).

    Attributes:
        input_path: Gradebook text file to read
        output_path: Gradebook text file to write
        sort_key: Name field to order by
        sort_order: Direction of the ordering
        report_path: Where to write the JSON statistics report (None = skip)
        student: (given, family) to compute per-student statistics for
        assignment: Assignment name to compute class statistics for
        print_table: Print the sorted records to stdout
        log_level: Logging level name

    Example:
        >>> config = GradebookConfig(sort_key=SortKey.GIVEN)
        >>> config.output_path
        PosixPath('output_list.txt')
    """

    input_path: Path = DEFAULT_INPUT
    output_path: Path = DEFAULT_OUTPUT
    sort_key: SortKey = SortKey.FAMILY
    sort_order: SortOrder = SortOrder.ASCENDING

    # Queries
    report_path: Optional[Path] = None
    student: Optional[Tuple[str, str]] = None
    assignment: Optional[str] = None

    # Console
    print_table: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.sort_key, SortKey):
            raise ValueError(f"sort_key must be a SortKey: {self.sort_key!r}")
        if not isinstance(self.sort_order, SortOrder):
            raise ValueError(f"sort_order must be a SortOrder: {self.sort_order!r}")
        if self.student is not None:
            if len(self.student) != 2 or not all(self.student):
                raise ValueError(f"student must be (given, family): {self.student!r}")
        if self.assignment is not None and not self.assignment:
            raise ValueError("assignment name must not be empty")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}: {self.log_level!r}")
        if Path(self.input_path).resolve() == Path(self.output_path).resolve():
            raise ValueError(f"output_path must differ from input_path: {self.input_path}")


def config_from_dict(data: Dict[str, Any], *, base_path: Optional[Path] = None) -> GradebookConfig:
    """
    Build a config from a mapping with the keys of config.schema.json.

    Args:
        data: Parsed configuration
        base_path: If provided, relative paths are resolved against it

    Raises:
        ConfigError: If the mapping fails schema or field validation
    """
    try:
        validate_config(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e

    def _path(key: str, default: Optional[Path]) -> Optional[Path]:
        value = data.get(key)
        if value is None:
            return default
        path = Path(value)
        if base_path is not None and not path.is_absolute():
            path = base_path / path
        return path

    student = data.get("student")
    try:
        return GradebookConfig(
            input_path=_path("input_path", DEFAULT_INPUT),
            output_path=_path("output_path", DEFAULT_OUTPUT),
            sort_key=SortKey.parse(data.get("sort_key", SortKey.FAMILY.value)),
            sort_order=SortOrder.parse(data.get("sort_order", SortOrder.ASCENDING.value)),
            report_path=_path("report_path", None),
            student=tuple(student) if student else None,
            assignment=data.get("assignment"),
            print_table=bool(data.get("print_table", False)),
            log_level=data.get("log_level", "INFO"),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path) -> GradebookConfig:
    """
    Load a JSON configuration file.

    Relative paths inside the file are resolved against the file's folder.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}")
    logger.debug(f"Loaded config from {path}")
    return config_from_dict(data, base_path=path.parent)
