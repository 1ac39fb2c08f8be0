"""
Module: serialization.report

Purpose:
    Build, validate and save a JSON statistics report for a RecordStore:
    per-student statistics over their own scores, and per-assignment class
    statistics with missing assignments counted as zero.

Key Functions:
    - build_report(): Report dict for a store
    - save_report(): Validate and write a report as JSON

Key Classes:
    - ReportError: Report failed schema validation

Dependencies:
    - json (std)
    - gradebook.statistics: describe, class_scores
    - gradebook.core.schemas.validator: report schema

Used By:
    - controller: --report
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from gradebook.core.models import Stats
from gradebook.core.schemas.validator import (
    REPORT_SCHEMA_VERSION,
    ValidationError,
    validate_report as _validate_report,
)
from gradebook.statistics import (
    DegenerateStatisticsError,
    assignment_names,
    class_scores,
    describe,
)
from gradebook.store import RecordStore

logger = logging.getLogger(__name__)


class ReportError(ValueError):
    """Report does not match the report schema."""
    pass


def _stats_or_none(values: List[float], label: str) -> Optional[Dict[str, Any]]:
    try:
        stats: Stats = describe(values)
    except DegenerateStatisticsError:
        logger.debug(f"No statistics for {label}: no values")
        return None
    return stats.to_dict()


def build_report(store: RecordStore, assignments: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Build the statistics report for `store`.

    Args:
        store: Store to report on
        assignments: Assignment names to include; None means every name
            seen in the store, in first-seen order

    Returns:
        Dict matching report.schema.json
    """
    names = list(assignments) if assignments is not None else assignment_names(store)

    students = []
    for record in store:
        scores: Dict[str, float] = {}
        for assignment in record.assignments:
            scores.setdefault(assignment.name, assignment.value)
        students.append({
            "given": record.given,
            "family": record.family,
            "scores": scores,
            "stats": _stats_or_none(list(record.scores), record.full_name),
        })

    assignment_entries = []
    for name in names:
        missing = sum(1 for record in store if record.score_for(name) is None)
        assignment_entries.append({
            "name": name,
            "missing": missing,
            "stats": _stats_or_none(class_scores(store, name), name),
        })

    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "sort_key": store.sort_key.value,
        "sort_order": store.sort_order.value,
        "record_count": len(students),
        "students": students,
        "assignments": assignment_entries,
    }


def validate_report(report: Dict[str, Any]) -> None:
    """
    Raises:
        ReportError: If `report` does not match the report schema
    """
    try:
        _validate_report(report)
    except ValidationError as e:
        raise ReportError(str(e)) from e


def save_report(report: Dict[str, Any], path: Path) -> Path:
    """
    Validate `report` and write it to `path` as indented JSON.

    Raises:
        ReportError: If `report` fails validation or holds a NaN or infinite number
    """
    validate_report(report)
    try:
        text = json.dumps(report, indent=2, allow_nan=False)
    except ValueError as e:
        raise ReportError(f"Report is not valid JSON: {e}") from e
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")
    logger.info(f"Wrote statistics report to {path}")
    return path
