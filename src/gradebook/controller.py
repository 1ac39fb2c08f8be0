"""
Module: controller

Purpose:
    Orchestrate one gradebook run.
    Read → Build store → Write → Report → Query statistics

Key Functions:
    - run_gradebook(): Main entry point for a run

Key Classes:
    - GradebookResult: Everything a run produced
    - GradebookError: Exception for input/output failures

Dependencies:
    - gradebook.serialization: text format and report
    - gradebook.store: RecordStore
    - gradebook.statistics: queries

Used By:
    - gradebook.cli: command line
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from gradebook.core.models import Stats

from .config import GradebookConfig
from .serialization import (
    ParseError,
    ReportError,
    build_report,
    read_gradebook,
    save_report,
    write_gradebook,
)
from .statistics import (
    DegenerateStatisticsError,
    RecordNotFoundError,
    class_statistics,
    student_statistics,
)
from .store import RecordStore, load_records

logger = logging.getLogger(__name__)


class GradebookError(Exception):
    """Error reading input or writing output during a run."""
    pass


@dataclass(frozen=True)
class GradebookResult:
    """
    Result of one run (immutable).

    Attributes:
        store: The sorted record store
        output_path: Gradebook text file written
        records_loaded: Records inserted into the store
        skipped_lines: Line numbers of malformed input records
        student_stats: Stats for config.student, if requested
        assignment_stats: Stats for config.assignment, if requested
        report_path: JSON report written, if requested
        query_errors: Failed student/class queries, in the order they ran
        elapsed: Wall-clock seconds for the run
    """
    store: RecordStore
    output_path: Path
    records_loaded: int
    skipped_lines: Tuple[int, ...]
    student_stats: Optional[Stats] = None
    assignment_stats: Optional[Stats] = None
    report_path: Optional[Path] = None
    query_errors: Tuple[Exception, ...] = ()
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.query_errors


def run_gradebook(config: GradebookConfig) -> GradebookResult:
    """
    Run the gradebook pipeline.

    Pipeline:
    1. Parse the input file (malformed records are skipped)
    2. Insert every record into a store ordered by config.sort_key/order
    3. Write the sorted gradebook
    4. (Optional) Write the JSON statistics report
    5. Compute requested student and class statistics

    A failed query (unknown student, no scores to describe) does not stop
    the run. It is logged and kept in `query_errors`.

    Args:
        config: Run configuration

    Returns:
        GradebookResult

    Raises:
        GradebookError: If input cannot be parsed or output cannot be written
    """
    start_time = time.perf_counter()
    logger.info(f"Reading gradebook from {config.input_path}")

    # 1. Parse
    try:
        parsed = read_gradebook(config.input_path)
    except ParseError as e:
        raise GradebookError(f"Failed to read input: {e}") from e
    if parsed.skipped:
        logger.warning(f"Skipped {len(parsed.skipped)} malformed record(s) on lines {parsed.skipped}")

    # 2. Build
    store = load_records(parsed.rows, config.sort_key, config.sort_order)
    logger.info(
        f"Loaded {store.length()} records sorted by {store.sort_key.value} "
        f"({store.sort_order.value})"
    )

    # 3. Write
    try:
        output_path = write_gradebook(store, config.output_path)
    except OSError as e:
        raise GradebookError(f"Failed to write {config.output_path}: {e}") from e

    # 4. Report
    report_path = None
    if config.report_path is not None:
        try:
            report_path = save_report(build_report(store), config.report_path)
        except (OSError, ReportError) as e:
            raise GradebookError(f"Failed to write report: {e}") from e

    # 5. Query
    query_errors: List[Exception] = []
    student_stats = None
    if config.student is not None:
        given, family = config.student
        try:
            student_stats = student_statistics(store, given, family)
            logger.info(f"{given} {family}: {student_stats}")
        except (RecordNotFoundError, DegenerateStatisticsError) as e:
            logger.warning(f"Student query failed: {e}")
            query_errors.append(e)

    assignment_stats = None
    if config.assignment is not None:
        try:
            assignment_stats = class_statistics(store, config.assignment)
            logger.info(f"{config.assignment}: {assignment_stats}")
        except DegenerateStatisticsError as e:
            logger.warning(f"Class query for '{config.assignment}' failed: {e}")
            query_errors.append(e)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Done in {elapsed:.3f}s")

    return GradebookResult(
        store=store,
        output_path=output_path,
        records_loaded=store.length(),
        skipped_lines=tuple(parsed.skipped),
        student_stats=student_stats,
        assignment_stats=assignment_stats,
        report_path=report_path,
        query_errors=tuple(query_errors),
        elapsed=elapsed,
    )
