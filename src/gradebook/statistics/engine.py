"""
Module: statistics.engine

Purpose:
    Compute mean, median and sample standard deviation, either over a
    plain sequence of numbers or over the records held in a RecordStore.

Key Functions:
    - mean(values): Arithmetic mean
    - median(values): Middle value of a sorted copy
    - sample_std_dev(values): Bessel-corrected (n - 1) standard deviation
    - describe(values): All three as a Stats
    - student_statistics(store, given, family): Stats over one record's scores
    - class_statistics(store, assignment_name): Stats over one assignment,
      counting a missing assignment as 0.0

Key Classes:
    - DegenerateStatisticsError: Too few values for the requested statistic
    - RecordNotFoundError: No record matches the requested names

Dependencies:
    - numpy: Numeric kernels
    - gradebook.store: RecordStore

Used By:
    - serialization.report: JSON report
    - controller: CLI queries
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from gradebook.core.models import Stats
from gradebook.store import RecordStore

logger = logging.getLogger(__name__)

# Score used for a student who has no assignment with the requested name.
MISSING_SCORE = 0.0


class DegenerateStatisticsError(ValueError):
    """Too few values: mean/median of nothing, or stddev of fewer than two."""
    pass


class RecordNotFoundError(LookupError):
    """No record in the store matches the requested names."""
    pass


def _as_array(values: Sequence[float], minimum: int, what: str) -> np.ndarray:
    """Copy `values` into a float64 array, requiring at least `minimum` items."""
    array = np.array(values, dtype=np.float64)
    if array.ndim != 1:
        raise ValueError(f"{what} expects a flat sequence of numbers")
    if array.size < minimum:
        raise DegenerateStatisticsError(
            f"{what} needs at least {minimum} value(s), got {array.size}"
        )
    return array


def mean(values: Sequence[float]) -> float:
    """
    Arithmetic mean.

    Raises:
        DegenerateStatisticsError: If `values` is empty
    """
    return float(np.mean(_as_array(values, 1, "mean")))


def median(values: Sequence[float]) -> float:
    """
    Median of a sorted copy of `values`.

    For an even count this is the average of the two central values. The
    caller's sequence is left untouched.

    Raises:
        DegenerateStatisticsError: If `values` is empty
    """
    return float(np.median(_as_array(values, 1, "median")))


def sample_std_dev(values: Sequence[float]) -> float:
    """
    Sample standard deviation: sqrt(sum((x - mean)^2) / (n - 1)).

    Raises:
        DegenerateStatisticsError: If fewer than two values are given
    """
    return float(np.std(_as_array(values, 2, "sample standard deviation"), ddof=1))


def describe(values: Sequence[float]) -> Stats:
    """
    Mean, median and sample standard deviation in one Stats.

    A single value yields stddev=None rather than a non-finite number.

    Raises:
        DegenerateStatisticsError: If `values` is empty
    """
    array = _as_array(values, 1, "statistics")
    stddev = float(np.std(array, ddof=1)) if array.size >= 2 else None
    return Stats(
        mean=float(np.mean(array)),
        median=float(np.median(array)),
        stddev=stddev,
        count=int(array.size),
    )


def student_statistics(store: RecordStore, given: str, family: str) -> Stats:
    """
    Stats over one student's assignment scores.

    Args:
        store: Store to search
        given: Student's given name
        family: Student's family name

    Returns:
        Stats over every assignment value of the matching record

    Raises:
        RecordNotFoundError: If no record matches both names
        DegenerateStatisticsError: If the record has no assignments
    """
    record = store.find_student(given, family)
    if record is None:
        raise RecordNotFoundError(f"No student named {given} {family}")
    logger.debug(f"Computing statistics for {record.full_name} over {record.assignment_count} scores")
    return describe(record.scores)


def class_scores(store: RecordStore, assignment_name: str) -> List[float]:
    """
    One score per record for `assignment_name`, in traversal order.

    The first assignment with a matching name wins; a record without it
    contributes MISSING_SCORE (zero credit).
    """
    scores: List[float] = []
    missing = 0
    for record in store:
        score = record.score_for(assignment_name)
        if score is None:
            missing += 1
            score = MISSING_SCORE
        scores.append(score)
    if missing:
        logger.debug(
            f"{missing} of {len(scores)} students have no '{assignment_name}'; "
            f"counted as {MISSING_SCORE:.1f}"
        )
    return scores


def class_statistics(store: RecordStore, assignment_name: str) -> Stats:
    """
    Stats for one assignment across every student.

    Raises:
        DegenerateStatisticsError: If the store is empty
    """
    return describe(class_scores(store, assignment_name))


def assignment_names(store: RecordStore) -> List[str]:
    """Distinct assignment names in first-seen traversal order."""
    seen: dict[str, None] = {}
    for record in store:
        for assignment in record.assignments:
            seen.setdefault(assignment.name, None)
    return list(seen)
