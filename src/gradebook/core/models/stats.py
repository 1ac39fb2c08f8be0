"""
Module: core.models.stats

Purpose:
    Stats dataclass - the ephemeral result of a statistics query.

Used By:
    - statistics.engine: describe, student_statistics, class_statistics
    - serialization.report: JSON report entries
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class Stats:
    """
    Descriptive statistics over a numeric sequence.

    Attributes:
        mean: Arithmetic mean
        median: Middle value (average of the two central values for even counts)
        stddev: Sample standard deviation, None when count < 2
        count: Number of values the statistics were computed over

    Invariants:
        - count >= 1
        - stddev is None if and only if count == 1
    """

    mean: float
    median: float
    stddev: Optional[float]
    count: int

    def __post_init__(self) -> None:
        """Validate stats on construction."""
        if self.count < 1:
            raise ValueError(f"Stats require at least one value: count={self.count}")
        if (self.stddev is None) != (self.count == 1):
            raise ValueError(
                f"stddev must be None exactly when count == 1 (count={self.count})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "median": self.median,
            "stddev": self.stddev,
            "count": self.count,
        }

    def __str__(self) -> str:
        stddev = "undefined" if self.stddev is None else f"{self.stddev:.4f}"
        return f"mean={self.mean:.4f} median={self.median:.4f} stddev={stddev} (n={self.count})"
