"""
Module: statistics

Purpose:
    Descriptive statistics (mean, median, sample standard deviation) over
    raw sequences and over the records of a RecordStore.

Key Functions:
    - mean(), median(), sample_std_dev(), describe()
    - student_statistics(): Stats across one student's assignments
    - class_statistics(): Stats for one assignment across every student

Dependencies:
    - numpy: numeric kernels
"""

from .engine import (
    DegenerateStatisticsError,
    RecordNotFoundError,
    assignment_names,
    class_scores,
    class_statistics,
    describe,
    mean,
    median,
    sample_std_dev,
    student_statistics,
)

__all__ = [
    "DegenerateStatisticsError",
    "RecordNotFoundError",
    "assignment_names",
    "class_scores",
    "class_statistics",
    "describe",
    "mean",
    "median",
    "sample_std_dev",
    "student_statistics",
]
