"""
Core Models Package

Immutable, validated data models for the gradebook.

| Model | Role |
|-------|------|
| `Assignment` | One named score |
| `StudentRecord` | Names plus a fixed-width tuple of assignments |
| `Stats` | Mean / median / sample standard deviation result |
| `SortKey`, `SortOrder` | Store ordering metadata |
"""

from .ordering import SortKey, SortOrder
from .records import Assignment, StudentRecord, MAX_NAME_LENGTH
from .stats import Stats

__all__ = [
    "Assignment",
    "StudentRecord",
    "Stats",
    "SortKey",
    "SortOrder",
    "MAX_NAME_LENGTH",
]
