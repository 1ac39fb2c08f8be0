"""
Gradebook Core Package

Shared data models used by the store, the statistics engine and the
serialization boundary.

**DESIGN NOTES:**

1. **Immutable Records**
   - Records and assignments are frozen dataclasses
   - Linkage lives in the store's arena, never on the record
   - Handing a record to a caller cannot corrupt the store

2. **Hoisted Ordering Metadata**
   - Sort key and sort order are stored once per store
   - Records carry no per-node copy that could drift
"""

from .models import Assignment, StudentRecord, Stats, SortKey, SortOrder, MAX_NAME_LENGTH

__all__ = [
    "Assignment",
    "StudentRecord",
    "Stats",
    "SortKey",
    "SortOrder",
    "MAX_NAME_LENGTH",
]
