"""
Module: core.models.ordering

Purpose:
    Enums describing how a record store is ordered: which name field is
    the sort key, and in which direction records are traversed.

Key Classes:
    - SortKey: GIVEN or FAMILY name field
    - SortOrder: ASCENDING or DESCENDING

Used By:
    - core.models.records: StudentRecord.name_for / sort_bytes
    - store.record_store: RecordStore ordering metadata
    - config: GradebookConfig
"""

from __future__ import annotations

from enum import Enum


class SortKey(Enum):
    """
    Which name field orders the store.

    Example:
        >>> SortKey.parse("given")
        <SortKey.GIVEN: 'given'>
    """

    GIVEN = "given"
    FAMILY = "family"

    @classmethod
    def parse(cls, value: str | SortKey) -> SortKey:
        """Parse a key from its name, case-insensitively."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown sort key: {value!r} (expected 'given' or 'family')")


class SortOrder(Enum):
    """
    Direction of the ordered traversal.

    Both the full word and the usual short form are accepted by parse():
    "ascending"/"asc" and "descending"/"desc".
    """

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: str | SortOrder) -> SortOrder:
        """Parse an order from its name or short form."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("ascending", "asc"):
            return cls.ASCENDING
        if text in ("descending", "desc"):
            return cls.DESCENDING
        raise ValueError(
            f"Unknown sort order: {value!r} (expected 'ascending' or 'descending')"
        )

    def flipped(self) -> SortOrder:
        """Return the opposite direction."""
        if self is SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING

    def precedes(self, left: bytes, right: bytes) -> bool:
        """
        True if `left` must come strictly before `right` in this order.

        Equal keys never precede each other.
        """
        if self is SortOrder.ASCENDING:
            return left < right
        return left > right
