"""
Module: core.models.records

Purpose:
    Provides the Assignment and StudentRecord dataclasses - the immutable
    payload stored in each slot of a RecordStore.

Key Classes:
    - Assignment: A named numeric score
    - StudentRecord: Given/family names and a fixed-width assignment tuple

Key Functions:
    - StudentRecord.create(): Copy caller data into a new record, truncating
      names to MAX_NAME_LENGTH

Dependencies:
    - dataclasses (std)
    - .ordering.SortKey

Used By:
    - store.record_store: RecordStore.insert
    - statistics.engine: score extraction
    - serialization: parser rows, writer output
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from .ordering import SortKey

# Names were held in 100-byte buffers including the terminator.
MAX_NAME_LENGTH = 99

AssignmentLike = Union["Assignment", Tuple[str, float], Sequence]


def _bounded(text: str) -> str:
    return str(text)[:MAX_NAME_LENGTH]


@dataclass(frozen=True, slots=True)
class Assignment:
    """
    A single named score.

    Attributes:
        name: Assignment name (at most MAX_NAME_LENGTH characters)
        value: Score for the assignment

    Invariants:
        - len(name) <= MAX_NAME_LENGTH

    Example:
        >>> a = Assignment("hw1", 92.5)
        >>> a.value
        92.5
    """

    name: str
    value: float

    def __post_init__(self) -> None:
        """Validate assignment on construction."""
        if len(self.name) > MAX_NAME_LENGTH:
            raise ValueError(
                f"Assignment name exceeds {MAX_NAME_LENGTH} characters: {self.name[:20]!r}..."
            )

    @classmethod
    def coerce(cls, item: AssignmentLike) -> Assignment:
        """
        Build an Assignment from an Assignment or a (name, score) pair.

        The name is truncated to MAX_NAME_LENGTH and the score converted
        to float.
        """
        if isinstance(item, Assignment):
            return cls(name=_bounded(item.name), value=float(item.value))
        name, value = item
        return cls(name=_bounded(name), value=float(value))

    def to_tuple(self) -> Tuple[str, float]:
        return (self.name, self.value)


@dataclass(frozen=True, slots=True)
class StudentRecord:
    """
    One student's names and scores.

    The assignment tuple has a fixed length set at creation. There is no
    resize API; adding an assignment means building a new record.

    Attributes:
        given: Given (first) name
        family: Family (last) name
        assignments: Scores in input order

    Invariants:
        - len(given), len(family) <= MAX_NAME_LENGTH
        - assignments is a tuple of Assignment

    Example:
        >>> r = StudentRecord.create("Amy", "Zephyr", [("hw1", 90)])
        >>> r.name_for(SortKey.FAMILY)
        'Zephyr'
    """

    given: str
    family: str
    assignments: Tuple[Assignment, ...] = ()

    def __post_init__(self) -> None:
        """Validate record on construction."""
        for label, value in (("given", self.given), ("family", self.family)):
            if len(value) > MAX_NAME_LENGTH:
                raise ValueError(
                    f"{label} name exceeds {MAX_NAME_LENGTH} characters: {value[:20]!r}..."
                )
        if not isinstance(self.assignments, tuple):
            raise ValueError("assignments must be a tuple of Assignment")
        for item in self.assignments:
            if not isinstance(item, Assignment):
                raise ValueError(f"Invalid assignment entry: {item!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def create(
        cls,
        given: str,
        family: str,
        assignments: Optional[Iterable[AssignmentLike]] = None,
    ) -> StudentRecord:
        """
        Copy caller data into a new record.

        Args:
            given: Given name (truncated to MAX_NAME_LENGTH)
            family: Family name (truncated to MAX_NAME_LENGTH)
            assignments: Assignments or (name, score) pairs

        Returns:
            New StudentRecord owning its own copy of every value
        """
        copied = tuple(Assignment.coerce(a) for a in (assignments or ()))
        return cls(given=_bounded(given), family=_bounded(family), assignments=copied)

    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────

    def name_for(self, key: SortKey) -> str:
        """Return the name field selected by `key`."""
        if key is SortKey.GIVEN:
            return self.given
        return self.family

    def sort_bytes(self, key: SortKey) -> bytes:
        """Byte-wise comparison key for `key` (UTF-8, case-sensitive)."""
        return self.name_for(key).encode("utf-8")

    def score_for(self, assignment_name: str) -> Optional[float]:
        """Score of the first assignment named `assignment_name`, or None."""
        for assignment in self.assignments:
            if assignment.name == assignment_name:
                return assignment.value
        return None

    @property
    def scores(self) -> Tuple[float, ...]:
        return tuple(a.value for a in self.assignments)

    @property
    def assignment_count(self) -> int:
        return len(self.assignments)

    @property
    def full_name(self) -> str:
        return f"{self.given} {self.family}"

    def to_row(self) -> Tuple[str, str, list]:
        """Export as a (given, family, [(name, score), ...]) tuple."""
        return (self.given, self.family, [a.to_tuple() for a in self.assignments])

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"StudentRecord({self.given!r}, {self.family!r}, {len(self.assignments)} assignments)"
