"""
Module: store.record_store

Purpose:
    The sorted, doubly-linked record store. Records live in an arena of
    slots addressed by stable integer indices; each slot carries `next`
    and `prev` indices instead of object references. The store keeps its
    ordering metadata (sort key and sort order) once, not per node.

Key Classes:
    - RecordStore: insert / find / delete / reverse / sort / length
    - StoreIndexError: delete_at() index outside the store
    - StoreCorruptionError: check_invariants() found a broken chain

Key Functions:
    - load_records(): Bulk-load rows into a new store
    - export_records(): Rows in current traversal order

Dependencies:
    - logging (std)
    - gradebook.core.models: StudentRecord, SortKey, SortOrder

Used By:
    - statistics.engine: student and class statistics
    - serialization.writer: text output
    - controller: pipeline

Complexity:
    insert, find_by_name, find_student, delete_at and length are O(n)
    linear scans. sort() with a new key re-inserts every record, O(n^2).
    reverse() and sort() with only a new order are O(n) and reuse every
    slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from gradebook.core.models import SortKey, SortOrder, StudentRecord

logger = logging.getLogger(__name__)

Row = Tuple[str, str, Sequence]


class StoreIndexError(IndexError):
    """delete_at() was given an index outside the store."""
    pass


class StoreCorruptionError(RuntimeError):
    """The linked chain or its ordering is inconsistent."""
    pass


@dataclass(slots=True)
class _Slot:
    """One arena entry. `next` points toward the tail of the ordered traversal."""
    record: StudentRecord
    next: Optional[int] = None
    prev: Optional[int] = None


class RecordStore:
    """
    Sorted doubly-linked sequence of student records.

    Traversal from `head` along `next` visits records in sort order:
    non-decreasing key bytes for ASCENDING, non-increasing for DESCENDING.

    Attributes:
        sort_key: Which name field orders the store
        sort_order: Direction of the ordered traversal

    Example:
        >>> store = RecordStore()
        >>> store.insert("Amy", "Zephyr", [("hw1", 90)])
        StudentRecord('Amy', 'Zephyr', 1 assignments)
        >>> store.insert("Bob", "Adams", [("hw1", 80)])
        StudentRecord('Bob', 'Adams', 1 assignments)
        >>> [r.family for r in store]
        ['Adams', 'Zephyr']
    """

    def __init__(
        self,
        sort_key: SortKey = SortKey.FAMILY,
        sort_order: SortOrder = SortOrder.ASCENDING,
    ) -> None:
        self._sort_key = SortKey.parse(sort_key)
        self._sort_order = SortOrder.parse(sort_order)
        self._slots: List[Optional[_Slot]] = []
        self._free: List[int] = []
        self._head: Optional[int] = None
        self._tail: Optional[int] = None

    @property
    def sort_key(self) -> SortKey:
        return self._sort_key

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def head(self) -> Optional[StudentRecord]:
        """First record of the ordered traversal, or None when empty."""
        if self._head is None:
            return None
        return self._slot(self._head).record

    @property
    def tail(self) -> Optional[StudentRecord]:
        """Last record of the ordered traversal, or None when empty."""
        if self._tail is None:
            return None
        return self._slot(self._tail).record

    def is_empty(self) -> bool:
        return self._head is None

    # ─────────────────────────────────────────────────────────────────────────
    # Arena
    # ─────────────────────────────────────────────────────────────────────────

    def _slot(self, index: int) -> _Slot:
        slot = self._slots[index]
        if slot is None:
            raise StoreCorruptionError(f"Link points at released slot {index}")
        return slot

    def _allocate(self, record: StudentRecord) -> int:
        slot = _Slot(record)
        if self._free:
            index = self._free.pop()
            self._slots[index] = slot
        else:
            index = len(self._slots)
            self._slots.append(slot)
        return index

    def _release(self, index: int) -> StudentRecord:
        slot = self._slot(index)
        self._slots[index] = None
        self._free.append(index)
        return slot.record

    def _indices(self) -> Iterator[int]:
        index = self._head
        while index is not None:
            yield index
            index = self._slot(index).next

    # ─────────────────────────────────────────────────────────────────────────
    # Insertion
    # ─────────────────────────────────────────────────────────────────────────

    def insert(
        self,
        given: str,
        family: str,
        assignments: Optional[Iterable] = None,
        sort_key: Optional[SortKey] = None,
        sort_order: Optional[SortOrder] = None,
    ) -> StudentRecord:
        """
        Insert a new record at its sorted position.

        The caller's strings and assignment data are copied. Duplicate
        names are allowed and end up adjacent.

        Args:
            given: Given name
            family: Family name
            assignments: Assignments or (name, score) pairs
            sort_key: Requested key; None keeps the store's key
            sort_order: Requested order; None keeps the store's order

        Returns:
            The stored record

        Note:
            If the requested key/order differs from the store's, the whole
            store is re-sorted first. An empty store simply adopts them.
        """
        record = StudentRecord.create(given, family, assignments)
        return self.insert_record(record, sort_key=sort_key, sort_order=sort_order)

    def insert_record(
        self,
        record: StudentRecord,
        sort_key: Optional[SortKey] = None,
        sort_order: Optional[SortOrder] = None,
    ) -> StudentRecord:
        """Insert an existing StudentRecord. See insert()."""
        key = self._sort_key if sort_key is None else SortKey.parse(sort_key)
        order = self._sort_order if sort_order is None else SortOrder.parse(sort_order)

        if self.is_empty():
            self._sort_key = key
            self._sort_order = order
        elif (key, order) != (self._sort_key, self._sort_order):
            self.sort(key, order)

        self._link_sorted(self._allocate(record))
        logger.debug(f"Inserted {record.full_name} by {key.value}/{order.value}")
        return record

    def _link_sorted(self, new: int) -> None:
        """Splice slot `new` in after the run of records not following it."""
        node = self._slot(new)
        if self._head is None:
            node.prev = node.next = None
            self._head = self._tail = new
            return

        target = node.record.sort_bytes(self._sort_key)
        cursor = self._head
        while cursor is not None:
            current = self._slot(cursor)
            if self._sort_order.precedes(target, current.record.sort_bytes(self._sort_key)):
                break
            cursor = current.next

        if cursor is None:
            # Past every record: new tail.
            tail = self._slot(self._tail)
            node.prev = self._tail
            node.next = None
            tail.next = new
            self._tail = new
            return

        after = self._slot(cursor)
        node.next = cursor
        node.prev = after.prev
        if after.prev is None:
            self._head = new
        else:
            self._slot(after.prev).next = new
        after.prev = new

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def find_by_name(self, name: str, key: Optional[SortKey] = None) -> Optional[StudentRecord]:
        """
        Find the first record whose `key` field equals `name`.

        This is a linear scan from the head, not a binary search. When `key`
        is the store's active key the scan stops as soon as it passes the
        position `name` would occupy; for any other key it walks the whole
        chain.

        Args:
            name: Name to look for (exact, case-sensitive)
            key: Field to compare; None means the active key

        Returns:
            The first matching record, or None if absent or the store is empty
        """
        key = self._sort_key if key is None else SortKey.parse(key)
        for record in self._scan(name, key):
            return record
        return None

    def find_student(self, given: str, family: str) -> Optional[StudentRecord]:
        """
        Find the record matching both names.

        The ordered scan runs on whichever name is the active key; among the
        records sharing that name the other name must match as well.
        """
        if self._sort_key is SortKey.GIVEN:
            primary, other_key, other = given, SortKey.FAMILY, family
        else:
            primary, other_key, other = family, SortKey.GIVEN, given
        for record in self._scan(primary, self._sort_key):
            if record.name_for(other_key) == other:
                return record
        return None

    def _scan(self, name: str, key: SortKey) -> Iterator[StudentRecord]:
        """Yield every record whose `key` field equals `name`, in traversal order."""
        target = name.encode("utf-8")
        ordered = key is self._sort_key
        for index in self._indices():
            record = self._slot(index).record
            current = record.sort_bytes(key)
            if current == target:
                yield record
            elif ordered and self._sort_order.precedes(target, current):
                return

    def index_of(self, record: StudentRecord) -> Optional[int]:
        """Traversal offset of `record` (identity match), or None."""
        for offset, index in enumerate(self._indices()):
            if self._slot(index).record is record:
                return offset
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Removal
    # ─────────────────────────────────────────────────────────────────────────

    def delete_at(self, index: int) -> StudentRecord:
        """
        Remove the record at 0-based offset `index` from the head.

        Args:
            index: Offset along the ordered traversal

        Returns:
            The removed record (the store no longer references it)

        Raises:
            StoreIndexError: If index is negative or >= length
        """
        if index < 0:
            raise StoreIndexError(f"Index must be non-negative: {index}")
        cursor = self._head
        for _ in range(index):
            if cursor is None:
                break
            cursor = self._slot(cursor).next
        if cursor is None:
            raise StoreIndexError(f"Index {index} out of range for store of length {self.length()}")

        node = self._slot(cursor)
        if node.prev is None:
            self._head = node.next
        else:
            self._slot(node.prev).next = node.next
        if node.next is None:
            self._tail = node.prev
        else:
            self._slot(node.next).prev = node.prev

        record = self._release(cursor)
        logger.debug(f"Deleted {record.full_name} at index {index}")
        return record

    def clear(self) -> None:
        """Release every record and slot."""
        count = self.length()
        self._slots.clear()
        self._free.clear()
        self._head = self._tail = None
        logger.debug(f"Cleared store ({count} records)")

    # ─────────────────────────────────────────────────────────────────────────
    # Reordering
    # ─────────────────────────────────────────────────────────────────────────

    def reverse(self) -> None:
        """
        Reverse the traversal in place and flip the sort order.

        Every live slot swaps its `next` and `prev` links and the head and
        tail swap places. No slot is reallocated.

        A store of zero or one record keeps its chain as it is but still
        flips `sort_order`, so later inserts land in the reversed order and
        two calls always restore the starting state.
        """
        index = self._head
        while index is not None:
            node = self._slot(index)
            node.next, node.prev = node.prev, node.next
            # The old `next` is now `prev`.
            index = node.prev
        self._head, self._tail = self._tail, self._head
        self._sort_order = self._sort_order.flipped()
        logger.debug(f"Reversed store, now {self._sort_order.value}")

    def sort(self, key: SortKey, order: SortOrder) -> None:
        """
        Reorder the store by `key` in `order`.

        - Same key and order: no-op.
        - Same key, other order: reverse().
        - Other key: every record is drained in traversal order and
          re-inserted under the new key/order (O(n^2)).
        """
        key = SortKey.parse(key)
        order = SortOrder.parse(order)
        if (key, order) == (self._sort_key, self._sort_order):
            return
        if key is self._sort_key:
            self.reverse()
            return

        records = [self._slot(index).record for index in self._indices()]
        self._slots.clear()
        self._free.clear()
        self._head = self._tail = None
        self._sort_key = key
        self._sort_order = order
        for record in records:
            self._link_sorted(self._allocate(record))
        logger.debug(f"Rebuilt {len(records)} records by {key.value}/{order.value}")

    # ─────────────────────────────────────────────────────────────────────────
    # Size and Iteration
    # ─────────────────────────────────────────────────────────────────────────

    def length(self) -> int:
        """Count records by walking the chain."""
        return sum(1 for _ in self._indices())

    def __len__(self) -> int:
        return self.length()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __iter__(self) -> Iterator[StudentRecord]:
        for index in self._indices():
            yield self._slot(index).record

    def __reversed__(self) -> Iterator[StudentRecord]:
        index = self._tail
        while index is not None:
            node = self._slot(index)
            yield node.record
            index = node.prev

    def __repr__(self) -> str:
        return (
            f"RecordStore({self.length()} records, "
            f"{self._sort_key.value}/{self._sort_order.value})"
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Invariants
    # ─────────────────────────────────────────────────────────────────────────

    def check_invariants(self) -> None:
        """
        Verify the chain links and the ordering.

        Raises:
            StoreCorruptionError: On the first violation found
        """
        live = sum(1 for slot in self._slots if slot is not None)
        if self._head is None or self._tail is None:
            if self._head is not None or self._tail is not None or live:
                raise StoreCorruptionError("Empty store has a dangling head, tail or slot")
            return

        if self._slot(self._head).prev is not None:
            raise StoreCorruptionError("Head has a previous link")
        if self._slot(self._tail).next is not None:
            raise StoreCorruptionError("Tail has a next link")

        seen = 0
        previous: Optional[int] = None
        index: Optional[int] = self._head
        while index is not None:
            seen += 1
            if seen > live:
                raise StoreCorruptionError("Chain is longer than the arena (cycle?)")
            node = self._slot(index)
            if node.prev != previous:
                raise StoreCorruptionError(f"Slot {index} has prev={node.prev}, expected {previous}")
            if previous is not None:
                before = self._slot(previous).record.sort_bytes(self._sort_key)
                if self._sort_order.precedes(node.record.sort_bytes(self._sort_key), before):
                    raise StoreCorruptionError(
                        f"{node.record.full_name} is out of {self._sort_order.value} order"
                    )
            previous, index = index, node.next

        if previous != self._tail:
            raise StoreCorruptionError("Chain does not end at the tail")
        if seen != live:
            raise StoreCorruptionError(f"{live - seen} live slots are unreachable")


# ─────────────────────────────────────────────────────────────────────────────
# Bulk Load / Export
# ─────────────────────────────────────────────────────────────────────────────

def load_records(
    rows: Iterable[Row],
    sort_key: SortKey = SortKey.FAMILY,
    sort_order: SortOrder = SortOrder.ASCENDING,
) -> RecordStore:
    """
    Build a store from (given, family, [(assignment_name, score), ...]) rows.

    Args:
        rows: Parsed rows, in any order
        sort_key: Key for the new store
        sort_order: Order for the new store

    Returns:
        A RecordStore containing one record per row
    """
    store = RecordStore(sort_key, sort_order)
    for given, family, assignments in rows:
        store.insert(given, family, assignments)
    logger.debug(f"Loaded {store.length()} records")
    return store


def export_records(store: RecordStore) -> List[Tuple[str, str, list]]:
    """Rows in the store's current traversal order."""
    return [record.to_row() for record in store]
