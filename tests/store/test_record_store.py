"""
Unit tests for RecordStore.

Covers ordered insertion for every key/order pair, lookup, bounds-checked
deletion, in-place reversal, re-sorting and the bulk load/export helpers.
"""

import itertools

import pytest

from gradebook.core.models import SortKey, SortOrder, StudentRecord
from gradebook.store import (
    RecordStore,
    StoreCorruptionError,
    StoreIndexError,
    export_records,
    load_records,
)

ALL_PAIRS = list(itertools.product(SortKey, SortOrder))

NAMES = [
    ("Amy", "Zephyr"),
    ("Bob", "Adams"),
    ("Cara", "Moss"),
    ("Dan", "Adams"),
    ("Eve", "baker"),
    ("Finn", "Moss"),
    ("Amy", "Carter"),
]


def _keys(store: RecordStore, key: SortKey):
    return [r.sort_bytes(key) for r in store]


def _is_ordered(keys, order: SortOrder) -> bool:
    pairs = list(zip(keys, keys[1:]))
    if order is SortOrder.ASCENDING:
        return all(a <= b for a, b in pairs)
    return all(a >= b for a, b in pairs)


def _build(key=SortKey.FAMILY, order=SortOrder.ASCENDING) -> RecordStore:
    store = RecordStore(key, order)
    for given, family in NAMES:
        store.insert(given, family, [("hw1", float(len(given)))])
    return store


class TestInsert:
    """Tests for RecordStore.insert."""

    def test_insert_when_empty_then_sole_element(self):
        """First insert should become both head and tail."""
        # Arrange
        store = RecordStore()

        # Act
        record = store.insert("Amy", "Zephyr", [("hw1", 90)])

        # Assert
        assert store.length() == 1
        assert store.head is record
        assert store.tail is record
        store.check_invariants()

    def test_insert_when_amy_zephyr_and_bob_adams_then_adams_first(self):
        """Ascending by family name should list Adams before Zephyr."""
        # Arrange
        store = RecordStore(SortKey.FAMILY, SortOrder.ASCENDING)

        # Act
        store.insert("Amy", "Zephyr")
        store.insert("Bob", "Adams")

        # Assert
        assert [r.family for r in store] == ["Adams", "Zephyr"]
        assert [r.given for r in store] == ["Bob", "Amy"]

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_insert_when_many_records_then_length_and_order_hold(self, key, order):
        """After N inserts, length is N and traversal is monotonic."""
        # Act
        store = _build(key, order)

        # Assert
        assert store.length() == len(NAMES)
        assert _is_ordered(_keys(store, key), order)
        store.check_invariants()

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_insert_when_many_records_then_reverse_iteration_mirrors(self, key, order):
        """Walking prev links from the tail should mirror the forward walk."""
        store = _build(key, order)
        assert list(reversed(store)) == list(store)[::-1]

    def test_insert_when_byte_order_then_uppercase_before_lowercase(self):
        """Comparison is byte-wise, not case-folded."""
        store = _build()
        families = [r.family for r in store]
        assert families.index("Zephyr") < families.index("baker")

    def test_insert_when_duplicates_then_adjacent_in_insertion_order(self):
        """Duplicate names coexist, adjacent, in the order they arrived."""
        # Arrange
        store = RecordStore()
        first = store.insert("Bob", "Adams", [("hw1", 1)])
        store.insert("Amy", "Zephyr")

        # Act
        second = store.insert("Bob", "Adams", [("hw1", 2)])

        # Assert
        records = list(store)
        assert records[0] is first
        assert records[1] is second
        assert store.length() == 3

    def test_insert_when_new_smallest_then_becomes_head(self):
        store = RecordStore()
        store.insert("Amy", "Moss")
        head = store.insert("Bob", "Adams")
        assert store.head is head
        store.check_invariants()

    def test_insert_when_new_largest_then_becomes_tail(self):
        store = RecordStore()
        store.insert("Amy", "Moss")
        tail = store.insert("Bob", "Zephyr")
        assert store.tail is tail
        store.check_invariants()

    def test_insert_when_caller_mutates_input_then_store_unchanged(self):
        """Insert copies the caller's assignment data."""
        # Arrange
        store = RecordStore()
        scores = [["hw1", 90.0]]

        # Act
        store.insert("Amy", "Zephyr", scores)
        scores[0][1] = 0.0
        scores.append(["hw2", 10.0])

        # Assert
        assert store.head.scores == (90.0,)

    def test_insert_when_empty_store_with_other_order_then_adopts_it(self):
        """An empty store takes the key/order of its first insert."""
        store = RecordStore(SortKey.FAMILY, SortOrder.ASCENDING)
        store.insert("Amy", "Zephyr", sort_key=SortKey.GIVEN, sort_order=SortOrder.DESCENDING)
        assert store.sort_key is SortKey.GIVEN
        assert store.sort_order is SortOrder.DESCENDING

    def test_insert_when_requested_order_differs_then_resorts_first(self):
        """A different key/order on insert re-sorts the whole store."""
        # Arrange
        store = _build(SortKey.FAMILY, SortOrder.ASCENDING)

        # Act
        store.insert("Zoe", "Quinn", sort_key=SortKey.GIVEN, sort_order=SortOrder.DESCENDING)

        # Assert
        assert store.sort_key is SortKey.GIVEN
        assert store.sort_order is SortOrder.DESCENDING
        assert store.head.given == "Zoe"
        assert _is_ordered(_keys(store, SortKey.GIVEN), SortOrder.DESCENDING)
        assert store.length() == len(NAMES) + 1
        store.check_invariants()

    def test_insert_record_when_existing_record_then_stored_as_is(self):
        store = RecordStore()
        record = StudentRecord.create("Amy", "Zephyr")
        assert store.insert_record(record) is record
        assert store.find_by_name("Zephyr") is record


class TestFind:
    """Tests for find_by_name and find_student."""

    def test_find_by_name_when_empty_then_none(self):
        """Empty store reports not-found, not an error."""
        assert RecordStore().find_by_name("Adams") is None

    def test_find_by_name_when_present_then_returns_first_match(self):
        store = _build()
        record = store.find_by_name("Adams")
        assert record is not None
        assert record.given == "Bob"

    def test_find_by_name_when_absent_then_none(self):
        store = _build()
        assert store.find_by_name("Nobody") is None

    @pytest.mark.parametrize("order", list(SortOrder))
    def test_find_by_name_when_absent_between_keys_then_none(self, order):
        """A name falling between two stored keys stops the scan early."""
        store = _build(SortKey.FAMILY, order)
        assert store.find_by_name("Dunn") is None

    def test_find_by_name_when_other_key_then_scans_everything(self):
        """Searching by the non-active key still finds the record."""
        store = _build(SortKey.FAMILY, SortOrder.ASCENDING)
        record = store.find_by_name("Finn", SortKey.GIVEN)
        assert record is not None
        assert record.family == "Moss"

    def test_find_by_name_when_case_differs_then_none(self):
        store = _build()
        assert store.find_by_name("adams") is None

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_find_student_when_shared_name_then_matches_both(self, key, order):
        """find_student disambiguates records sharing the key field."""
        store = _build(key, order)
        record = store.find_student("Amy", "Carter")
        assert record is not None
        assert (record.given, record.family) == ("Amy", "Carter")

    def test_find_student_when_absent_then_none(self):
        store = _build()
        assert store.find_student("Amy", "Adams") is None


class TestDeleteAt:
    """Tests for RecordStore.delete_at."""

    def test_delete_at_when_middle_then_length_drops_by_one(self):
        """Deleting removes exactly the targeted record."""
        # Arrange
        store = _build()
        before = list(store)
        target = before[3]

        # Act
        removed = store.delete_at(3)

        # Assert
        assert removed is target
        assert store.length() == len(before) - 1
        assert target not in list(store)
        assert list(store) == before[:3] + before[4:]
        store.check_invariants()

    def test_delete_at_when_head_then_next_becomes_head(self):
        store = _build()
        second = list(store)[1]
        store.delete_at(0)
        assert store.head is second
        store.check_invariants()

    def test_delete_at_when_tail_then_previous_becomes_tail(self):
        store = _build()
        records = list(store)
        store.delete_at(len(records) - 1)
        assert store.tail is records[-2]
        store.check_invariants()

    def test_delete_at_when_sole_record_then_empty(self):
        store = RecordStore()
        store.insert("Amy", "Zephyr")
        store.delete_at(0)
        assert store.is_empty()
        assert store.length() == 0
        assert store.head is None and store.tail is None
        store.check_invariants()

    @pytest.mark.parametrize("index", [7, 8, 100, -1])
    def test_delete_at_when_out_of_range_then_raises_error(self, index):
        """Out-of-range indices are an error, never clamped."""
        store = _build()
        with pytest.raises(StoreIndexError):
            store.delete_at(index)
        assert store.length() == len(NAMES)

    def test_delete_at_when_empty_then_raises_index_error(self):
        with pytest.raises(IndexError):
            RecordStore().delete_at(0)

    def test_delete_at_when_slot_freed_then_reused_by_insert(self):
        """Released arena slots are reused and the chain stays valid."""
        store = _build()
        store.delete_at(2)
        store.insert("Gil", "Ng")
        assert store.length() == len(NAMES)
        store.check_invariants()


class TestReverse:
    """Tests for RecordStore.reverse."""

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_reverse_when_called_then_order_flips(self, key, order):
        """Reverse flips both traversal and sort_order metadata."""
        # Arrange
        store = _build(key, order)
        before = list(store)

        # Act
        store.reverse()

        # Assert
        assert list(store) == before[::-1]
        assert store.sort_order is order.flipped()
        assert store.sort_key is key
        store.check_invariants()

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_reverse_when_called_twice_then_original_restored(self, key, order):
        """Reverse is its own inverse."""
        store = _build(key, order)
        before = list(store)

        store.reverse()
        store.reverse()

        assert list(store) == before
        assert store.sort_order is order
        store.check_invariants()

    def test_reverse_when_empty_then_stays_empty(self):
        store = RecordStore()
        store.reverse()
        assert store.is_empty()
        store.check_invariants()

    def test_reverse_when_single_record_then_same_record(self):
        store = RecordStore()
        record = store.insert("Amy", "Zephyr")
        store.reverse()
        assert list(store) == [record]
        assert store.sort_order is SortOrder.DESCENDING

    def test_reverse_when_followed_by_insert_then_order_respected(self):
        """Inserting after a reversal places records in the new direction."""
        store = _build(SortKey.FAMILY, SortOrder.ASCENDING)
        store.reverse()
        store.insert("Ian", "Nash")
        assert _is_ordered(_keys(store, SortKey.FAMILY), SortOrder.DESCENDING)
        store.check_invariants()


class TestSort:
    """Tests for RecordStore.sort."""

    def test_sort_when_same_pair_then_identities_unchanged(self):
        """Sorting twice by the same key/order is a no-op."""
        store = _build()
        before = list(store)

        store.sort(SortKey.FAMILY, SortOrder.ASCENDING)
        store.sort(SortKey.FAMILY, SortOrder.ASCENDING)

        after = list(store)
        assert len(after) == len(before)
        assert all(a is b for a, b in zip(after, before))

    def test_sort_when_only_order_differs_then_reverses(self):
        store = _build(SortKey.FAMILY, SortOrder.ASCENDING)
        before = list(store)

        store.sort(SortKey.FAMILY, SortOrder.DESCENDING)

        assert list(store) == before[::-1]
        assert store.sort_order is SortOrder.DESCENDING

    @pytest.mark.parametrize("key,order", ALL_PAIRS)
    def test_sort_when_key_differs_then_rebuilds_same_multiset(self, key, order):
        """Re-sorting by another key keeps every record and orders them."""
        # Arrange
        other = SortKey.GIVEN if key is SortKey.FAMILY else SortKey.FAMILY
        store = _build(other, SortOrder.ASCENDING)
        before = {id(r) for r in store}

        # Act
        store.sort(key, order)

        # Assert
        assert {id(r) for r in store} == before
        assert store.length() == len(NAMES)
        assert store.sort_key is key
        assert store.sort_order is order
        assert _is_ordered(_keys(store, key), order)
        store.check_invariants()

    def test_sort_when_strings_given_then_parsed(self):
        store = _build()
        store.sort("given", "desc")
        assert store.sort_key is SortKey.GIVEN
        assert store.sort_order is SortOrder.DESCENDING

    def test_sort_when_empty_then_metadata_updated(self):
        store = RecordStore()
        store.sort(SortKey.GIVEN, SortOrder.ASCENDING)
        assert store.sort_key is SortKey.GIVEN
        assert store.is_empty()


class TestLengthAndIteration:
    """Tests for length, truthiness and teardown."""

    def test_length_when_empty_then_zero(self):
        store = RecordStore()
        assert store.length() == 0
        assert len(store) == 0
        assert not store

    def test_clear_when_populated_then_empty(self):
        store = _build()
        store.clear()
        assert store.length() == 0
        assert list(store) == []
        store.check_invariants()

    def test_repr_when_populated_then_mentions_count_and_order(self):
        assert repr(_build()) == "RecordStore(7 records, family/ascending)"

    def test_index_of_when_present_then_offset(self):
        store = _build()
        records = list(store)
        assert store.index_of(records[4]) == 4
        assert store.index_of(StudentRecord.create("No", "Body")) is None


class TestInvariants:
    """Tests for check_invariants detecting corruption."""

    def test_check_invariants_when_link_broken_then_raises_error(self):
        store = _build()
        # Break a back link by hand.
        second = store._slot(store._head).next
        store._slot(second).prev = None
        with pytest.raises(StoreCorruptionError):
            store.check_invariants()

    def test_check_invariants_when_order_broken_then_raises_error(self):
        store = _build()
        store._sort_order = SortOrder.DESCENDING
        with pytest.raises(StoreCorruptionError, match="out of descending order"):
            store.check_invariants()


class TestBulkLoadExport:
    """Tests for load_records and export_records."""

    def test_load_records_when_rows_given_then_sorted_store(self, sample_rows):
        store = load_records(sample_rows, SortKey.GIVEN, SortOrder.DESCENDING)
        assert [r.given for r in store] == ["Dan", "Cara", "Bob", "Amy"]

    def test_export_records_when_loaded_then_rows_in_traversal_order(self, sample_rows):
        store = load_records(sample_rows)
        rows = export_records(store)
        assert [(g, f) for g, f, _ in rows] == [
            ("Bob", "Adams"), ("Dan", "Adams"), ("Cara", "Moss"), ("Amy", "Zephyr"),
        ]
        assert rows[0][2] == [("hw1", 85.5), ("hw2", 95.0), ("exam", 100.0)]

    def test_export_records_when_empty_then_empty_list(self):
        assert export_records(RecordStore()) == []
