"""
Module: store

Purpose:
    The sorted, doubly-linked record store and its bulk load/export helpers.

Key Classes:
    - RecordStore: Arena-backed doubly-linked list of StudentRecords
    - StoreIndexError: Out-of-range delete
    - StoreCorruptionError: Broken chain or ordering

Key Functions:
    - load_records(): Build a store from parsed rows
    - export_records(): Rows in traversal order

Used By:
    - statistics.engine
    - serialization.writer, serialization.report
    - controller
"""

from .record_store import (
    RecordStore,
    StoreIndexError,
    StoreCorruptionError,
    load_records,
    export_records,
)

__all__ = [
    "RecordStore",
    "StoreIndexError",
    "StoreCorruptionError",
    "load_records",
    "export_records",
]
