"""
Module: serialization.writer

Purpose:
    Write a RecordStore back out in the gradebook text format, and render
    it as a table for the console.

Key Functions:
    - format_gradebook(): Text in the input format, traversal order
    - write_gradebook(): format_gradebook() to a file
    - render_table(): Aligned listing for humans

Used By:
    - controller: pipeline output
    - cli: --print
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from gradebook.store import RecordStore

from .parser import DELIMITER

logger = logging.getLogger(__name__)


def _format_score(value: float) -> str:
    return f"{value:f}"


def format_gradebook(store: RecordStore) -> str:
    """
    Format the store as gradebook text.

    The header carries the store length and the assignment count of the
    first record; every record then writes all of its own assignments.
    An empty store formats as an empty string.
    """
    first = store.head
    if first is None:
        return ""

    lines: List[str] = [f"{store.length()}{DELIMITER}{first.assignment_count}"]
    for record in store:
        fields = [record.given, record.family]
        for assignment in record.assignments:
            fields.extend((assignment.name, _format_score(assignment.value)))
        lines.append(DELIMITER.join(fields))
    return "\n".join(lines) + "\n"


def write_gradebook(store: RecordStore, path: Path) -> Path:
    """
    Write the store to `path` in the gradebook text format.

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_gradebook(store), encoding="utf-8")
    logger.info(f"Wrote {store.length()} records to {path}")
    return path


def render_table(store: RecordStore) -> str:
    """Aligned, human-readable listing of the store in traversal order."""
    if store.is_empty():
        return "(no records)"

    names = [f"{r.family}, {r.given}" for r in store]
    width = max(len("Student"), *(len(n) for n in names))
    lines = [
        f"{'Student':<{width}}  Scores   "
        f"[{store.sort_key.value}/{store.sort_order.value}]",
        "-" * (width + 2 + 40),
    ]
    for name, record in zip(names, store):
        scores = "  ".join(f"{a.name}={a.value:g}" for a in record.assignments)
        lines.append(f"{name:<{width}}  {scores}")
    return "\n".join(lines)
