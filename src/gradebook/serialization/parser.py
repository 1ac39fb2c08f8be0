"""
Module: serialization.parser

Purpose:
    Parse the gradebook text format into rows for the record store.

    Format:
        <record_count>,<assignment_count>
        <given>,<family>,<name>,<score>,<name>,<score>,...
        ...

Key Functions:
    - parse_gradebook(): Parse text already in memory
    - read_gradebook(): Read and parse a file

Key Classes:
    - ParsedGradebook: Header counts, parsed rows and skipped line numbers
    - ParseError: The file cannot be read or has no usable header

Dependencies:
    - logging (std)
    - pathlib (std)

Used By:
    - controller: pipeline input
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

DELIMITER = ","

ParsedRow = Tuple[str, str, List[Tuple[str, float]]]


class ParseError(Exception):
    """Error reading or parsing a gradebook file."""
    pass


@dataclass(frozen=True)
class ParsedGradebook:
    """
    Parsed gradebook file.

    Attributes:
        record_count: Record count declared in the header
        assignment_count: Assignments per record declared in the header
        rows: (given, family, [(name, score), ...]) for every well-formed line
        skipped: 1-based line numbers of malformed record lines
    """
    record_count: int
    assignment_count: int
    rows: List[ParsedRow] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)


def _parse_header(line: str, line_no: int) -> Tuple[int, int]:
    parts = [p.strip() for p in line.split(DELIMITER)]
    if len(parts) != 2:
        raise ParseError(f"Line {line_no}: header must be '<records>,<assignments>', got {line!r}")
    try:
        record_count, assignment_count = int(parts[0]), int(parts[1])
    except ValueError:
        raise ParseError(f"Line {line_no}: header counts must be integers, got {line!r}")
    if record_count < 0 or assignment_count < 0:
        raise ParseError(f"Line {line_no}: header counts must be non-negative, got {line!r}")
    return record_count, assignment_count


def _parse_record(line: str, assignment_count: int, line_no: int) -> Optional[ParsedRow]:
    """Parse one record line, or log and return None if it is malformed."""
    fields = [f.strip() for f in line.split(DELIMITER)]
    expected = 2 + 2 * assignment_count
    if len(fields) != expected:
        logger.warning(f"Line {line_no}: expected {expected} fields, found {len(fields)}; skipping record")
        return None

    given, family = fields[0], fields[1]
    if not given or not family:
        logger.warning(f"Line {line_no}: empty student name; skipping record")
        return None

    assignments: List[Tuple[str, float]] = []
    for offset in range(2, expected, 2):
        name, raw_score = fields[offset], fields[offset + 1]
        if not name:
            logger.warning(f"Line {line_no}: empty assignment name; skipping record")
            return None
        try:
            score = float(raw_score)
        except ValueError:
            logger.warning(f"Line {line_no}: score {raw_score!r} for {name!r} is not a number; skipping record")
            return None
        if not math.isfinite(score):
            logger.warning(f"Line {line_no}: score {raw_score!r} for {name!r} is not finite; skipping record")
            return None
        assignments.append((name, score))
    return (given, family, assignments)


def parse_gradebook(text: str) -> ParsedGradebook:
    """
    Parse gradebook text.

    Blank lines are ignored. Malformed record lines are skipped with a
    warning and their line numbers kept in `skipped`. At most
    `record_count` record lines are read.

    Args:
        text: Whole file contents

    Returns:
        ParsedGradebook

    Raises:
        ParseError: If there is no header or it is malformed

    Example:
        >>> book = parse_gradebook("1,1\\nAmy,Zephyr,hw1,90\\n")
        >>> book.rows
        [('Amy', 'Zephyr', [('hw1', 90.0)])]
    """
    lines = [(no, line.strip()) for no, line in enumerate(text.splitlines(), start=1)]
    lines = [(no, line) for no, line in lines if line]
    if not lines:
        raise ParseError("Gradebook is empty: missing '<records>,<assignments>' header")

    header_no, header = lines[0]
    record_count, assignment_count = _parse_header(header, header_no)

    rows: List[ParsedRow] = []
    skipped: List[int] = []
    body = lines[1:]
    for line_no, line in body[:record_count]:
        row = _parse_record(line, assignment_count, line_no)
        if row is None:
            skipped.append(line_no)
        else:
            rows.append(row)

    if len(body) < record_count:
        logger.warning(f"Header declares {record_count} records but only {len(body)} lines follow")
    elif len(body) > record_count:
        logger.warning(f"Ignoring {len(body) - record_count} line(s) after the {record_count} declared records")

    logger.debug(f"Parsed {len(rows)} records ({len(skipped)} skipped)")
    return ParsedGradebook(
        record_count=record_count,
        assignment_count=assignment_count,
        rows=rows,
        skipped=skipped,
    )


def read_gradebook(path: Path) -> ParsedGradebook:
    """
    Read and parse a gradebook file.

    Raises:
        ParseError: If the file is missing, unreadable or has a bad header
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"Gradebook file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {path}: {e}")
    return parse_gradebook(text)
