"""
Module: serialization

Purpose:
    The boundary between the record store and the outside world: the
    gradebook text format, a console table, and the JSON statistics report.

Key Functions:
    - parse_gradebook(), read_gradebook(): text -> rows
    - format_gradebook(), write_gradebook(): store -> text
    - render_table(): store -> console listing
    - build_report(), save_report(): store -> JSON statistics
"""

from .parser import ParsedGradebook, ParseError, parse_gradebook, read_gradebook
from .writer import format_gradebook, render_table, write_gradebook
from .report import ReportError, build_report, save_report, validate_report

__all__ = [
    "ParsedGradebook",
    "ParseError",
    "parse_gradebook",
    "read_gradebook",
    "format_gradebook",
    "render_table",
    "write_gradebook",
    "ReportError",
    "build_report",
    "save_report",
    "validate_report",
]
