"""
gradebook CLI

Reads a gradebook text file, sorts the records and writes them back out,
optionally answering statistics queries along the way.

    gradebook                                   # input_list.txt -> output_list.txt
    gradebook -i scores.txt -o sorted.txt --sort-key given --order desc
    gradebook --student Amy Zephyr              # per-student statistics
    gradebook --assignment hw1                  # class statistics for hw1
    gradebook --report stats.json               # full JSON statistics report
    gradebook --config gradebook.json           # settings from a JSON file

Exit codes: 0 success, 1 input/config error, 2 query error.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from gradebook import __version__
from gradebook.config import ConfigError, GradebookConfig, load_config
from gradebook.controller import GradebookError, run_gradebook
from gradebook.core.models import SortKey, SortOrder
from gradebook.serialization import render_table
from gradebook.statistics import DegenerateStatisticsError
from gradebook.utils.logging_utils import configure_logging, level_for_verbosity

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gradebook",
        description="Sort a gradebook file and compute score statistics.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument("-i", "--input", dest="input_path", type=Path, help="gradebook file to read")
    parser.add_argument("-o", "--output", dest="output_path", type=Path, help="gradebook file to write")
    parser.add_argument("--sort-key", choices=[k.value for k in SortKey], help="name field to sort by")
    parser.add_argument(
        "--order",
        choices=["ascending", "asc", "descending", "desc"],
        help="sort direction",
    )
    parser.add_argument(
        "--student", nargs=2, metavar=("GIVEN", "FAMILY"),
        help="print statistics across one student's assignments",
    )
    parser.add_argument("--assignment", metavar="NAME", help="print class statistics for one assignment")
    parser.add_argument("--report", dest="report_path", type=Path, help="write a JSON statistics report")
    parser.add_argument("--print", dest="print_table", action="store_true", help="print the sorted records")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="warnings and errors only")
    return parser


def resolve_config(args: argparse.Namespace) -> GradebookConfig:
    """
    Merge the optional config file with command-line overrides.

    Raises:
        ConfigError: If the config file or the merged values are invalid
    """
    config = load_config(args.config) if args.config else GradebookConfig()

    overrides = {}
    if args.input_path is not None:
        overrides["input_path"] = args.input_path
    if args.output_path is not None:
        overrides["output_path"] = args.output_path
    if args.sort_key is not None:
        overrides["sort_key"] = SortKey.parse(args.sort_key)
    if args.order is not None:
        overrides["sort_order"] = SortOrder.parse(args.order)
    if args.student is not None:
        overrides["student"] = tuple(args.student)
    if args.assignment is not None:
        overrides["assignment"] = args.assignment
    if args.report_path is not None:
        overrides["report_path"] = args.report_path
    if args.print_table:
        overrides["print_table"] = True
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    elif args.quiet:
        overrides["log_level"] = "WARNING"

    try:
        return dataclasses.replace(config, **overrides)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level_for_verbosity(args.verbose, args.quiet))

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    configure_logging(config.log_level)

    try:
        result = run_gradebook(config)
    except GradebookError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if config.print_table:
        print(render_table(result.store))
    if result.student_stats is not None:
        given, family = config.student
        print(f"{given} {family}: {result.student_stats}")
    if result.assignment_stats is not None:
        print(f"{config.assignment}: {result.assignment_stats}")

    for error in result.query_errors:
        if isinstance(error, DegenerateStatisticsError):
            print(f"error: statistics undefined: {error}", file=sys.stderr)
        else:
            print(f"error: {error}", file=sys.stderr)
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
