"""Shared helpers for the gradebook package."""

from .logging_utils import configure_logging, level_for_verbosity

__all__ = ["configure_logging", "level_for_verbosity"]
