"""Utilities for the memory benchmark harness."""

from .logging import setup_logging, LoggerMixin
from .timer import Timer

__all__ = [
    "setup_logging",
    "LoggerMixin",
    "Timer",
]
