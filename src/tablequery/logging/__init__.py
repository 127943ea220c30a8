"""Logging infrastructure for tablequery.

This module provides structured logging with JSON output, context tracking,
and OpenTelemetry trace correlation.
"""

from tablequery.logging.filters import ContextFilter
from tablequery.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
]
