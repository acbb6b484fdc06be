"""Utility functions and helpers for opencoder."""

from .logging import logger, Logger
from .helpers import (
    check_dependencies,
    get_file_system_listing,
    safe_file_write
)

__all__ = [
    "logger",
    "Logger",
    "check_dependencies",
    "get_file_system_listing",
    "safe_file_write",
]
