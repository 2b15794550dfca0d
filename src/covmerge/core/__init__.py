"""Core module exports."""

from covmerge.core.errors import (
    ConfigError,
    CovmergeError,
    ErrorCode,
    FragmentError,
    RemapError,
    ReportError,
)
from covmerge.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from covmerge.core.progress import pluralize, status, task

__all__ = [
    # Errors
    "ConfigError",
    "CovmergeError",
    "ErrorCode",
    "FragmentError",
    "RemapError",
    "ReportError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "status",
    "task",
]
