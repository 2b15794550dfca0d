"""covmerge error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Fragment
- 4xxx: Remap
- 5xxx: Report
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Fragment (3xxx)
    FRAGMENT_WRITE_FAILED = 3001
    FRAGMENT_EXISTS = 3002

    # Remap (4xxx)
    REMAP_READ_FAILED = 4001
    REMAP_WRITE_FAILED = 4002
    REMAP_INVALID_RULES = 4003

    # Report (5xxx)
    REPORT_WRITE_FAILED = 5001
    REPORT_UNKNOWN_FORMAT = 5002


@dataclass(frozen=True, slots=True)
class CovmergeError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REPORT_WRITE_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovmergeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class FragmentError(CovmergeError):
    """Errors persisting a coverage fragment."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "FragmentError":
        return cls(
            code=ErrorCode.FRAGMENT_WRITE_FAILED,
            message=f"Failed to write fragment {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def already_exists(cls, path: str) -> "FragmentError":
        return cls(
            code=ErrorCode.FRAGMENT_EXISTS,
            message=f"Fragment already exists: {path}",
            details={"path": path},
        )


class RemapError(CovmergeError):
    """Errors canonicalizing coverage paths."""

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "RemapError":
        return cls(
            code=ErrorCode.REMAP_READ_FAILED,
            message=f"Failed to read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "RemapError":
        return cls(
            code=ErrorCode.REMAP_WRITE_FAILED,
            message=f"Failed to write {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_rules(cls, reason: str) -> "RemapError":
        return cls(
            code=ErrorCode.REMAP_INVALID_RULES,
            message=f"Invalid remap rules: {reason}",
            details={"reason": reason},
        )


class ReportError(CovmergeError):
    """Errors emitting the final report. Always fatal."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_WRITE_FAILED,
            message=f"Failed to write report {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, fmt: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_UNKNOWN_FORMAT,
            message=f"Unknown report format: {fmt!r}",
            details={"format": fmt},
        )

