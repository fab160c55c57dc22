"""codeindexer error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
- 4xxx: Validation
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    INDEX_OPEN_FAILED = 3001
    INDEX_LOCKED = 3002
    INDEX_WRITE_FAILED = 3003
    INDEX_CLOSED = 3004

    # Validation (4xxx)
    VALIDATION_MISSING_ARGUMENT = 4001
    VALIDATION_KIND_MISMATCH = 4002
    VALIDATION_MALFORMED_RECORD = 4003


@dataclass(frozen=True, slots=True)
class CodeIndexerError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INDEX_LOCKED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CodeIndexerError):
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


class SearchIndexError(CodeIndexerError):
    """Failures opening or writing the persistent search index."""

    @classmethod
    def open_failed(cls, path: str, reason: str) -> "SearchIndexError":
        return cls(
            code=ErrorCode.INDEX_OPEN_FAILED,
            message=f"Failed to open search index at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def locked(cls, path: str) -> "SearchIndexError":
        return cls(
            code=ErrorCode.INDEX_LOCKED,
            message=f"Search index at {path} is already open by another writer",
            retryable=True,
            details={"path": path},
        )

    @classmethod
    def write_failed(cls, operation: str, reason: str) -> "SearchIndexError":
        return cls(
            code=ErrorCode.INDEX_WRITE_FAILED,
            message=f"{operation} failed: {reason}",
            details={"operation": operation, "reason": reason},
        )

    @classmethod
    def closed(cls, operation: str) -> "SearchIndexError":
        return cls(
            code=ErrorCode.INDEX_CLOSED,
            message=f"Cannot {operation}: search index is not open",
            details={"operation": operation},
        )


class InvalidElementError(CodeIndexerError):
    """Rejected input, raised before any I/O happens."""

    @classmethod
    def missing_argument(cls, name: str) -> "InvalidElementError":
        return cls(
            code=ErrorCode.VALIDATION_MISSING_ARGUMENT,
            message=f"Missing required argument: {name}",
            details={"argument": name},
        )

    @classmethod
    def kind_mismatch(cls, variant: str, kind: Any, allowed: list[str]) -> "InvalidElementError":
        return cls(
            code=ErrorCode.VALIDATION_KIND_MISMATCH,
            message=f"{variant} cannot carry kind '{kind}' (allowed: {', '.join(allowed)})",
            details={"variant": variant, "kind": str(kind), "allowed": allowed},
        )

    @classmethod
    def malformed_record(cls, reason: str, **details: Any) -> "InvalidElementError":
        return cls(
            code=ErrorCode.VALIDATION_MALFORMED_RECORD,
            message=f"Malformed element record: {reason}",
            details=details,
        )
