"""Core module exports."""

from codeindexer.core.errors import (
    CodeIndexerError,
    ConfigError,
    ErrorCode,
    InvalidElementError,
    SearchIndexError,
)
from codeindexer.core.logging import (
    configure_logging,
    set_request_id,
)

__all__ = [
    # Errors
    "CodeIndexerError",
    "ConfigError",
    "ErrorCode",
    "InvalidElementError",
    "SearchIndexError",
    # Logging
    "configure_logging",
    "set_request_id",
]
