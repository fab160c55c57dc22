"""Config module exports."""

from codeindexer.config.loader import CodeIndexerSettings, get_index_path, load_config
from codeindexer.config.models import (
    CodeIndexerConfig,
    IndexConfig,
    LimitsConfig,
    LoggingConfig,
)

__all__ = [
    "load_config",
    "get_index_path",
    "CodeIndexerConfig",
    "CodeIndexerSettings",
    "IndexConfig",
    "LimitsConfig",
    "LoggingConfig",
]
