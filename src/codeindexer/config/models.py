"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CODEINDEXER__SECTION__KEY)
3. Repo YAML (.codeindexer/config.yaml)
4. Global YAML (~/.config/codeindexer/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CODEINDEXER__<SECTION>__<KEY>=<VALUE>

Examples:
    CODEINDEXER__LOGGING__LEVEL=DEBUG
    CODEINDEXER__INDEX__INDEX_PATH=/var/lib/codeindexer
    CODEINDEXER__LIMITS__NAME_SEARCH_DEFAULT=50
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from codeindexer.config.constants import (
    SEARCH_MAX_LIMIT,
    WRITER_MIN_HEAP_MB,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CODEINDEXER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every query.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Search index configuration.

    Env vars:
        CODEINDEXER__INDEX__INDEX_PATH: Override index storage location
        CODEINDEXER__INDEX__WRITER_HEAP_SIZE_MB: Tantivy writer memory budget
        CODEINDEXER__INDEX__WRITER_NUM_THREADS: Tantivy indexing threads (0 = auto)
        CODEINDEXER__INDEX__REFRESH_MIN_INTERVAL_SEC: Minimum gap between reader refreshes
    """

    index_path: str | None = Field(
        default=None,
        description="Override index storage location. Default: .codeindexer/index in the root.",
    )
    writer_heap_size_mb: int = Field(
        default=128,
        description="Memory budget shared by the writer threads (MB). "
        "RISK: Tantivy rejects less than 15 MB per thread when writer_num_threads is set; "
        "with 0 it lowers the thread count to fit.",
    )
    writer_num_threads: int = Field(
        default=0,
        description="Indexing threads. 0 lets Tantivy pick based on CPU count.",
    )
    refresh_min_interval_sec: float = Field(
        default=0.05,
        description="Searches skip the reader refresh if the last one is younger than this. "
        "TRADEOFF: Higher values cut reload cost but widen the stale-read window.",
    )

    @field_validator("writer_heap_size_mb")
    @classmethod
    def validate_heap(cls, v: int) -> int:
        if v < WRITER_MIN_HEAP_MB:
            raise ValueError(f"writer_heap_size_mb must be >= {WRITER_MIN_HEAP_MB}, got {v}")
        return v

    @field_validator("writer_num_threads")
    @classmethod
    def validate_threads(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"writer_num_threads must be >= 0, got {v}")
        return v

    @model_validator(mode="after")
    def validate_heap_per_thread(self) -> "IndexConfig":
        threads = self.writer_num_threads
        if threads and self.writer_heap_size_mb / threads < WRITER_MIN_HEAP_MB:
            raise ValueError(
                f"writer_heap_size_mb must be >= {WRITER_MIN_HEAP_MB} per thread, "
                f"got {self.writer_heap_size_mb} for {threads} threads"
            )
        return self


class LimitsConfig(BaseModel):
    """Default result limits per search operation.

    Values are clamped to SEARCH_MAX_LIMIT (see constants.py).

    Env vars:
        CODEINDEXER__LIMITS__NAME_SEARCH_DEFAULT
        CODEINDEXER__LIMITS__KIND_SEARCH_DEFAULT
        CODEINDEXER__LIMITS__PARENT_SEARCH_DEFAULT
        CODEINDEXER__LIMITS__ADVANCED_SEARCH_DEFAULT
    """

    name_search_default: int = Field(default=100, description="Default name-pattern results.")
    kind_search_default: int = Field(default=1000, description="Default kind results.")
    parent_search_default: int = Field(default=1000, description="Default child results.")
    advanced_search_default: int = Field(default=100, description="Default predicate results.")

    @field_validator(
        "name_search_default",
        "kind_search_default",
        "parent_search_default",
        "advanced_search_default",
    )
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if not (1 <= v <= SEARCH_MAX_LIMIT):
            raise ValueError(f"Limit must be 1-{SEARCH_MAX_LIMIT}, got {v}")
        return v


class CodeIndexerConfig(BaseModel):
    """Root configuration for codeindexer.

    All settings can be configured via:
    1. Environment variables: CODEINDEXER__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
