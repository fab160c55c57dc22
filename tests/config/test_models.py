"""Tests for config/models.py validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from codeindexer.config.constants import SEARCH_MAX_LIMIT, WRITER_MIN_HEAP_MB
from codeindexer.config.models import (
    CodeIndexerConfig,
    IndexConfig,
    LimitsConfig,
    LoggingConfig,
    LogOutputConfig,
)


class TestLogOutputConfig:
    @pytest.mark.parametrize("destination", ["stderr", "stdout"])
    def test_console_destinations(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination

    def test_absolute_file_destination(self) -> None:
        assert LogOutputConfig(destination="/var/log/ci.log").destination == "/var/log/ci.log"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/ci.log")

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(format="xml")  # type: ignore[arg-type]


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1
        assert config.outputs[0].destination == "stderr"

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestIndexConfig:
    def test_defaults(self) -> None:
        config = IndexConfig()
        assert config.index_path is None
        assert config.writer_heap_size_mb == 128
        assert config.writer_num_threads == 0
        assert config.refresh_min_interval_sec == 0.05

    def test_heap_minimum(self) -> None:
        assert IndexConfig(writer_heap_size_mb=WRITER_MIN_HEAP_MB).writer_heap_size_mb == 15
        with pytest.raises(ValidationError):
            IndexConfig(writer_heap_size_mb=WRITER_MIN_HEAP_MB - 1)

    def test_negative_threads_rejected(self) -> None:
        with pytest.raises(ValidationError):
            IndexConfig(writer_num_threads=-1)

    def test_heap_checked_per_explicit_thread(self) -> None:
        """Explicit thread counts split the heap; each share must meet the minimum."""
        assert IndexConfig(writer_heap_size_mb=60, writer_num_threads=4).writer_num_threads == 4
        with pytest.raises(ValidationError, match="per thread"):
            IndexConfig(writer_heap_size_mb=20, writer_num_threads=4)

    def test_auto_threads_only_need_the_floor(self) -> None:
        assert IndexConfig(writer_heap_size_mb=20, writer_num_threads=0).writer_heap_size_mb == 20


class TestLimitsConfig:
    def test_defaults(self) -> None:
        limits = LimitsConfig()
        assert limits.name_search_default == 100
        assert limits.kind_search_default == 1000
        assert limits.parent_search_default == 1000
        assert limits.advanced_search_default == 100

    @pytest.mark.parametrize("value", [0, -5, SEARCH_MAX_LIMIT + 1])
    def test_out_of_range_rejected(self, value: int) -> None:
        with pytest.raises(ValidationError):
            LimitsConfig(kind_search_default=value)

    def test_upper_bound_accepted(self) -> None:
        assert LimitsConfig(name_search_default=SEARCH_MAX_LIMIT).name_search_default == 10_000


class TestCodeIndexerConfig:
    def test_sections(self) -> None:
        config = CodeIndexerConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.index, IndexConfig)
        assert isinstance(config.limits, LimitsConfig)

    def test_from_nested_dict(self) -> None:
        config = CodeIndexerConfig.model_validate(
            {"index": {"writer_num_threads": 2}, "limits": {"name_search_default": 5}}
        )
        assert config.index.writer_num_threads == 2
        assert config.limits.name_search_default == 5
