"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py (IndexConfig, LimitsConfig, etc.).
"""

# =============================================================================
# Search Limits
# =============================================================================

SEARCH_MAX_LIMIT = 10_000
"""Hard cap for max_results on any search operation."""

# =============================================================================
# Storage Layout
# =============================================================================

CONFIG_DIRNAME = ".codeindexer"
"""Per-root directory holding config.yaml and the default index."""

DEFAULT_INDEX_DIRNAME = "index"
"""Tantivy directory name under CONFIG_DIRNAME."""

# =============================================================================
# Tantivy Writer
# =============================================================================

WRITER_MIN_HEAP_MB = 15
"""Tantivy refuses a writer with less than ~15 MB of heap per thread."""

NAME_TOKEN_MAX_BYTES = 40
"""Tokens of this many UTF-8 bytes or more are dropped by the default tokenizer."""
