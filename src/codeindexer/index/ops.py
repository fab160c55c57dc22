"""CodeIndex facade over the element store and the search index.

CodeIndex is the entry point used by hosts (CLI, tool servers, editors):

- ElementStore answers exact lookups by id
- SearchIndex answers name-prefix and filtered searches

The two are NOT synchronized automatically. build_index() replaces both;
update_element() and delete_element() only touch the search index, so a
caller that also wants the store updated must do it itself.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

import structlog

from codeindexer.config.constants import SEARCH_MAX_LIMIT
from codeindexer.config.loader import get_index_path, load_config
from codeindexer.config.models import CodeIndexerConfig
from codeindexer.index._internal.indexing import SearchIndex
from codeindexer.index.models import Element, ElementKind, ElementQuery, ElementSummary
from codeindexer.index.store import ElementStore

logger = structlog.get_logger()


def _clamp(max_results: int | None, default: int) -> int:
    limit = default if max_results is None else max_results
    return min(limit, SEARCH_MAX_LIMIT)


class CodeIndex:
    """
    One element store plus one search index over the same elements.

    Usage::

        with CodeIndex(index_path) as code_index:
            code_index.build_index(elements)

            code_index.search_by_name_pattern("UserServ")
            code_index.search_by_full_name("MyApp.Services.UserService")
            code_index.get_element_by_id(element_id)

    Writes must be serialized by the caller; searches may run concurrently.
    """

    def __init__(self, index_path: Path | str, config: CodeIndexerConfig | None = None) -> None:
        self.config = config or CodeIndexerConfig()
        self.store = ElementStore()
        self.search_index = SearchIndex.from_config(index_path, self.config.index)

    @classmethod
    def from_root(cls, root: Path, config: CodeIndexerConfig | None = None) -> CodeIndex:
        """Build a CodeIndex for a repository root using its configuration."""
        if config is None:
            config = load_config(root)
        return cls(get_index_path(root, config), config)

    @property
    def index_path(self) -> Path:
        return self.search_index.index_path

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self) -> CodeIndex:
        self.search_index.open()
        return self

    def close(self) -> None:
        """Close the search index. The store keeps its elements."""
        self.search_index.close()

    def __enter__(self) -> CodeIndex:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # Writes
    # =========================================================================

    def build_index(self, elements: Iterable[Element]) -> int:
        """Replace the store contents with ``elements`` and rebuild the index.

        Returns:
            Number of documents indexed.
        """
        self.store.clear()
        self.store.add_all(elements)
        count = self.search_index.build_index(self.store.get_all())
        logger.info("code_index_built", elements=count, path=str(self.index_path))
        return count

    def update_element(self, element: Element) -> None:
        """Replace one document in the search index. The store is untouched."""
        self.search_index.update(element)

    def delete_element(self, element_id: str) -> None:
        """Remove one document from the search index. The store is untouched."""
        self.search_index.delete(element_id)

    # =========================================================================
    # Reads
    # =========================================================================

    def search_by_name_pattern(
        self, pattern: str, max_results: int | None = None
    ) -> list[ElementSummary]:
        limit = _clamp(max_results, self.config.limits.name_search_default)
        return self.search_index.search_by_name_prefix(pattern, limit)

    def search_by_full_name(self, full_name: str) -> ElementSummary | None:
        return self.search_index.search_by_full_name(full_name)

    def search_by_kind(
        self, kind: ElementKind, max_results: int | None = None
    ) -> list[ElementSummary]:
        limit = _clamp(max_results, self.config.limits.kind_search_default)
        return self.search_index.search_by_kind(kind, limit)

    def search_by_parent_id(
        self, parent_id: str, max_results: int | None = None
    ) -> list[ElementSummary]:
        limit = _clamp(max_results, self.config.limits.parent_search_default)
        return self.search_index.search_by_parent_id(parent_id, limit)

    def advanced_search(
        self, query: ElementQuery, max_results: int | None = None
    ) -> list[ElementSummary]:
        limit = _clamp(max_results, self.config.limits.advanced_search_default)
        return self.search_index.advanced_search(query, limit)

    def get_element_by_id(self, element_id: str) -> Element | None:
        """Full element from the store, or None."""
        return self.store.get_by_id(element_id)
