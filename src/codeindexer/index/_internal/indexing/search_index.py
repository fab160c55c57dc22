"""Persistent element search index via Tantivy.

This module provides the searchable projection of elements:
- One document per element (see schema.py)
- A single long-lived writer; every mutation commits before returning
- Near-real-time reads through ReaderManager snapshots
- Name prefix, exact full name, kind, parent and multi-field search

Failure policy:
- Writes (build_index, update, delete) log and raise SearchIndexError
- Reads log and degrade to an empty result or None

The index is not kept in sync with ElementStore; callers decide when to
mirror changes from one to the other.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

import structlog
import tantivy

from codeindexer.core.errors import InvalidElementError, SearchIndexError
from codeindexer.index._internal.indexing.query import (
    name_prefix_query,
    term_query,
    translate_query,
)
from codeindexer.index._internal.indexing.readers import ReaderManager
from codeindexer.index._internal.indexing.schema import (
    FIELD_ELEMENT_TYPE,
    FIELD_FULL_NAME,
    FIELD_ID,
    FIELD_PARENT_ID,
    build_schema,
    document_to_summary,
    element_to_document,
)
from codeindexer.index.models import Element, ElementKind, ElementQuery, ElementSummary

if TYPE_CHECKING:
    from codeindexer.config.models import IndexConfig

logger = structlog.get_logger()

_BYTES_PER_MB = 1_000_000

# Paths with an open SearchIndex in this process
_open_paths: set[str] = set()
_open_paths_lock = threading.Lock()


def _claim_path(key: str) -> None:
    with _open_paths_lock:
        if key in _open_paths:
            raise SearchIndexError.locked(key)
        _open_paths.add(key)


def _release_path(key: str) -> None:
    with _open_paths_lock:
        _open_paths.discard(key)


class SearchIndex:
    """
    Element search index backed by Tantivy.

    Usage::

        with SearchIndex(index_path) as index:
            index.build_index(store.get_all())

            index.search_by_name_prefix("UserServ", max_results=20)
            index.search_by_kind(ElementKind.METHOD, max_results=100)
            index.advanced_search(
                ElementQuery(kind=ElementKind.METHOD, access_modifier="public"),
                max_results=50,
            )

    Mutating calls must be serialized by the caller. Searches may run
    concurrently from several threads.
    """

    def __init__(
        self,
        index_path: Path | str,
        *,
        writer_heap_size_mb: int = 128,
        writer_num_threads: int = 0,
        refresh_min_interval_sec: float = 0.05,
    ) -> None:
        """
        Initialize the search index. Nothing touches disk until open().

        Args:
            index_path: Directory to store Tantivy index files
            writer_heap_size_mb: Memory budget for the writer
            writer_num_threads: Indexing threads, 0 for Tantivy's choice
            refresh_min_interval_sec: Rate limit for search-triggered refreshes
        """
        self.index_path = Path(index_path)
        self._heap_size = writer_heap_size_mb * _BYTES_PER_MB
        self._num_threads = writer_num_threads
        self._refresh_interval = refresh_min_interval_sec
        self._lock_key = str(self.index_path.resolve())
        self._schema: Any = None
        self._index: Any = None
        self._writer: Any = None
        self._readers: ReaderManager | None = None

    @classmethod
    def from_config(cls, index_path: Path | str, config: IndexConfig) -> SearchIndex:
        return cls(
            index_path,
            writer_heap_size_mb=config.writer_heap_size_mb,
            writer_num_threads=config.writer_num_threads,
            refresh_min_interval_sec=config.refresh_min_interval_sec,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_open(self) -> bool:
        return self._index is not None

    def open(self) -> SearchIndex:
        """Open or create the on-disk index and take the writer.

        Raises:
            SearchIndexError: INDEX_LOCKED if the path is already open,
                INDEX_OPEN_FAILED for any other failure.
        """
        if self._index is not None:
            return self

        _claim_path(self._lock_key)
        try:
            self.index_path.mkdir(parents=True, exist_ok=True)
            schema = build_schema()
            index = tantivy.Index(schema, path=str(self.index_path))
            writer = index.writer(heap_size=self._heap_size, num_threads=self._num_threads)
        except ValueError as e:
            # Tantivy reports lock contention and schema mismatch as ValueError
            _release_path(self._lock_key)
            logger.error("search_index_open_failed", path=self._lock_key, error=str(e))
            if "lock" in str(e).lower():
                raise SearchIndexError.locked(self._lock_key) from e
            raise SearchIndexError.open_failed(self._lock_key, str(e)) from e
        except OSError as e:
            _release_path(self._lock_key)
            logger.error("search_index_open_failed", path=self._lock_key, error=str(e))
            raise SearchIndexError.open_failed(self._lock_key, str(e)) from e

        self._schema = schema
        self._index = index
        self._writer = writer
        self._readers = ReaderManager(index, self._refresh_interval)
        logger.info("search_index_opened", path=self._lock_key)
        return self

    def close(self) -> None:
        """Release the reader manager, writer, index handle and path lock."""
        if self._index is None:
            return

        if self._readers is not None:
            self._readers.close()
        try:
            # Consumes the writer and drops Tantivy's lock file
            self._writer.wait_merging_threads()
        except (OSError, ValueError) as e:
            logger.warning("search_index_merge_wait_failed", path=self._lock_key, error=str(e))
        finally:
            self._readers = None
            self._writer = None
            self._index = None
            self._schema = None
            _release_path(self._lock_key)
            logger.info("search_index_closed", path=self._lock_key)

    def __enter__(self) -> SearchIndex:
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
        """
        Replace the whole index with one document per element.

        Deletes every document, adds the elements in input order, commits
        and requests a refresh. One failing element aborts the rebuild; the
        uncommitted changes are rolled back.

        Returns:
            Number of documents indexed.
        """
        writer = self._require_writer("build index")
        logger.info("search_index_build_started", path=self._lock_key)

        count = 0
        try:
            writer.delete_all_documents()
            for element in elements:
                writer.add_document(element_to_document(element))
                count += 1
            writer.commit()
        except Exception as e:
            logger.error("search_index_build_failed", indexed=count, error=str(e))
            self._rollback()
            raise SearchIndexError.write_failed("build_index", str(e)) from e

        self._request_refresh()
        logger.info("search_index_built", count=count)
        return count

    def update(self, element: Element) -> None:
        """Replace the document for ``element.id`` (or add it if absent)."""
        if element is None:
            raise InvalidElementError.missing_argument("element")
        writer = self._require_writer("update element")

        try:
            writer.delete_documents(FIELD_ID, element.id)
            writer.add_document(element_to_document(element))
            writer.commit()
        except Exception as e:
            logger.error(
                "search_index_update_failed",
                element_id=element.id,
                full_name=element.full_name,
                error=str(e),
            )
            self._rollback()
            raise SearchIndexError.write_failed("update", str(e)) from e

        self._request_refresh()
        logger.debug("search_index_element_updated", element_id=element.id)

    def delete(self, element_id: str) -> None:
        """Remove the document for ``element_id``; a no-op if absent."""
        if not element_id:
            raise InvalidElementError.missing_argument("element_id")
        writer = self._require_writer("delete element")

        try:
            writer.delete_documents(FIELD_ID, element_id)
            writer.commit()
        except Exception as e:
            logger.error("search_index_delete_failed", element_id=element_id, error=str(e))
            self._rollback()
            raise SearchIndexError.write_failed("delete", str(e)) from e

        self._request_refresh()
        logger.debug("search_index_element_deleted", element_id=element_id)

    def _require_writer(self, operation: str) -> Any:
        if self._writer is None:
            raise SearchIndexError.closed(operation)
        return self._writer

    def _rollback(self) -> None:
        try:
            self._writer.rollback()
        except (OSError, ValueError) as e:
            logger.warning("search_index_rollback_failed", error=str(e))

    def _request_refresh(self) -> None:
        if self._readers is not None:
            self._readers.maybe_refresh(force=True)

    # =========================================================================
    # Reads
    # =========================================================================

    def search_by_name_prefix(self, pattern: str, max_results: int = 100) -> list[ElementSummary]:
        """Elements whose name tokens match ``pattern*``, best score first."""
        return self._search(
            "search_by_name_prefix",
            lambda schema: name_prefix_query(schema, pattern),
            max_results,
            pattern=pattern,
        )

    def search_by_full_name(self, full_name: str) -> ElementSummary | None:
        """Exact, case-sensitive full name match. Returns the top hit."""
        hits = self._search(
            "search_by_full_name",
            lambda schema: term_query(schema, FIELD_FULL_NAME, full_name),
            1,
            full_name=full_name,
        )
        return hits[0] if hits else None

    def search_by_kind(self, kind: ElementKind, max_results: int = 1000) -> list[ElementSummary]:
        return self._search(
            "search_by_kind",
            lambda schema: term_query(schema, FIELD_ELEMENT_TYPE, ElementKind(kind).value),
            max_results,
            kind=getattr(kind, "value", kind),
        )

    def search_by_parent_id(self, parent_id: str, max_results: int = 1000) -> list[ElementSummary]:
        return self._search(
            "search_by_parent_id",
            lambda schema: term_query(schema, FIELD_PARENT_ID, parent_id),
            max_results,
            parent_id=parent_id,
        )

    def advanced_search(self, query: ElementQuery, max_results: int = 100) -> list[ElementSummary]:
        """All non-empty predicate fields must match. An empty predicate matches nothing."""
        return self._search(
            "advanced_search",
            lambda schema: translate_query(schema, query),
            max_results,
            query=query,
        )

    def refresh(self) -> None:
        """Make every committed write visible to subsequent searches."""
        if self._readers is None:
            raise SearchIndexError.closed("refresh")
        self._readers.refresh()

    def doc_count(self) -> int:
        """Return number of documents in the current snapshot."""
        readers = self._readers
        if readers is None:
            return 0
        try:
            with readers.acquire() as searcher:
                return int(searcher.num_docs)
        except SearchIndexError:
            # Closed by another thread after the check above
            return 0

    def _search(
        self,
        operation: str,
        build_query: Callable[[Any], Any],
        max_results: int,
        **context: Any,
    ) -> list[ElementSummary]:
        readers, schema = self._readers, self._schema
        if readers is None or schema is None:
            logger.warning("search_on_closed_index", operation=operation, **context)
            return []
        if max_results <= 0:
            return []

        logger.debug(operation, max_results=max_results, **context)
        try:
            query = build_query(schema)
            if query is None:
                return []
            readers.maybe_refresh()
            with readers.acquire() as searcher:
                hits = searcher.search(query, max_results).hits
                return [document_to_summary(searcher.doc(addr)) for _score, addr in hits]
        except SearchIndexError:
            # Closed by another thread after the check above
            logger.warning("search_on_closed_index", operation=operation, **context)
            return []
        except (OSError, ValueError) as e:
            # ValueError: tantivy query/segment errors, or a corrupt stored kind
            logger.error("search_failed", operation=operation, error=str(e), **context)
            return []


def open_search_index(index_path: Path | str, config: IndexConfig | None = None) -> SearchIndex:
    """Create and open a search index."""
    if config is None:
        return SearchIndex(index_path).open()
    return SearchIndex.from_config(index_path, config).open()
