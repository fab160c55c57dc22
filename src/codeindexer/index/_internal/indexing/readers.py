"""Near-real-time reader management for the search index.

One writer mutates the index while any number of threads read. Readers
never see a half-applied commit: each query runs against a Searcher, a
point-in-time snapshot of the committed segments.

Refresh makes recent commits visible to new snapshots:
- maybe_refresh(): best effort; skipped while another thread is refreshing
  or when the previous refresh is younger than the minimum interval
- refresh(): waits for any in-flight refresh, then reloads
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from codeindexer.core.errors import SearchIndexError

logger = structlog.get_logger()


class ReaderManager:
    """Hands out scoped searcher snapshots over a Tantivy index."""

    def __init__(self, index: Any, min_refresh_interval_sec: float = 0.0) -> None:
        self._index = index
        self._min_interval = min_refresh_interval_sec
        self._refresh_lock = threading.Lock()
        self._count_lock = threading.Lock()
        self._last_refresh = 0.0
        self._active = 0
        self._closed = False

    @property
    def active_snapshots(self) -> int:
        """Number of snapshots acquired and not yet released."""
        with self._count_lock:
            return self._active

    def maybe_refresh(self, *, force: bool = False) -> bool:
        """Reload unless rate-limited or already refreshing.

        Args:
            force: Ignore the minimum interval (still non-blocking).

        Returns:
            True if this call reloaded the reader.
        """
        if self._closed:
            return False
        if not force and time.monotonic() - self._last_refresh < self._min_interval:
            return False
        if not self._refresh_lock.acquire(blocking=False):
            return False
        try:
            self._index.reload()
            self._last_refresh = time.monotonic()
        finally:
            self._refresh_lock.release()
        return True

    def refresh(self) -> None:
        """Reload now, waiting for a concurrent refresh to finish first."""
        if self._closed:
            raise SearchIndexError.closed("refresh")
        with self._refresh_lock:
            self._index.reload()
            self._last_refresh = time.monotonic()

    @contextmanager
    def acquire(self) -> Iterator[Any]:
        """Yield a searcher snapshot, released on every exit path."""
        if self._closed:
            raise SearchIndexError.closed("acquire a reader")
        searcher = self._index.searcher()
        with self._count_lock:
            self._active += 1
        try:
            yield searcher
        finally:
            with self._count_lock:
                self._active -= 1

    def close(self) -> None:
        """Stop handing out snapshots. Snapshots already held stay valid."""
        if self._closed:
            return
        self._closed = True
        if self.active_snapshots:
            logger.debug("reader_manager_closed_with_active", active=self.active_snapshots)
