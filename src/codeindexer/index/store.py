"""In-memory element store with secondary indexes.

ElementStore is the authoritative holder of every element currently known.
It answers exact and relational lookups (by id, full name, name, kind,
parent) without touching the search index.

Secondary indexes:
- by kind: kind -> [id, ...]
- by name: lowercase name -> [id, ...]
- by full name: lowercase full name -> id (last write wins)
- by parent: parent id -> [id, ...]

Buckets are append-only until clear(); re-adding an id appends it again and
old name/parent buckets keep pointing at the id, which now resolves to the
replacement element.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from codeindexer.core.errors import InvalidElementError
from codeindexer.index.models import Element, ElementKind


class ElementStore:
    """Exact-match and relational access over all known elements.

    Usage::

        store = ElementStore()
        store.add_all(elements)

        store.get_by_full_name("MyApp.Services.UserService")
        store.find_by_name_pattern("user")   # substring, case-insensitive
        store.get_children(class_id)
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._elements: dict[str, Element] = {}
        self._by_kind: dict[ElementKind, list[str]] = {}
        self._by_name: dict[str, list[str]] = {}
        self._by_full_name: dict[str, str] = {}
        self._by_parent: dict[str, list[str]] = {}

    def add(self, element: Element) -> None:
        """Insert or overwrite an element and update every secondary index."""
        if element is None:
            raise InvalidElementError.missing_argument("element")

        with self._lock:
            self._elements[element.id] = element
            self._by_kind.setdefault(element.kind, []).append(element.id)
            self._by_name.setdefault(element.name.lower(), []).append(element.id)
            self._by_full_name[element.full_name.lower()] = element.id
            if element.parent_id is not None:
                self._by_parent.setdefault(element.parent_id, []).append(element.id)

    def add_all(self, elements: Iterable[Element]) -> None:
        """Add elements in input order. Not atomic: a failure keeps earlier adds."""
        for element in elements:
            self.add(element)

    def get_by_id(self, element_id: str) -> Element | None:
        with self._lock:
            return self._elements.get(element_id)

    def get_by_full_name(self, full_name: str) -> Element | None:
        """Case-insensitive exact lookup; the latest insert wins on collision."""
        with self._lock:
            element_id = self._by_full_name.get(full_name.lower())
            return self._elements.get(element_id) if element_id is not None else None

    def find_by_name(self, name: str) -> list[Element]:
        """All elements whose name equals ``name``, ignoring case."""
        with self._lock:
            return self._resolve(self._by_name.get(name.lower(), []))

    def find_by_name_pattern(self, pattern: str) -> list[Element]:
        """All elements whose name contains ``pattern``, ignoring case.

        Scans every distinct name, so cost grows with the number of names.
        """
        needle = pattern.lower()
        with self._lock:
            matches: list[Element] = []
            for name, ids in self._by_name.items():
                if needle in name:
                    matches.extend(self._resolve(ids))
            return matches

    def get_by_kind(self, kind: ElementKind) -> list[Element]:
        with self._lock:
            return self._resolve(self._by_kind.get(kind, []))

    def get_children(self, parent_id: str) -> list[Element]:
        """Elements whose parent_id is ``parent_id``, in insertion order."""
        with self._lock:
            return self._resolve(self._by_parent.get(parent_id, []))

    def get_all(self) -> list[Element]:
        with self._lock:
            return list(self._elements.values())

    def count(self) -> int:
        with self._lock:
            return len(self._elements)

    def __len__(self) -> int:
        return self.count()

    def clear(self) -> None:
        """Drop every element and index in one step."""
        with self._lock:
            self._elements = {}
            self._by_kind = {}
            self._by_name = {}
            self._by_full_name = {}
            self._by_parent = {}

    def _resolve(self, ids: list[str]) -> list[Element]:
        return [self._elements[element_id] for element_id in ids]
