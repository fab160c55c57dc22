"""Index module - structural element store and search index.

This module provides:
- ElementStore: authoritative in-memory holder with exact/relational lookups
- SearchIndex: persistent Tantivy projection for prefix and filtered search
- Element stream: JSON Lines input produced by upstream collaborators

Public API is in `codeindexer.index.ops`:
- CodeIndex: facade owning one store and one search index

Internal implementations are in `codeindexer.index._internal/`.
"""

from codeindexer.index._internal.indexing import SearchIndex, open_search_index
from codeindexer.index.models import (
    AssetElement,
    Element,
    ElementKind,
    ElementQuery,
    ElementSummary,
    MemberElement,
    NamespaceElement,
    ParameterInfo,
    SourceLocation,
    TypeElement,
    compute_content_hash,
    element_from_dict,
    element_to_dict,
)
from codeindexer.index.ops import CodeIndex
from codeindexer.index.sources import StreamReadResult, read_element_stream, write_element_stream
from codeindexer.index.store import ElementStore

__all__ = [
    # Public API (ops.py)
    "CodeIndex",
    # Components
    "ElementStore",
    "SearchIndex",
    "open_search_index",
    # Element stream
    "StreamReadResult",
    "read_element_stream",
    "write_element_stream",
    # Models
    "ElementKind",
    "Element",
    "NamespaceElement",
    "TypeElement",
    "MemberElement",
    "AssetElement",
    "SourceLocation",
    "ParameterInfo",
    "ElementSummary",
    "ElementQuery",
    "compute_content_hash",
    "element_to_dict",
    "element_from_dict",
]
