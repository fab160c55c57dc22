"""Search index internals: schema, analysis, query translation, readers."""

from codeindexer.index._internal.indexing.query import (
    FieldClause,
    name_prefix_query,
    predicate_clauses,
    translate_query,
)
from codeindexer.index._internal.indexing.readers import ReaderManager
from codeindexer.index._internal.indexing.search_index import SearchIndex, open_search_index

__all__ = [
    # Index
    "SearchIndex",
    "open_search_index",
    "ReaderManager",
    # Query translation
    "FieldClause",
    "predicate_clauses",
    "name_prefix_query",
    "translate_query",
]
