"""Translate structured predicates into Tantivy queries.

Everything here is a pure function of its inputs: no index access, no state.

- predicate_clauses(): which fields an ElementQuery constrains, in order
- name_prefix_query(): name pattern -> all tokens required, last one as prefix
- translate_query(): ElementQuery -> boolean query with one MUST per clause
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import tantivy

from codeindexer.index._internal.indexing.analysis import analyze
from codeindexer.index._internal.indexing.schema import (
    FIELD_ACCESS_MODIFIER,
    FIELD_ELEMENT_TYPE,
    FIELD_NAME,
    FIELD_PARENT_ID,
    FIELD_RETURN_TYPE,
)
from codeindexer.index.models import ElementKind, ElementQuery


@dataclass(frozen=True)
class FieldClause:
    """One required field constraint of a predicate."""

    field: str
    value: str


def predicate_clauses(query: ElementQuery) -> list[FieldClause]:
    """List the non-empty constraints of ``query``.

    Order: name, elementType, accessModifier, parentId, returnType.
    """
    clauses: list[FieldClause] = []
    if query.name_pattern:
        clauses.append(FieldClause(FIELD_NAME, query.name_pattern))
    if query.kind is not None:
        clauses.append(FieldClause(FIELD_ELEMENT_TYPE, ElementKind(query.kind).value))
    if query.access_modifier:
        clauses.append(FieldClause(FIELD_ACCESS_MODIFIER, query.access_modifier))
    if query.parent_id:
        clauses.append(FieldClause(FIELD_PARENT_ID, query.parent_id))
    if query.return_type:
        clauses.append(FieldClause(FIELD_RETURN_TYPE, query.return_type))
    return clauses


def match_nothing() -> tantivy.Query:
    """A boolean query without clauses; Tantivy matches no document for it."""
    return tantivy.Query.boolean_query([])


def term_query(schema: tantivy.Schema, field: str, value: str) -> tantivy.Query:
    """Exact single-term match on a raw field."""
    return tantivy.Query.term_query(schema, field, value)


def name_prefix_query(schema: tantivy.Schema, pattern: str) -> tantivy.Query | None:
    """Build ``pattern*`` against the tokenized name field.

    The pattern is analyzed like indexed names. Every token must be present
    and the last one only as a prefix. Returns None when the pattern holds
    no token at all.
    """
    tokens = analyze(pattern)
    if not tokens:
        return None

    *exact, last = tokens
    prefix = tantivy.Query.regex_query(schema, FIELD_NAME, f"{re.escape(last)}.*")
    if not exact:
        return prefix

    subqueries = [(tantivy.Occur.Must, term_query(schema, FIELD_NAME, t)) for t in exact]
    subqueries.append((tantivy.Occur.Must, prefix))
    return tantivy.Query.boolean_query(subqueries)


def translate_query(schema: tantivy.Schema, query: ElementQuery) -> tantivy.Query:
    """Conjunction of every non-empty predicate field.

    An empty predicate yields a zero-clause conjunction, which matches
    nothing. A name pattern without tokens makes the whole query match
    nothing.
    """
    subqueries: list[tuple[tantivy.Occur, tantivy.Query]] = []
    for clause in predicate_clauses(query):
        if clause.field == FIELD_NAME:
            sub = name_prefix_query(schema, clause.value) or match_nothing()
        else:
            sub = term_query(schema, clause.field, clause.value)
        subqueries.append((tantivy.Occur.Must, sub))
    return tantivy.Query.boolean_query(subqueries)
