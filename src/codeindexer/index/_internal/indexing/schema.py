"""Tantivy document schema for elements.

The field names below are a compatibility contract: an index written by one
version must stay queryable by the same predicates in the next.

Exact fields use the ``raw`` tokenizer (the whole value is one term).
Text fields use the ``default`` tokenizer (see analysis.py).
"""

from __future__ import annotations

from typing import Any

import tantivy

from codeindexer.index.models import (
    AssetElement,
    Element,
    ElementKind,
    ElementSummary,
    MemberElement,
    NamespaceElement,
    ParameterInfo,
    TypeElement,
)

FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_FULL_NAME = "fullName"
FIELD_ELEMENT_TYPE = "elementType"
FIELD_PARENT_ID = "parentId"
FIELD_ACCESS_MODIFIER = "accessModifier"
FIELD_MODIFIERS = "modifiers"
FIELD_DOCUMENTATION = "documentation"
FIELD_PARAMETERS = "parameters"
FIELD_RETURN_TYPE = "returnType"
FIELD_FILE_PATH = "filePath"
FIELD_LINE_NUMBER = "lineNumber"
FIELD_CONTENT_HASH = "contentHash"

EXACT_FIELDS = (
    FIELD_ID,
    FIELD_FULL_NAME,
    FIELD_ELEMENT_TYPE,
    FIELD_PARENT_ID,
    FIELD_ACCESS_MODIFIER,
    FIELD_RETURN_TYPE,
    FIELD_FILE_PATH,
    FIELD_CONTENT_HASH,
)
TEXT_FIELDS = (
    FIELD_NAME,
    FIELD_MODIFIERS,
    FIELD_DOCUMENTATION,
    FIELD_PARAMETERS,
)


def build_schema() -> tantivy.Schema:
    """Build the element document schema."""
    schema_builder = tantivy.SchemaBuilder()
    for name in EXACT_FIELDS:
        schema_builder.add_text_field(name, stored=True, tokenizer_name="raw")
    for name in TEXT_FIELDS:
        schema_builder.add_text_field(name, stored=True, tokenizer_name="default")
    schema_builder.add_integer_field(FIELD_LINE_NUMBER, stored=True, indexed=True)
    return schema_builder.build()


def format_parameters(parameters: list[ParameterInfo]) -> str:
    """Render parameters as ``"{type} {name}"`` pairs joined by spaces."""
    return " ".join(f"{p.type_name} {p.name}" for p in parameters)


def element_to_document(element: Element) -> tantivy.Document:
    """Project an element onto one index document.

    Optional fields are omitted rather than stored empty, so an exact filter
    on them never matches an element that lacks the value.
    """
    doc = tantivy.Document()
    doc.add_text(FIELD_ID, element.id)
    doc.add_text(FIELD_NAME, element.name)
    doc.add_text(FIELD_FULL_NAME, element.full_name)
    doc.add_text(FIELD_ELEMENT_TYPE, element.kind.value)
    doc.add_text(FIELD_CONTENT_HASH, element.content_hash)
    doc.add_text(FIELD_FILE_PATH, element.location.file_path)
    doc.add_integer(FIELD_LINE_NUMBER, element.location.start_line)

    if element.parent_id is not None:
        doc.add_text(FIELD_PARENT_ID, element.parent_id)
    if element.access_modifier:
        doc.add_text(FIELD_ACCESS_MODIFIER, element.access_modifier)
    if element.modifiers:
        doc.add_text(FIELD_MODIFIERS, " ".join(element.modifiers))
    if element.documentation:
        doc.add_text(FIELD_DOCUMENTATION, element.documentation)

    match element:
        case MemberElement():
            if element.type_name:
                doc.add_text(FIELD_RETURN_TYPE, element.type_name)
            if element.parameters:
                doc.add_text(FIELD_PARAMETERS, format_parameters(element.parameters))
        case TypeElement():
            pass
        case NamespaceElement():
            pass
        case AssetElement():
            pass
        case _:
            raise TypeError(f"Unsupported element variant: {type(element).__name__}")

    return doc


def document_to_summary(doc: Any) -> ElementSummary:
    """Read the stored fields of a document back into a summary."""
    line_number = doc.get_first(FIELD_LINE_NUMBER)
    return ElementSummary(
        id=doc.get_first(FIELD_ID) or "",
        name=doc.get_first(FIELD_NAME) or "",
        full_name=doc.get_first(FIELD_FULL_NAME) or "",
        kind=ElementKind(doc.get_first(FIELD_ELEMENT_TYPE)),
        parent_id=doc.get_first(FIELD_PARENT_ID),
        access_modifier=doc.get_first(FIELD_ACCESS_MODIFIER),
        file_path=doc.get_first(FIELD_FILE_PATH) or "",
        line_number=int(line_number) if line_number is not None else 0,
        return_type=doc.get_first(FIELD_RETURN_TYPE),
        content_hash=doc.get_first(FIELD_CONTENT_HASH) or "",
    )
