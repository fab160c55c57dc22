"""Tests for the element data model (index/models.py).

Tests cover:
- Variant/kind validation at construction
- Immutability and replacement updates
- Content hashing
- ElementSummary / ElementQuery helpers
- dict (de)serialization
"""

from __future__ import annotations

import dataclasses

import pytest

from codeindexer.core.errors import ErrorCode, InvalidElementError
from codeindexer.index.models import (
    AssetElement,
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
    variant_for_kind,
)


class TestVariantKinds:
    """Each variant only accepts its own kinds."""

    @pytest.mark.parametrize("kind", sorted(ElementKind.type_kinds(), key=lambda k: k.value))
    def test_type_element_accepts_type_kinds(self, kind: ElementKind) -> None:
        element = TypeElement(kind=kind, name="X")
        assert element.kind is kind

    @pytest.mark.parametrize("kind", sorted(ElementKind.member_kinds(), key=lambda k: k.value))
    def test_member_element_accepts_member_kinds(self, kind: ElementKind) -> None:
        element = MemberElement(kind=kind, name="x")
        assert element.kind is kind

    def test_type_element_rejects_member_kind(self) -> None:
        """A TypeElement carrying Method is rejected at construction."""
        with pytest.raises(InvalidElementError) as exc_info:
            TypeElement(kind=ElementKind.METHOD, name="Broken")
        assert exc_info.value.code == ErrorCode.VALIDATION_KIND_MISMATCH
        assert exc_info.value.details["variant"] == "TypeElement"

    def test_member_element_rejects_type_kind(self) -> None:
        with pytest.raises(InvalidElementError):
            MemberElement(kind=ElementKind.CLASS, name="Broken")

    def test_unknown_kind_string_rejected(self) -> None:
        with pytest.raises(InvalidElementError) as exc_info:
            TypeElement(kind="Widget", name="X")  # type: ignore[arg-type]
        assert exc_info.value.details["kind"] == "Widget"

    def test_kind_string_coerced_to_enum(self) -> None:
        element = TypeElement(kind="Interface", name="IRepo")  # type: ignore[arg-type]
        assert element.kind is ElementKind.INTERFACE

    def test_namespace_kind_is_fixed(self) -> None:
        """Namespace kind is not an init argument."""
        assert NamespaceElement(name="N").kind is ElementKind.NAMESPACE
        with pytest.raises(TypeError):
            NamespaceElement(kind=ElementKind.CLASS, name="N")  # type: ignore[call-arg]

    def test_asset_element_defaults_to_other(self) -> None:
        assert AssetElement(name="Main.unity").kind is ElementKind.OTHER

    def test_variant_for_kind(self) -> None:
        assert variant_for_kind(ElementKind.NAMESPACE) is NamespaceElement
        assert variant_for_kind(ElementKind.DELEGATE) is TypeElement
        assert variant_for_kind(ElementKind.ENUM_MEMBER) is MemberElement
        assert variant_for_kind(ElementKind.OTHER) is AssetElement


class TestImmutability:
    """Elements are frozen; updates are replacements."""

    def test_kind_cannot_be_reassigned(self) -> None:
        element = NamespaceElement(name="N")
        with pytest.raises(dataclasses.FrozenInstanceError):
            element.kind = ElementKind.CLASS  # type: ignore[misc]

    def test_replace_keeps_id(self) -> None:
        element = TypeElement(kind=ElementKind.CLASS, name="A", full_name="N.A")
        updated = dataclasses.replace(element, documentation="Updated.")

        assert updated.id == element.id
        assert updated.documentation == "Updated."
        assert element.documentation == ""

    def test_replace_still_validates_kind(self) -> None:
        element = TypeElement(kind=ElementKind.CLASS, name="A")
        with pytest.raises(InvalidElementError):
            dataclasses.replace(element, kind=ElementKind.FIELD)

    def test_ids_are_generated_and_unique(self) -> None:
        a = TypeElement(kind=ElementKind.CLASS, name="A")
        b = TypeElement(kind=ElementKind.CLASS, name="A")
        assert a.id and b.id and a.id != b.id

    def test_defaults(self) -> None:
        element = MemberElement(kind=ElementKind.FIELD, name="count")
        assert element.version == 1
        assert element.parent_id is None
        assert element.modifiers == []
        assert element.location == SourceLocation()


class TestContentHash:
    def test_hash_is_sha256_hex(self) -> None:
        digest = compute_content_hash("class A {}")
        assert len(digest) == 64
        int(digest, 16)

    def test_hash_is_deterministic_and_sensitive(self) -> None:
        assert compute_content_hash("a") == compute_content_hash("a")
        assert compute_content_hash("a") != compute_content_hash("b")


class TestElementQuery:
    def test_default_query_is_empty(self) -> None:
        assert ElementQuery().is_empty

    def test_empty_strings_count_as_empty(self) -> None:
        assert ElementQuery(name_pattern="", access_modifier="").is_empty

    def test_any_field_makes_query_non_empty(self) -> None:
        assert not ElementQuery(kind=ElementKind.METHOD).is_empty
        assert not ElementQuery(return_type="void").is_empty


class TestElementSummary:
    def test_to_dict_uses_kind_value(self) -> None:
        summary = ElementSummary(
            id="1",
            name="GetUser",
            full_name="MyApp.UserService.GetUser",
            kind=ElementKind.METHOD,
            file_path="src/UserService.cs",
            line_number=5,
            content_hash="abc",
            return_type="User",
        )
        data = summary.to_dict()

        assert data["kind"] == "Method"
        assert data["return_type"] == "User"
        assert data["parent_id"] is None


class TestSerialization:
    """element_to_dict / element_from_dict."""

    def test_member_round_trip(self) -> None:
        element = MemberElement(
            kind=ElementKind.METHOD,
            name="GetUser",
            full_name="MyApp.UserService.GetUser",
            location=SourceLocation(file_path="a.cs", start_line=5, end_line=9),
            parameters=[ParameterInfo(name="id", type_name="int", modifier="in")],
            generic_constraints={"T": ["class"]},
            type_name="User",
            parent_id="parent-1",
        )
        data = element_to_dict(element)

        assert data["kind"] == "Method"
        assert element_from_dict(data) == element

    def test_namespace_from_dict(self) -> None:
        element = NamespaceElement(name="MyApp", full_name="MyApp", type_ids=["t1"])
        restored = element_from_dict(element_to_dict(element))
        assert isinstance(restored, NamespaceElement)
        assert restored == element

    def test_missing_kind_rejected(self) -> None:
        with pytest.raises(InvalidElementError) as exc_info:
            element_from_dict({"name": "X"})
        assert exc_info.value.code == ErrorCode.VALIDATION_MALFORMED_RECORD

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(InvalidElementError):
            element_from_dict({"kind": "Widget", "name": "X"})

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(InvalidElementError) as exc_info:
            element_from_dict({"kind": "Class", "name": "X", "colour": "red"})
        assert exc_info.value.details["kind"] == "Class"

    def test_payload_of_wrong_variant_rejected(self) -> None:
        """A Class record cannot carry member-only fields."""
        with pytest.raises(InvalidElementError):
            element_from_dict({"kind": "Class", "name": "X", "type_name": "int"})

    def test_non_object_rejected(self) -> None:
        with pytest.raises(InvalidElementError):
            element_from_dict(["Class"])  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("record", "field_name"),
        [
            ({"kind": "Class", "name": None}, "name"),
            ({"kind": "Class", "name": "X", "id": None}, "id"),
            ({"kind": "Class", "name": "X", "full_name": 3}, "full_name"),
            ({"kind": "Class", "name": "X", "parent_id": ["p"]}, "parent_id"),
            ({"kind": "Field", "name": "x", "version": "2"}, "version"),
            ({"kind": "Field", "name": "x", "modifiers": "static"}, "modifiers"),
            ({"kind": "Field", "name": "x", "is_static": "yes"}, "is_static"),
            ({"kind": "Class", "name": "X", "location": "a.cs"}, "location"),
            ({"kind": "Method", "name": "m", "parameters": [{"name": None}]}, "name"),
        ],
    )
    def test_wrong_value_type_rejected(self, record: dict, field_name: str) -> None:
        with pytest.raises(InvalidElementError) as exc_info:
            element_from_dict(record)
        assert exc_info.value.code == ErrorCode.VALIDATION_MALFORMED_RECORD
        assert exc_info.value.details["field"] == field_name

    def test_null_parent_id_accepted(self) -> None:
        element = element_from_dict({"kind": "Namespace", "name": "N", "parent_id": None})
        assert element.parent_id is None
