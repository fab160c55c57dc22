"""Element data model for the structural index.

Elements are the unit of indexing: one namespace, type or member extracted
from a codebase by an upstream collaborator (source parser, assembly reader,
project walker). Names and types are opaque strings; nothing here resolves
them.

Variants form an explicit sum type. Each variant only accepts the kinds that
match its payload, checked at construction:

- NamespaceElement: Namespace (fixed)
- TypeElement: Class, Interface, Struct, Enum, Delegate
- MemberElement: Method, Property, Field, Event, Constructor, Destructor,
  Indexer, Operator, EnumMember
- AssetElement: Other (non-code project files)

All dataclasses are frozen. Updating an element means building a
replacement with the same id (``dataclasses.replace``).
"""

from __future__ import annotations

import dataclasses
import hashlib
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from codeindexer.core.errors import InvalidElementError


class ElementKind(str, Enum):
    """Discriminant selecting which variant an element carries.

    The value is the name stored in the ``elementType`` index field.
    """

    NAMESPACE = "Namespace"
    CLASS = "Class"
    INTERFACE = "Interface"
    STRUCT = "Struct"
    ENUM = "Enum"
    METHOD = "Method"
    PROPERTY = "Property"
    FIELD = "Field"
    EVENT = "Event"
    DELEGATE = "Delegate"
    ENUM_MEMBER = "EnumMember"
    CONSTRUCTOR = "Constructor"
    DESTRUCTOR = "Destructor"
    INDEXER = "Indexer"
    OPERATOR = "Operator"
    OTHER = "Other"

    @classmethod
    def type_kinds(cls) -> frozenset[ElementKind]:
        """Kinds carried by TypeElement."""
        return frozenset({cls.CLASS, cls.INTERFACE, cls.STRUCT, cls.ENUM, cls.DELEGATE})

    @classmethod
    def member_kinds(cls) -> frozenset[ElementKind]:
        """Kinds carried by MemberElement."""
        return frozenset(
            {
                cls.METHOD,
                cls.PROPERTY,
                cls.FIELD,
                cls.EVENT,
                cls.CONSTRUCTOR,
                cls.DESTRUCTOR,
                cls.INDEXER,
                cls.OPERATOR,
                cls.ENUM_MEMBER,
            }
        )


def new_element_id() -> str:
    """Generate an opaque unique element id."""
    return str(uuid.uuid4())


def compute_content_hash(text: str) -> str:
    """Digest of an element's canonical text, used for change detection."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class SourceLocation:
    """Span of an element in its source file."""

    file_path: str = ""
    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0


@dataclass(frozen=True)
class ParameterInfo:
    """A single method/indexer/constructor parameter."""

    name: str = ""
    type_name: str = ""
    has_default_value: bool = False
    default_value: str | None = None
    modifier: str = ""  # ref, out, in, params, this


@dataclass(frozen=True, kw_only=True)
class Element:
    """Fields shared by every variant. Not instantiable on its own."""

    kind: ElementKind
    id: str = field(default_factory=new_element_id)
    name: str = ""
    full_name: str = ""
    location: SourceLocation = field(default_factory=SourceLocation)
    documentation: str = ""
    access_modifier: str = ""
    modifiers: list[str] = field(default_factory=list)
    content_hash: str = ""
    version: int = 1
    parent_id: str | None = None

    _allowed_kinds: ClassVar[frozenset[ElementKind]] = frozenset()

    def __post_init__(self) -> None:
        kind = self.kind
        allowed = sorted(k.value for k in self._allowed_kinds)
        if not isinstance(kind, ElementKind):
            try:
                kind = ElementKind(kind)
            except ValueError:
                raise InvalidElementError.kind_mismatch(
                    type(self).__name__, kind, allowed
                ) from None
            object.__setattr__(self, "kind", kind)
        if kind not in self._allowed_kinds:
            raise InvalidElementError.kind_mismatch(type(self).__name__, kind.value, allowed)


@dataclass(frozen=True, kw_only=True)
class NamespaceElement(Element):
    """A namespace. Its kind is fixed and cannot be passed or reassigned."""

    kind: ElementKind = field(default=ElementKind.NAMESPACE, init=False)
    type_ids: list[str] = field(default_factory=list)
    child_namespace_ids: list[str] = field(default_factory=list)

    _allowed_kinds: ClassVar[frozenset[ElementKind]] = frozenset({ElementKind.NAMESPACE})


@dataclass(frozen=True, kw_only=True)
class TypeElement(Element):
    """A class, interface, struct, enum or delegate."""

    base_type_id: str | None = None  # a type name, not resolved to an id
    implemented_interface_ids: list[str] = field(default_factory=list)
    member_ids: list[str] = field(default_factory=list)
    nested_type_ids: list[str] = field(default_factory=list)
    generic_parameters: list[str] = field(default_factory=list)
    generic_constraints: dict[str, list[str]] = field(default_factory=dict)
    is_abstract: bool = False
    is_static: bool = False
    is_sealed: bool = False
    is_partial: bool = False

    _allowed_kinds: ClassVar[frozenset[ElementKind]] = ElementKind.type_kinds()


@dataclass(frozen=True, kw_only=True)
class MemberElement(Element):
    """A method, property, field, event, constructor, destructor, indexer,
    operator or enum member."""

    type_name: str = ""  # return type for methods, value type otherwise
    parameters: list[ParameterInfo] = field(default_factory=list)
    is_virtual: bool = False
    is_abstract: bool = False
    is_static: bool = False
    is_override: bool = False
    is_async: bool = False
    is_extension: bool = False
    generic_parameters: list[str] = field(default_factory=list)
    generic_constraints: dict[str, list[str]] = field(default_factory=dict)

    _allowed_kinds: ClassVar[frozenset[ElementKind]] = ElementKind.member_kinds()


@dataclass(frozen=True, kw_only=True)
class AssetElement(Element):
    """A non-code project file (scene, prefab, material, ...)."""

    kind: ElementKind = ElementKind.OTHER

    _allowed_kinds: ClassVar[frozenset[ElementKind]] = frozenset({ElementKind.OTHER})


AnyElement = NamespaceElement | TypeElement | MemberElement | AssetElement


def variant_for_kind(kind: ElementKind) -> type[Element]:
    """Return the element class that carries ``kind``."""
    if kind is ElementKind.NAMESPACE:
        return NamespaceElement
    if kind in ElementKind.type_kinds():
        return TypeElement
    if kind in ElementKind.member_kinds():
        return MemberElement
    return AssetElement


@dataclass(frozen=True)
class ElementSummary:
    """The stored projection of an element returned by the search index.

    Documentation, modifiers and parameters are indexed but not part of
    the summary; full elements come from ElementStore.
    """

    id: str
    name: str
    full_name: str
    kind: ElementKind
    file_path: str
    line_number: int
    content_hash: str
    parent_id: str | None = None
    access_modifier: str | None = None
    return_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "id": self.id,
            "name": self.name,
            "full_name": self.full_name,
            "kind": self.kind.value,
            "parent_id": self.parent_id,
            "access_modifier": self.access_modifier,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "return_type": self.return_type,
            "content_hash": self.content_hash,
        }


@dataclass(frozen=True)
class ElementQuery:
    """Multi-field predicate for advanced search. Empty fields are ignored."""

    name_pattern: str | None = None
    kind: ElementKind | None = None
    access_modifier: str | None = None
    parent_id: str | None = None
    return_type: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.name_pattern
            or self.kind is not None
            or self.access_modifier
            or self.parent_id
            or self.return_type
        )


# ============================================================================
# Serialization
# ============================================================================

# Value checks for record fields, keyed by the dataclass annotation
_FIELD_CHECKS: dict[str, Callable[[Any], bool]] = {
    "str": lambda v: isinstance(v, str),
    "str | None": lambda v: v is None or isinstance(v, str),
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "bool": lambda v: isinstance(v, bool),
    "list[str]": lambda v: isinstance(v, list) and all(isinstance(i, str) for i in v),
    "dict[str, list[str]]": lambda v: isinstance(v, dict)
    and all(
        isinstance(k, str) and isinstance(i, list) and all(isinstance(s, str) for s in i)
        for k, i in v.items()
    ),
}


def _check_field_types(cls: type, values: dict[str, Any], kind: ElementKind) -> None:
    """Reject values whose JSON type does not match the field annotation."""
    for f in dataclasses.fields(cls):
        check = _FIELD_CHECKS.get(str(f.type))
        if check is not None and f.name in values and not check(values[f.name]):
            raise InvalidElementError.malformed_record(
                f"'{f.name}' must be {f.type}, got {type(values[f.name]).__name__}",
                kind=kind.value,
                field=f.name,
            )


def element_to_dict(element: Element) -> dict[str, Any]:
    """Convert an element to a JSON-compatible dict (snake_case keys)."""
    data = dataclasses.asdict(element)
    data["kind"] = element.kind.value
    return data


def element_from_dict(data: dict[str, Any]) -> Element:
    """Build the right variant from a dict produced by element_to_dict.

    Raises:
        InvalidElementError: If the record has no usable kind, unknown keys,
            values of the wrong type, or a kind that its payload cannot carry.
    """
    if not isinstance(data, dict):
        raise InvalidElementError.malformed_record("record is not an object")
    fields = dict(data)
    raw_kind = fields.pop("kind", None)
    if raw_kind is None:
        raise InvalidElementError.malformed_record("missing 'kind'")
    try:
        kind = ElementKind(raw_kind)
    except ValueError:
        raise InvalidElementError.malformed_record(
            f"unknown kind '{raw_kind}'", kind=str(raw_kind)
        ) from None

    cls = variant_for_kind(kind)
    _check_field_types(cls, fields, kind)
    try:
        if "location" in fields:
            location = fields["location"]
            if not isinstance(location, dict):
                raise InvalidElementError.malformed_record(
                    "'location' must be an object", kind=kind.value, field="location"
                )
            _check_field_types(SourceLocation, location, kind)
            fields["location"] = SourceLocation(**location)
        if "parameters" in fields:
            parameters = fields["parameters"] or []
            if not isinstance(parameters, list) or not all(
                isinstance(p, dict) for p in parameters
            ):
                raise InvalidElementError.malformed_record(
                    "'parameters' must be a list of objects", kind=kind.value, field="parameters"
                )
            for p in parameters:
                _check_field_types(ParameterInfo, p, kind)
            fields["parameters"] = [ParameterInfo(**p) for p in parameters]
        if cls is NamespaceElement:
            return cls(**fields)
        return cls(kind=kind, **fields)
    except TypeError as e:
        raise InvalidElementError.malformed_record(str(e), kind=kind.value) from e
