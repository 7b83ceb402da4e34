"""Intermediate Representation (IR) for introspected content graph schemas.

These dataclasses describe the parts of a schema an interactive query
editor needs: content types, their fields and per-field capabilities.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union


@dataclass(frozen=True)
class NamedRef:
    """A reference to a named type (scalar, object, enum, ...)."""
    name: str


@dataclass(frozen=True)
class ListRef:
    """A LIST wrapper around another type reference."""
    of_type: "TypeRef"


@dataclass(frozen=True)
class NonNullRef:
    """A NON_NULL wrapper around another type reference."""
    of_type: "TypeRef"


TypeRef = Union[NamedRef, ListRef, NonNullRef]

UNKNOWN_TYPE = "Unknown"


def decode_type_ref(raw: dict[str, Any] | None) -> TypeRef:
    """Decode an introspection `type` object into a TypeRef.

    A missing wrapper target decodes to `NamedRef("Unknown")`.
    """
    if not raw:
        return NamedRef(UNKNOWN_TYPE)

    kind = raw.get("kind")
    if kind == "NON_NULL":
        return NonNullRef(decode_type_ref(raw.get("ofType")))
    if kind == "LIST":
        return ListRef(decode_type_ref(raw.get("ofType")))
    return NamedRef(raw.get("name") or UNKNOWN_TYPE)


@dataclass(frozen=True)
class TypeInfo:
    """A type reference reduced to what field metadata needs."""
    type_name: str  # Display form, e.g. "[String!]!"
    underlying_type: str
    is_nullable: bool
    is_list: bool


def unwrap_type(ref: TypeRef) -> TypeInfo:
    """Strip NON_NULL/LIST wrappers, keeping the display decoration."""
    if isinstance(ref, NonNullRef):
        inner = unwrap_type(ref.of_type)
        return TypeInfo(f"{inner.type_name}!", inner.underlying_type, False, inner.is_list)
    if isinstance(ref, ListRef):
        inner = unwrap_type(ref.of_type)
        return TypeInfo(f"[{inner.type_name}]", inner.underlying_type, True, True)
    return TypeInfo(ref.name, ref.name, True, False)


@dataclass
class FieldInfo:
    """Represents a field on a content type."""
    name: str
    type: str
    underlying_type: str
    description: str | None = None
    is_nullable: bool = True
    is_list: bool = False
    is_scalar: bool = False
    is_filterable: bool = True
    is_sortable: bool = False
    is_searchable: bool = False
    available_operators: list[str] = field(default_factory=list)


@dataclass
class ContentTypeInfo:
    """Represents an OBJECT type discovered in the schema."""
    name: str
    description: str | None = None
    is_queryable: bool = False
    fields: list[FieldInfo] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)

    def get_field(self, name: str) -> FieldInfo | None:
        """Look up a field by exact name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class SchemaInfo:
    """Result of one schema introspection.

    `content_types` lists queryable types first, then the rest, each group
    alphabetically. `queryable_type_names` holds every root query field name
    except introspection meta-fields.
    """
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    content_types: list[ContentTypeInfo] = field(default_factory=list)
    queryable_type_names: list[str] = field(default_factory=list)

    def get_content_type(self, name: str) -> ContentTypeInfo | None:
        """Look up a content type by name, ignoring case."""
        wanted = name.lower()
        for content_type in self.content_types:
            if content_type.name.lower() == wanted:
                return content_type
        return None

    @property
    def queryable_content_types(self) -> list[ContentTypeInfo]:
        return [t for t in self.content_types if t.is_queryable]
