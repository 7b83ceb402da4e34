"""Introspection query and parser.

Turns the JSON result of the fixed introspection query into a SchemaInfo,
separating queryable content types from auxiliary types.
"""

from datetime import datetime, timezone
from typing import Any

from .ir import ContentTypeInfo, FieldInfo, SchemaInfo, decode_type_ref, unwrap_type
from .scalars import ScalarRegistry

INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    types {
      kind
      name
      description
      fields(includeDeprecated: false) {
        name
        description
        type {
          kind
          name
          ofType {
            kind
            name
            ofType {
              kind
              name
              ofType {
                kind
                name
              }
            }
          }
        }
      }
      interfaces {
        name
      }
    }
  }
}
"""

META_PREFIX = "__"
RESERVED_PREFIX = "_"

# Compared case-insensitively
EXCLUDED_TYPES = frozenset(name.lower() for name in (
    "Query", "Mutation", "Subscription",
    "__Schema", "__Type", "__Field", "__InputValue", "__EnumValue", "__Directive",
    "String", "Int", "Float", "Boolean", "ID",
    "DateTime", "Date", "Time", "DateTimeOffset",
    "Decimal", "Long", "Short", "Byte",
    "Uri", "Guid", "TimeSpan",
))
EXCLUDED_PREFIXES = ("__", "query", "mutation")
EXCLUDED_SUFFIXES = (
    "Input", "Output", "Connection", "Edge",
    "WhereInput", "OrderByInput", "Facet", "Autocomplete",
)


def is_content_type_name(name: str) -> bool:
    """Check whether a type name survives the auxiliary-type exclusions."""
    lowered = name.lower()
    if lowered in EXCLUDED_TYPES:
        return False
    if lowered.startswith(EXCLUDED_PREFIXES):
        return False
    return not name.endswith(EXCLUDED_SUFFIXES)


class IntrospectionParser:
    """Parses introspection results into SchemaInfo."""

    def __init__(self, scalars: ScalarRegistry | None = None):
        self.scalars = scalars or ScalarRegistry()

    def parse(self, data: dict[str, Any] | None, fetched_at: datetime | None = None) -> SchemaInfo:
        """Parse the `data` payload of an introspection response.

        Raises:
            KeyError, TypeError: If the payload does not have the
                introspection shape
        """
        schema = SchemaInfo(fetched_at=fetched_at or datetime.now(timezone.utc))
        if data is None:
            return schema

        schema_node = data["__schema"]
        query_type_name = schema_node["queryType"]["name"]
        types = schema_node["types"] or []

        query_type = next((t for t in types if t.get("name") == query_type_name), None)
        if query_type is None:
            return schema

        match_names = self._collect_root_fields(query_type, schema.queryable_type_names)

        for raw_type in types:
            content_type = self._parse_content_type(raw_type, match_names)
            if content_type is not None:
                schema.content_types.append(content_type)

        schema.content_types.sort(key=lambda t: (not t.is_queryable, t.name))
        return schema

    def _collect_root_fields(self, query_type: dict[str, Any], queryable_names: list[str]) -> set[str]:
        """Fill `queryable_names` and return the names used for queryable matching."""
        match_names: set[str] = set()
        for root_field in query_type.get("fields") or []:
            name = root_field.get("name") or ""
            if name.startswith(META_PREFIX):
                continue
            queryable_names.append(name)
            # Reserved fields (e.g. `_Content`) are listed but never matched
            if name.startswith(RESERVED_PREFIX):
                continue
            match_names.add(name)
        queryable_names.sort()
        return match_names

    def _parse_content_type(self, raw_type: dict[str, Any], match_names: set[str]) -> ContentTypeInfo | None:
        name = raw_type.get("name") or ""
        if raw_type.get("kind") != "OBJECT" or not is_content_type_name(name):
            return None

        content_type = ContentTypeInfo(
            name=name,
            description=raw_type.get("description"),
            is_queryable=name in match_names,
        )

        for iface in raw_type.get("interfaces") or []:
            iface_name = iface.get("name")
            if iface_name:
                content_type.interfaces.append(iface_name)

        for raw_field in raw_type.get("fields") or []:
            field_info = self._parse_field(raw_field)
            if field_info is not None:
                content_type.fields.append(field_info)

        if not content_type.fields:
            return None
        return content_type

    def _parse_field(self, raw_field: dict[str, Any]) -> FieldInfo | None:
        name = raw_field.get("name") or ""
        if name.startswith(META_PREFIX):
            return None

        type_info = unwrap_type(decode_type_ref(raw_field.get("type")))
        underlying = type_info.underlying_type
        is_scalar = self.scalars.is_scalar(underlying)

        return FieldInfo(
            name=name,
            description=raw_field.get("description"),
            type=type_info.type_name,
            underlying_type=underlying,
            is_nullable=type_info.is_nullable,
            is_list=type_info.is_list,
            is_scalar=is_scalar,
            is_filterable=True,
            is_sortable=is_scalar,
            is_searchable=underlying == "String",
            available_operators=self.scalars.operators_for(underlying),
        )
