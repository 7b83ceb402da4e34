"""Core modules for talking to a GraphQL content graph."""

from .auth import (
    Auth,
    HmacAuth,
    NoAuth,
    SingleKeyAuth,
    auth_from_settings,
    compute_hmac_signature,
)
from .history import QueryHistory, QueryHistoryItem
from .hooks import HookRunner, RefreshHook
from .introspection import INTROSPECTION_QUERY, IntrospectionParser
from .ir import (
    ContentTypeInfo,
    FieldInfo,
    ListRef,
    NamedRef,
    NonNullRef,
    SchemaInfo,
    TypeInfo,
    decode_type_ref,
    unwrap_type,
)
from .models import (
    GraphQLErrorInfo,
    GraphQLRequest,
    GraphQLResponse,
    LastRequestInfo,
)
from .query import (
    FacetDefinition,
    FacetOrderBy,
    FilterDefinition,
    FilterLogic,
    FilterOperator,
    PaginationDefinition,
    QueryDefinition,
    SortDefinition,
    SortDirection,
)
from .query_builder import QueryBuilder, build_query, format_query, validate_query
from .scalars import ScalarRegistry
from .schema import SchemaCache
from .settings import (
    AuthenticationMode,
    ConfigurationError,
    GraphSettings,
    OptigraphError,
    SettingsProvider,
    StaticSettingsProvider,
)
from .transport import GraphQLTransport

__all__ = [
    # Settings
    "AuthenticationMode",
    "ConfigurationError",
    "GraphSettings",
    "OptigraphError",
    "SettingsProvider",
    "StaticSettingsProvider",
    # Auth
    "Auth",
    "HmacAuth",
    "NoAuth",
    "SingleKeyAuth",
    "auth_from_settings",
    "compute_hmac_signature",
    # Wire models
    "GraphQLErrorInfo",
    "GraphQLRequest",
    "GraphQLResponse",
    "LastRequestInfo",
    # Transport
    "GraphQLTransport",
    # Schema IR
    "ContentTypeInfo",
    "FieldInfo",
    "ListRef",
    "NamedRef",
    "NonNullRef",
    "SchemaInfo",
    "TypeInfo",
    "decode_type_ref",
    "unwrap_type",
    # Schema discovery
    "INTROSPECTION_QUERY",
    "IntrospectionParser",
    "ScalarRegistry",
    "SchemaCache",
    "HookRunner",
    "RefreshHook",
    # Query definitions
    "FacetDefinition",
    "FacetOrderBy",
    "FilterDefinition",
    "FilterLogic",
    "FilterOperator",
    "PaginationDefinition",
    "QueryDefinition",
    "SortDefinition",
    "SortDirection",
    # Query builder
    "QueryBuilder",
    "build_query",
    "format_query",
    "validate_query",
    # History
    "QueryHistory",
    "QueryHistoryItem",
]
