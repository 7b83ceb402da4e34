"""Schema cache backed by introspection.

The cache loads the schema once on first use and reloads only when asked
to. Concurrent first callers share a single introspection round trip.
"""

import asyncio
import logging
from typing import Any, Protocol

from .hooks import HookRunner, RefreshSubscriber
from .introspection import INTROSPECTION_QUERY, IntrospectionParser
from .ir import ContentTypeInfo, SchemaInfo
from .models import GraphQLRequest, GraphQLResponse

logger = logging.getLogger(__name__)


class Executor(Protocol):
    """Anything that can execute a GraphQL request (normally GraphQLTransport)."""

    async def execute(self, request: GraphQLRequest) -> GraphQLResponse[Any]:
        ...


class SchemaCache:
    """Caches the introspected schema.

    A failed load leaves the cache empty, so the next call tries again.

    Examples:
        cache = SchemaCache(transport)
        schema = await cache.get_schema_info()
        article = await cache.get_content_type("ArticlePage")

        cache.add_refresh_hook(lambda schema: print("reloaded"))
        await cache.refresh_schema()
    """

    def __init__(self, transport: Executor, parser: IntrospectionParser | None = None):
        self._transport = transport
        self._parser = parser or IntrospectionParser()
        self._schema: SchemaInfo | None = None
        self._lock = asyncio.Lock()
        self._hooks = HookRunner()

    @property
    def is_schema_loaded(self) -> bool:
        return self._schema is not None

    async def get_schema_info(self) -> SchemaInfo | None:
        """Return the cached schema, loading it on first use.

        Returns:
            The schema, or None if loading failed
        """
        if self._schema is not None:
            return self._schema

        async with self._lock:
            # Another caller may have finished loading while we waited
            if self._schema is not None:
                return self._schema
            await self._load()
            return self._schema

    async def refresh_schema(self) -> SchemaInfo | None:
        """Discard the cached schema, reload it and notify refresh hooks."""
        async with self._lock:
            self._schema = None
            await self._load()
            self._hooks.run(self._schema)
            return self._schema

    async def get_content_types(self) -> list[ContentTypeInfo]:
        schema = await self.get_schema_info()
        return schema.content_types if schema else []

    async def get_queryable_type_names(self) -> list[str]:
        schema = await self.get_schema_info()
        return schema.queryable_type_names if schema else []

    async def get_content_type(self, type_name: str) -> ContentTypeInfo | None:
        """Find a content type by name, ignoring case."""
        schema = await self.get_schema_info()
        return schema.get_content_type(type_name) if schema else None

    def add_refresh_hook(self, hook: RefreshSubscriber):
        self._hooks.add(hook)

    def remove_refresh_hook(self, hook: RefreshSubscriber):
        self._hooks.remove(hook)

    async def _load(self):
        logger.info("Loading GraphQL schema via introspection")

        try:
            response = await self._transport.execute(GraphQLRequest(query=INTROSPECTION_QUERY))
        except Exception:
            logger.exception("Schema introspection request failed")
            return

        if response.has_errors:
            logger.error("Schema introspection failed: %s", "; ".join(response.error_messages))
            return

        try:
            schema = self._parser.parse(response.data)
        except Exception:
            logger.exception("Failed to parse introspection result")
            return

        self._schema = schema
        logger.info("Loaded %d content types from schema", len(schema.content_types))
