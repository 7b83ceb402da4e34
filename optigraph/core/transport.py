"""Authenticated GraphQL transport.

Sends GraphQL POSTs to the configured endpoint, applies authentication and
records diagnostics for every call. HTTP and connection failures come back
as error responses instead of exceptions.
"""

import logging
import time
from datetime import timedelta
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter

from .auth import Auth, auth_from_settings
from .models import GraphQLRequest, GraphQLResponse, LastRequestInfo
from .settings import GraphSettings, SettingsProvider, StaticSettingsProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONNECTION_PROBE_QUERY = "{ __schema { queryType { name } } }"


class GraphQLTransport:
    """Executes GraphQL requests against a content graph endpoint.

    Settings are read on every call, so changes made through the settings
    provider apply to the next request.

    Examples:
        async with GraphQLTransport(GraphSettings(single_key="abc")) as transport:
            response = await transport.execute(GraphQLRequest(query="{ Content { total } }"))
            if response.has_errors:
                print(response.error_messages)
            print(transport.last_request.status_code)

        # Custom auth
        transport = GraphQLTransport(settings, auth=MyCustomAuth())
    """

    def __init__(
        self,
        settings: SettingsProvider | GraphSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        auth: Auth | None = None,
    ):
        """Initialize the transport.

        Args:
            settings: Settings, or a provider handing out the current settings
            client: Optional HTTP client to use (the caller keeps ownership)
            auth: Authentication handler overriding the one derived from settings
        """
        if settings is None or isinstance(settings, GraphSettings):
            settings = StaticSettingsProvider(settings)
        self._settings = settings
        self._auth = auth
        self._client = client
        self._owns_client = client is None
        self.last_request: LastRequestInfo | None = None

    async def __aenter__(self) -> "GraphQLTransport":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def _get_client(self, settings: GraphSettings) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.timeout)
            self._owns_client = True
        return self._client

    async def close(self):
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def execute(self, request: GraphQLRequest) -> GraphQLResponse[Any]:
        """Execute a GraphQL request and return the raw response.

        Args:
            request: Query text and variables

        Returns:
            The parsed response. Non-2xx statuses and connection failures
            produce a response with a single synthetic error.
        """
        settings = self._settings.get_settings()
        body = request.to_json()
        auth = self._auth or auth_from_settings(settings)

        headers = {"Content-Type": "application/json"}
        headers.update(auth.get_headers(body, settings.endpoint))

        info = LastRequestInfo(
            url=settings.endpoint,
            method="POST",
            request_headers=dict(headers),
            request_body=body,
        )
        self.last_request = info

        client = self._get_client(settings)
        logger.debug("POST %s", settings.endpoint)
        started = time.perf_counter()
        try:
            response = await client.post(
                settings.endpoint,
                content=body.encode("utf-8"),
                headers=headers,
                timeout=settings.timeout,
            )
        except httpx.TransportError as e:
            info.duration = timedelta(seconds=time.perf_counter() - started)
            logger.error("Failed to execute GraphQL request: %s", e, exc_info=True)
            return GraphQLResponse[Any].from_error(f"Connection error: {e}")

        info.duration = timedelta(seconds=time.perf_counter() - started)
        info.status_code = response.status_code
        info.response_headers = dict(response.headers.items())
        info.response_body = response.text

        if not response.is_success:
            logger.warning(
                "GraphQL request failed with status %d: %s",
                response.status_code,
                response.text,
            )
            return GraphQLResponse[Any].from_error(
                f"HTTP {response.status_code}: {response.reason_phrase}"
            )

        if not response.content.strip():
            return GraphQLResponse[Any]()
        payload = response.json()
        if payload is None:
            return GraphQLResponse[Any]()
        return GraphQLResponse[Any].model_validate(payload)

    async def execute_typed(self, request: GraphQLRequest, data_type: type[T]) -> GraphQLResponse[T]:
        """Execute a request and validate its `data` payload into `data_type`.

        Errors and extensions are passed through unchanged.
        """
        response = await self.execute(request)

        data = None
        if response.data is not None:
            data = TypeAdapter(data_type).validate_python(response.data)

        return GraphQLResponse[data_type](
            data=data,
            errors=response.errors,
            extensions=response.extensions,
        )

    async def test_connection(self) -> tuple[bool, str]:
        """Probe the endpoint with a minimal introspection query.

        Returns:
            (success, message)
        """
        try:
            response = await self.execute(GraphQLRequest(query=CONNECTION_PROBE_QUERY))
        except Exception as e:
            logger.error("Connection test failed", exc_info=True)
            return False, f"Connection failed: {e}"

        if response.has_errors:
            return False, f"Connection failed: {'; '.join(response.error_messages)}"
        return True, "Connection successful!"
