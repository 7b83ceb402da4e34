"""Wire models for GraphQL requests and responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GraphQLRequest(_WireModel):
    """A GraphQL request body: query text plus optional variables."""

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = None

    def to_json(self) -> str:
        """Serialize to the compact JSON body sent (and signed) on the wire."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class GraphQLErrorLocation(_WireModel):
    line: int
    column: int


class GraphQLErrorInfo(_WireModel):
    """A single entry of a GraphQL `errors` array."""

    message: str = ""
    locations: list[GraphQLErrorLocation] | None = None
    path: list[Any] | None = None
    extensions: dict[str, Any] | None = None


class GraphQLResponse(_WireModel, Generic[DataT]):
    """A GraphQL response envelope.

    Examples:
        raw = GraphQLResponse[Any].model_validate({"data": {"a": 1}})
        raw.has_errors  # False
    """

    data: DataT | None = None
    errors: list[GraphQLErrorInfo] | None = None
    extensions: dict[str, Any] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors or []]

    @classmethod
    def from_error(cls, message: str) -> "GraphQLResponse[DataT]":
        """Build a synthetic response carrying a single error message."""
        return cls(errors=[GraphQLErrorInfo(message=message)])


@dataclass
class LastRequestInfo:
    """Diagnostic snapshot of one HTTP round trip."""
    url: str = ""
    method: str = ""
    request_headers: dict[str, str] = field(default_factory=dict)
    request_body: str = ""
    status_code: int = 0
    response_headers: dict[str, str] = field(default_factory=dict)
    response_body: str = ""
    duration: timedelta = field(default_factory=timedelta)
