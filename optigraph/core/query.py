"""Structured query definitions.

A QueryDefinition is what an editor UI produces; QueryBuilder turns it
into GraphQL text. Definitions load from camelCase or snake_case JSON:

    definition = QueryDefinition.model_validate({
        "contentType": "ArticlePage",
        "filters": [{"field": "Name", "operator": "startsWith", "value": "Intro"}],
        "pagination": {"limit": 5},
    })
"""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FilterOperator(str, Enum):
    """Filter operators supported by the content graph."""
    EQ = "eq"
    NOT_EQ = "notEq"
    LIKE = "like"  # Wildcard match, e.g. *text*
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    EXIST = "exist"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IN = "in"
    NOT_IN = "notIn"
    BOOST = "boost"
    SYNONYMS = "synonyms"


class FilterLogic(str, Enum):
    """How a filter combines with the others."""
    AND = "and"
    OR = "or"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FacetOrderBy(str, Enum):
    COUNT = "count"
    VALUE = "value"


class _DefinitionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FilterDefinition(_DefinitionModel):
    """A single condition of the where clause. An empty field is ignored."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    field: str = ""
    operator: FilterOperator = FilterOperator.EQ
    value: str = ""
    values: list[str] = Field(default_factory=list)  # For in / notIn
    logic: FilterLogic = FilterLogic.AND


class SortDefinition(_DefinitionModel):
    field: str = ""
    direction: SortDirection = SortDirection.ASC
    order: int = 0


class PaginationDefinition(_DefinitionModel):
    skip: int | None = None
    limit: int | None = 10
    cursor: str | None = None
    use_cursor_pagination: bool = False


class FacetDefinition(_DefinitionModel):
    """An aggregation over distinct field values.

    Only `field` shapes the generated query; `limit` and `order_by` are
    carried for the editor.
    """

    field: str = ""
    limit: int | None = None
    order_by: FacetOrderBy = FacetOrderBy.COUNT


class QueryDefinition(_DefinitionModel):
    """Structured representation of a content query."""

    content_type: str = ""
    selected_fields: list[str] = Field(default_factory=list)
    filters: list[FilterDefinition] = Field(default_factory=list)
    sorts: list[SortDefinition] = Field(default_factory=list)
    pagination: PaginationDefinition = Field(default_factory=PaginationDefinition)
    locale: str | None = None
    search_term: str | None = None
    facets: list[FacetDefinition] = Field(default_factory=list)
    include_total: bool = True

    def clone(self) -> "QueryDefinition":
        """Return a deep copy that can be edited independently."""
        return self.model_copy(deep=True)
