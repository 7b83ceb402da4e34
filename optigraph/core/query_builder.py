"""Query builder for content graph queries.

Constructs GraphQL query strings from QueryDefinition objects, and offers a
lightweight formatter and brace/string validator for hand-edited queries.
"""

import re

from graphql import GraphQLSyntaxError, parse

from .query import FilterDefinition, FilterLogic, FilterOperator, QueryDefinition, SortDefinition, SortDirection

PLACEHOLDER_QUERY = "{\n  # Select a content type to begin\n}"

DEFAULT_ITEM_FIELDS = ("_metadata {", "  key", "  displayName", "  types", "}")

OPERATOR_NAMES = {
    FilterOperator.EQ: "eq",
    FilterOperator.NOT_EQ: "notEq",
    FilterOperator.LIKE: "like",
    FilterOperator.GT: "gt",
    FilterOperator.GTE: "gte",
    FilterOperator.LT: "lt",
    FilterOperator.LTE: "lte",
    FilterOperator.EXIST: "exist",
    FilterOperator.STARTS_WITH: "startsWith",
    FilterOperator.ENDS_WITH: "endsWith",
    FilterOperator.IN: "in",
    FilterOperator.NOT_IN: "notIn",
    FilterOperator.BOOST: "boost",
    FilterOperator.SYNONYMS: "synonyms",
}

_MULTI_VALUE_OPERATORS = (FilterOperator.IN, FilterOperator.NOT_IN)
_RANGE_OPERATORS = (FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE)


def operator_name(operator) -> str:
    """Return the GraphQL literal for an operator; unknown operators map to `eq`."""
    return OPERATOR_NAMES.get(operator, "eq")


def escape_string(value: str) -> str:
    """Escape a value for use inside a GraphQL string literal."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def quote(value: str) -> str:
    return f'"{escape_string(value)}"'


# GraphQL IntValue / FloatValue, ASCII digits only
_NUMBER_RE = re.compile(r"-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?")


def _is_number(value: str) -> bool:
    return _NUMBER_RE.fullmatch(value) is not None


class _LiteralTracker:
    """Tracks whether a left-to-right scan is inside a string literal.

    A quote preceded by an unescaped backslash does not close the literal.
    """

    def __init__(self):
        self.in_string = False
        self._escaped = False

    def feed(self, char: str) -> bool:
        """Consume one character; return True if it belongs to a string literal."""
        if self.in_string:
            if self._escaped:
                self._escaped = False
            elif char == "\\":
                self._escaped = True
            elif char == '"':
                self.in_string = False
            return True
        if char == '"':
            self.in_string = True
            return True
        return False


class QueryBuilder:
    """Builds, formats and validates content graph query text.

    The builder holds no state and is safe to share.

    Example:
        builder = QueryBuilder()
        text = builder.build(QueryDefinition(content_type="ArticlePage"))
        ok, errors = builder.validate(text)
    """

    indent = "  "

    def build(self, definition: QueryDefinition) -> str:
        """Build a GraphQL query string from a definition.

        Returns:
            The query text, or a placeholder comment query when no content
            type is set
        """
        if not definition.content_type or not definition.content_type.strip():
            return PLACEHOLDER_QUERY

        i1, i2, i3 = self.indent, self.indent * 2, self.indent * 3
        lines = ["{"]

        args = self._build_arguments(definition)
        args_str = f"({', '.join(args)})" if args else ""
        lines.append(f"{i1}{definition.content_type}{args_str} {{")

        if definition.include_total:
            lines.append(f"{i2}total")
        if definition.pagination.use_cursor_pagination:
            lines.append(f"{i2}cursor")

        lines.append(f"{i2}items {{")
        item_fields = definition.selected_fields or DEFAULT_ITEM_FIELDS
        for item_field in item_fields:
            lines.append(f"{i3}{item_field}")
        lines.append(f"{i2}}}")

        for facet in definition.facets:
            lines.append(f"{i2}{facet.field}Facet {{")
            lines.append(f"{i3}name")
            lines.append(f"{i3}count")
            lines.append(f"{i2}}}")

        lines.append(f"{i1}}}")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _build_arguments(self, definition: QueryDefinition) -> list[str]:
        """Build the argument list in locale, where, searchTerm, orderBy, skip, limit, cursor order."""
        args = []
        pagination = definition.pagination

        if definition.locale:
            args.append(f"locale: [{definition.locale}]")

        filters = [f for f in definition.filters if f.field and f.field.strip()]
        if filters:
            args.append(f"where: {self._build_where_clause(filters)}")

        if definition.search_term:
            args.append(f"searchTerm: {quote(definition.search_term)}")

        sorts = [s for s in definition.sorts if s.field and s.field.strip()]
        if sorts:
            args.append(f"orderBy: {self._build_order_by_clause(sorts)}")

        if pagination.skip is not None and pagination.skip > 0:
            args.append(f"skip: {pagination.skip}")
        if pagination.limit is not None:
            args.append(f"limit: {pagination.limit}")
        if pagination.cursor:
            args.append(f"cursor: {quote(pagination.cursor)}")

        return args

    def _build_where_clause(self, filters: list[FilterDefinition]) -> str:
        if not filters:
            return "{}"

        and_filters = [f for f in filters if f.logic != FilterLogic.OR]
        or_filters = [f for f in filters if f.logic == FilterLogic.OR]

        conditions = [self._build_filter_condition(f) for f in and_filters]
        if or_filters:
            or_conditions = " }, { ".join(self._build_filter_condition(f) for f in or_filters)
            conditions.append(f"_or: [{{ {or_conditions} }}]")

        return "{ " + ", ".join(conditions) + " }"

    def _build_filter_condition(self, filter_def: FilterDefinition) -> str:
        return f"{filter_def.field}: {{ {operator_name(filter_def.operator)}: {self._format_filter_value(filter_def)} }}"

    def _format_filter_value(self, filter_def: FilterDefinition) -> str:
        operator = filter_def.operator
        value = filter_def.value or ""

        if operator in _MULTI_VALUE_OPERATORS:
            values = filter_def.values or [value]
            return "[" + ", ".join(quote(v) for v in values) + "]"

        if operator == FilterOperator.EXIST:
            return "true" if value.lower() == "true" else "false"

        # Boost weights are passed through untouched
        if operator == FilterOperator.BOOST:
            return value

        if operator in _RANGE_OPERATORS and _is_number(value):
            return value

        return quote(value)

    def _build_order_by_clause(self, sorts: list[SortDefinition]) -> str:
        ordered = sorted(sorts, key=lambda s: s.order)
        fields = ", ".join(f"{s.field}: {SortDirection(s.direction).value.upper()}" for s in ordered)
        return "{ " + fields + " }"

    def format(self, query: str) -> str:
        """Re-indent query text, two spaces per brace level.

        Raw newlines are dropped and runs of spaces collapse to one; string
        literals are copied untouched.
        """
        out: list[str] = []
        depth = 0
        last = ""
        tracker = _LiteralTracker()

        for char in query:
            if tracker.feed(char):
                out.append(char)
            elif char == "{":
                depth += 1
                out.append("{\n" + self.indent * depth)
            elif char == "}":
                depth = max(0, depth - 1)
                out.append("\n" + self.indent * depth + "}")
            elif char in "\r\n":
                pass
            elif char == " " and last == " ":
                pass
            else:
                out.append(char)
            last = char

        return "".join(out).strip()

    def validate(self, query: str, strict: bool = False) -> tuple[bool, list[str]]:
        """Check brace balance and string termination.

        Square brackets are not checked. With `strict`, a query that passes
        the structural checks is also run through the GraphQL parser.

        Returns:
            (is_valid, error messages)
        """
        if not query or not query.strip():
            return False, ["Query cannot be empty"]

        depth = 0
        tracker = _LiteralTracker()
        for char in query:
            if tracker.feed(char):
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    return False, ["Unexpected closing brace '}'"]

        if depth != 0:
            return False, [f"Mismatched braces: {abs(depth)} unclosed"]

        if tracker.in_string:
            return False, ["Unterminated string"]

        if strict:
            try:
                parse(query)
            except GraphQLSyntaxError as e:
                return False, [e.message]

        return True, []


_default_builder = QueryBuilder()


def build_query(definition: QueryDefinition) -> str:
    return _default_builder.build(definition)


def format_query(query: str) -> str:
    return _default_builder.format(query)


def validate_query(query: str, strict: bool = False) -> tuple[bool, list[str]]:
    return _default_builder.validate(query, strict=strict)
