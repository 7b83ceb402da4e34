"""Built-in scalar types and the filter operators each one supports.

Example usage:
    from optigraph.core.scalars import ScalarRegistry

    registry = ScalarRegistry()
    registry.is_scalar("DateTime")        # True
    registry.operators_for("Int")         # ["eq", "notEq", "gt", ...]

    # Teach the registry about a custom scalar
    registry.register("Money", ["eq", "gt", "gte", "lt", "lte"])
"""

BUILTIN_SCALARS = (
    "String", "Int", "Float", "Boolean", "ID",
    "DateTime", "Date", "Time", "DateTimeOffset",
    "Decimal", "Long", "Short", "Byte",
    "Uri", "Guid",
)

STRING_OPERATORS = ("eq", "notEq", "like", "startsWith", "endsWith", "in", "notIn", "exist")
NUMERIC_OPERATORS = ("eq", "notEq", "gt", "gte", "lt", "lte", "in", "notIn", "exist")
DATE_OPERATORS = ("eq", "notEq", "gt", "gte", "lt", "lte", "exist")
BOOLEAN_OPERATORS = ("eq", "exist")
DEFAULT_OPERATORS = ("eq", "exist")

NUMERIC_SCALARS = ("Int", "Float", "Decimal", "Long", "Short")
DATE_SCALARS = ("DateTime", "Date", "DateTimeOffset")


class ScalarRegistry:
    """Registry of scalar type names and their filter operators.

    Types without a registered operator list fall back to `eq` and `exist`.
    """

    def __init__(self):
        self._scalars: set[str] = set()
        self._operators: dict[str, tuple[str, ...]] = {}
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in scalars."""
        self._scalars.update(BUILTIN_SCALARS)
        self._operators["String"] = STRING_OPERATORS
        for name in NUMERIC_SCALARS:
            self._operators[name] = NUMERIC_OPERATORS
        for name in DATE_SCALARS:
            self._operators[name] = DATE_OPERATORS
        self._operators["Boolean"] = BOOLEAN_OPERATORS

    def register(self, scalar_name: str, operators: list[str] | tuple[str, ...] | None = None):
        """Register a scalar type, optionally with its operator list."""
        self._scalars.add(scalar_name)
        if operators is not None:
            self._operators[scalar_name] = tuple(operators)

    def is_scalar(self, type_name: str) -> bool:
        return type_name in self._scalars

    def operators_for(self, type_name: str) -> list[str]:
        """Return the filter operators available for a type."""
        return list(self._operators.get(type_name, DEFAULT_OPERATORS))
