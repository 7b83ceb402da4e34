"""Bounded history of executed queries, newest first."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class QueryHistoryItem:
    query: str
    response: str
    success: bool
    executed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def short_query(self) -> str:
        return self.query[:100] + "..." if len(self.query) > 100 else self.query

    def time_ago(self, now: datetime | None = None) -> str:
        """Describe the execution time relative to `now`, e.g. `5m ago`."""
        now = now or datetime.now(timezone.utc)
        seconds = (now - self.executed_at).total_seconds()
        if seconds < 60:
            return "just now"
        if seconds < 3600:
            return f"{int(seconds // 60)}m ago"
        if seconds < 86400:
            return f"{int(seconds // 3600)}h ago"
        return f"{int(seconds // 86400)}d ago"


class QueryHistory:
    """Keeps the most recent `max_items` executions."""

    def __init__(self, max_items: int = 50):
        self.max_items = max_items
        self._items: list[QueryHistoryItem] = []

    @property
    def items(self) -> list[QueryHistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, query: str, response: str, success: bool) -> QueryHistoryItem:
        item = QueryHistoryItem(query=query, response=response, success=success)
        self._items = [item] + self._items[: max(self.max_items - 1, 0)]
        return item

    def clear(self):
        self._items = []
