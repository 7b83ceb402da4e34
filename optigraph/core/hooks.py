"""Schema refresh hooks.

Subscribers are notified after an explicit schema refresh, never after the
initial lazy load.

Example usage:
    from optigraph.core.hooks import RefreshHook

    class ClearFieldPicker(RefreshHook):
        def on_schema_refreshed(self, schema):
            picker.reset(schema.content_types if schema else [])

    cache.add_refresh_hook(ClearFieldPicker())
    cache.add_refresh_hook(lambda schema: print("schema refreshed"))
"""

from typing import Callable, Protocol, Union, runtime_checkable

from .ir import SchemaInfo


@runtime_checkable
class RefreshHook(Protocol):
    """Protocol for schema refresh subscribers."""

    def on_schema_refreshed(self, schema: SchemaInfo | None) -> None:
        """Called after a refresh.

        Args:
            schema: The newly loaded schema, or None if the reload failed
        """
        ...


RefreshSubscriber = Union[RefreshHook, Callable[[SchemaInfo | None], None]]


class HookRunner:
    """Runs refresh subscribers in registration order."""

    def __init__(self):
        self.hooks: list[RefreshSubscriber] = []

    def add(self, hook: RefreshSubscriber):
        self.hooks.append(hook)

    def remove(self, hook: RefreshSubscriber):
        self.hooks.remove(hook)

    def run(self, schema: SchemaInfo | None):
        """Notify every subscriber."""
        for hook in list(self.hooks):
            if isinstance(hook, RefreshHook):
                hook.on_schema_refreshed(schema)
            else:
                hook(schema)
