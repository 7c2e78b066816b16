"""Listener registry.

Maps event names to the ordered listeners subscribed to them. A process-wide
default registry backs the module-level ``on``/``off`` functions used by the
build tool and its plugins.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from buildhooks.utils.logging import get_logger

from .models import Listener

logger = get_logger(__name__)


class ListenerRegistry:
    """Ordered event -> listeners mapping.

    Listeners keep their registration order; the same callable may be
    registered more than once. The registry is the single shared mutation
    point of the hook system: firings work on a ``snapshot`` so that
    ``on``/``off`` calls made while a firing is in flight only affect later
    firings.

    Example:
        >>> registry = ListenerRegistry()
        >>> registry.on("before_build", lambda ctx: print(ctx.root))
        >>> len(registry.listeners_for("before_build"))
        1
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    def on(
        self,
        event: str,
        func: Callable[..., Any],
        *,
        is_async: bool | None = None,
    ) -> Listener:
        """Subscribe ``func`` to ``event``.

        Args:
            event: Event name (any string)
            func: Listener callable
            is_async: Force the listener shape; inferred from the signature if None

        Returns:
            The registered Listener record
        """
        listener = Listener.from_callable(func, is_async=is_async)

        with self._lock:
            self._listeners.setdefault(event, []).append(listener)

        logger.debug(
            "listener_registered",
            hook_event=event,
            listener=listener.name,
            is_async=listener.is_async,
        )
        return listener

    def off(self, event: str, func: Callable[..., Any]) -> bool:
        """Unsubscribe ``func`` from ``event``.

        Only the first registered occurrence is removed when the same
        callable was registered several times. Callables are compared with
        ``==``: plain functions match only themselves, and a bound method
        matches a fresh ``obj.method`` of the same object.

        Args:
            event: Event name
            func: The callable passed to ``on``

        Returns:
            True if a listener was removed, False if none matched
        """
        with self._lock:
            listeners = self._listeners.get(event)
            if not listeners:
                return False

            for i, listener in enumerate(listeners):
                if listener.func == func:
                    listeners.pop(i)
                    break
            else:
                return False

            if not listeners:
                del self._listeners[event]

        logger.debug("listener_removed", hook_event=event, listener=listener.name)
        return True

    def listeners_for(self, event: str) -> list[Listener]:
        """Get the listeners currently subscribed to ``event``, in order."""
        return list(self._listeners.get(event, ()))

    def snapshot(self, event: str) -> tuple[Listener, ...]:
        """Immutable copy of the listeners for ``event``, taken at firing time."""
        with self._lock:
            return tuple(self._listeners.get(event, ()))

    def events(self) -> list[str]:
        """Names of the events that have at least one listener."""
        return sorted(self._listeners)

    def clear(self, event: str | None = None) -> None:
        """Remove every listener, or only those of ``event``."""
        with self._lock:
            if event is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event, None)


# Global registry instance
_registry: ListenerRegistry | None = None


def get_listener_registry() -> ListenerRegistry:
    """Get the process-wide listener registry.

    Returns:
        ListenerRegistry singleton instance
    """
    global _registry
    if _registry is None:
        _registry = ListenerRegistry()
    return _registry


def reset_listener_registry() -> None:
    """Discard the process-wide registry; the next access creates an empty one."""
    global _registry
    _registry = None


def on(event: str, func: Callable[..., Any], *, is_async: bool | None = None) -> Listener:
    """Subscribe ``func`` to ``event`` on the process-wide registry."""
    return get_listener_registry().on(event, func, is_async=is_async)


def off(event: str, func: Callable[..., Any]) -> bool:
    """Unsubscribe ``func`` from ``event`` on the process-wide registry."""
    return get_listener_registry().off(event, func)


def listeners_for(event: str) -> list[Listener]:
    """Listeners subscribed to ``event`` on the process-wide registry."""
    return get_listener_registry().listeners_for(event)
