"""Hook models.

Data classes for registered listeners, firing context, discovered hook
scripts and script header metadata.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Completion signal handed to asynchronous listeners: done(error=None)
DoneCallback = Callable[..., None]

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _signature(func: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def listener_is_async(func: Callable[..., Any]) -> bool:
    """Tell whether a listener wants a completion signal.

    Listeners declaring two or more positional parameters receive
    ``(context, done)`` and complete when they call ``done``. Anything
    else is synchronous. ``*args``, keyword-only parameters and ``**kwargs``
    are not counted.

    Args:
        func: Listener callable

    Returns:
        True if the listener is asynchronous
    """
    signature = _signature(func)
    if signature is None:
        return False

    positional = [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]
    return len(positional) >= 2


def listener_takes_context(func: Callable[..., Any]) -> bool:
    """Tell whether a synchronous listener accepts the context argument."""
    signature = _signature(func)
    if signature is None:
        return True

    return any(
        p.kind in _POSITIONAL_KINDS or p.kind == inspect.Parameter.VAR_POSITIONAL
        for p in signature.parameters.values()
    )


@dataclass(frozen=True)
class Listener:
    """A registered listener.

    Attributes:
        func: The callable subscribed to the event
        is_async: Whether ``func`` is called as ``func(context, done)``
        takes_context: Whether a synchronous ``func`` is given the context
    """

    func: Callable[..., Any]
    is_async: bool
    takes_context: bool = True

    @classmethod
    def from_callable(cls, func: Callable[..., Any], is_async: bool | None = None) -> Listener:
        """Build a Listener, inferring the shape when not given explicitly."""
        if is_async is None:
            is_async = listener_is_async(func)
        return cls(func=func, is_async=is_async, takes_context=listener_takes_context(func))

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)


@dataclass(frozen=True)
class HookContext:
    """Context passed to every listener of a firing.

    Attributes:
        event: Name of the event being fired
        root: Project root for project-level firings, None for global ones
        options: Extra values supplied by the caller of ``fire``

    Example:
        >>> ctx = HookContext(event="before_build", root="/work/app")
        >>> ctx.root
        '/work/app'
    """

    event: str
    root: str | Path | None = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HookScript:
    """A hook script found in an event's hook directory.

    Attributes:
        name: Script filename
        path: Absolute path to the script
        executable: Whether the current user may execute it
    """

    name: str
    path: Path
    executable: bool = True


@dataclass
class ScriptMetadata:
    """Metadata extracted from hook script comments.

    Example hook header:
        #!/bin/bash
        # DESCRIPTION: Bump the build number
        # AUTHOR: Jane Doe

    Attributes:
        description: Hook description
        author: Hook author
    """

    description: str | None = None
    author: str | None = None

    @classmethod
    def from_script(cls, script_path: Path) -> ScriptMetadata:
        """Parse metadata from hook script comments.

        Reading stops at the first line that is not a comment. Unreadable
        or binary scripts yield empty metadata.

        Args:
            script_path: Path to the hook script

        Returns:
            ScriptMetadata instance with extracted metadata
        """
        metadata = cls()

        try:
            with open(script_path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()

                    if not line.startswith("#"):
                        break

                    if line.startswith("#!"):
                        continue

                    if ":" in line:
                        key, _, value = line[1:].partition(":")
                        key = key.strip().lower()
                        value = value.strip()

                        if key == "description":
                            metadata.description = value
                        elif key == "author":
                            metadata.author = value

        except (OSError, UnicodeDecodeError):
            pass

        return metadata
