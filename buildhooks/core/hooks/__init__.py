"""Hook system for buildhooks.

Fires named lifecycle events to two kinds of subscribers, one at a time and
in a fixed order, stopping at the first failure:

    - Hook scripts: executables in <project-root>/.buildhooks/hooks/<event>/,
      run in filename order with the project root as their only argument
    - Listeners: callables registered with ``on(event, func)``, run in
      registration order after the scripts

Architecture:
    - Models: Listener, HookContext, HookScript, ScriptMetadata
    - Registry: process-wide event -> listeners mapping (on/off)
    - Locator: finds an event's hook scripts inside a project
    - Executor: runs hook scripts through the shell
    - Invoker: serial, fail-fast task runner shared by scripts and listeners
    - Hooker: ProjectHooker.fire (scripts + listeners) and global fire

Example hook script (.buildhooks/hooks/before_build/10-version.sh):
    #!/bin/bash
    # DESCRIPTION: Stamp the build number
    echo "$(date +%s)" > "$1/BUILD_NUMBER"

Usage:
    >>> from buildhooks.core.hooks import ProjectHooker, on
    >>>
    >>> def notify(context):                # synchronous listener
    ...     print("building", context.root)
    >>>
    >>> def upload(context, done):          # asynchronous listener
    ...     start_upload(context.root, on_finish=done)
    >>>
    >>> on("after_build", notify)
    >>> on("after_build", upload)
    >>> ProjectHooker(".").fire("after_build", callback)
"""

from __future__ import annotations

__all__ = [
    # Models
    "HookContext",
    "HookScript",
    "Listener",
    "ScriptMetadata",
    "listener_is_async",
    "listener_takes_context",
    # Registry
    "ListenerRegistry",
    "get_listener_registry",
    "reset_listener_registry",
    "on",
    "off",
    "listeners_for",
    # Locator
    "ScriptLocator",
    # Executor
    "ScriptTask",
    "build_command",
    "run_command",
    "run_command_in_thread",
    # Invoker
    "ListenerTask",
    "run_serially",
    # Hooker
    "ProjectHooker",
    "fire",
    "fire_async",
]

from .executor import ScriptTask, build_command, run_command, run_command_in_thread
from .hooker import ProjectHooker, fire, fire_async
from .invoker import ListenerTask, run_serially
from .locator import ScriptLocator
from .models import (
    HookContext,
    HookScript,
    Listener,
    ScriptMetadata,
    listener_is_async,
    listener_takes_context,
)
from .registry import (
    ListenerRegistry,
    get_listener_registry,
    listeners_for,
    off,
    on,
    reset_listener_registry,
)
