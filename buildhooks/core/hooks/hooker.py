"""Firing of lifecycle events.

A project-level firing runs the event's hook scripts, then its registered
listeners, with the project root in the context. A global firing runs only
the listeners.

Example:
    >>> from buildhooks.core.hooks import ProjectHooker, on
    >>>
    >>> def bump_version(context, done):
    ...     write_version(context.root)
    ...     done()
    >>>
    >>> on("before_build", bump_version)
    >>> hooker = ProjectHooker("/work/app/src")
    >>> hooker.fire("before_build", lambda err: print("failed" if err else "ok"))
    ok
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from buildhooks.core.project import find_project_root
from buildhooks.exceptions import HookError, ListenerError, NotAProjectError, wrap_exception
from buildhooks.utils.logging import get_logger

from .executor import CommandRunner, ScriptTask, run_command
from .invoker import FinalCallback, HookTask, ListenerTask, run_serially
from .locator import ScriptLocator
from .models import DoneCallback, HookContext
from .registry import ListenerRegistry, get_listener_registry

logger = get_logger(__name__)

ProjectFinder = Callable[[str | Path], Any]


def _log_task_start(task: HookTask) -> None:
    logger.debug("hook_task_started", task=repr(task))


def _fire_listeners(
    registry: ListenerRegistry,
    context: HookContext,
    callback: FinalCallback,
) -> None:
    """Run the listeners of ``context.event`` serially, then ``callback``."""
    listeners = registry.snapshot(context.event)

    def finished(error: Any) -> None:
        if error is not None:
            logger.error(
                "hook_fire_failed",
                hook_event=context.event,
                phase="listeners",
                error=str(error),
                error_type=type(error).__name__,
            )
        else:
            logger.info("hook_fire_completed", hook_event=context.event, listeners=len(listeners))
        callback(error)

    run_serially(
        [ListenerTask(listener) for listener in listeners],
        context,
        finished,
        on_each_start=_log_task_start,
    )


def _as_exception(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return ListenerError(f"Listener reported failure: {error!r}", error_value=error)


async def _await_firing(start: Callable[[FinalCallback], None]) -> None:
    """Run a callback-style firing and wait for it on the running loop."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def resolve(error: Any) -> None:
        if not future.done():
            future.set_result(error)

    def on_fired(error: Any) -> None:
        # Completion may arrive from a script runner thread
        loop.call_soon_threadsafe(resolve, error)

    start(on_fired)
    error = await future
    if error is not None:
        raise _as_exception(error)


class _ExecutorTask:
    """Runs a blocking task on the loop's default executor.

    ``done`` is marshalled back onto the loop, so the firing resumes on the
    loop thread while the event loop stays free during the task.
    """

    def __init__(self, task: HookTask, loop: asyncio.AbstractEventLoop):
        self.task = task
        self._loop = loop

    def invoke(self, context: HookContext, done: DoneCallback) -> None:
        def done_on_loop(error: Any = None, result: Any = None) -> None:
            self._loop.call_soon_threadsafe(done, error)

        def check_raised(future: asyncio.Future[None]) -> None:
            if future.cancelled() or future.exception() is None:
                return
            e = future.exception()
            done(
                wrap_exception(
                    e,
                    f"Task {self.task!r} raised {type(e).__name__}: {e}",
                    exception_class=HookError,
                )
            )

        future = self._loop.run_in_executor(None, self.task.invoke, context, done_on_loop)
        future.add_done_callback(check_raised)

    def __repr__(self) -> str:
        return repr(self.task)


class ProjectHooker:
    """Fires events for one project.

    Construction validates that ``directory`` belongs to a project; the
    instance is immutable afterwards and may fire any number of events.

    Attributes:
        root: Project root, as returned by the project finder
    """

    def __init__(
        self,
        directory: str | Path,
        *,
        project_finder: ProjectFinder = find_project_root,
        registry: ListenerRegistry | None = None,
        locator: ScriptLocator | None = None,
        runner: CommandRunner = run_command,
    ):
        """Initialize project hooker.

        Args:
            directory: Directory inside the project
            project_finder: Returns the project root for a directory, or a falsy value
            registry: Listener registry (default: the process-wide one)
            locator: Script locator (default: ScriptLocator())
            runner: Command runner used for hook scripts

        Raises:
            NotAProjectError: If ``directory`` is not inside a recognized project
        """
        root = project_finder(directory)
        if not root:
            raise NotAProjectError(directory)

        self._root = root
        self._registry = registry
        self.locator = locator or ScriptLocator()
        self.runner = runner

    @property
    def root(self) -> Any:
        return self._root

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry or get_listener_registry()

    def fire(
        self,
        event: str,
        callback: FinalCallback,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        """Fire ``event``: hook scripts first, then listeners.

        ``callback(error)`` is called exactly once, with None when every
        subscriber succeeded or with the first failure. A failing script
        skips the listener phase.

        Args:
            event: Event name
            callback: Completion callback
            options: Extra values exposed as ``context.options``
        """
        self._fire(event, callback, options)

    def _fire(
        self,
        event: str,
        callback: FinalCallback,
        options: Mapping[str, Any] | None,
        offload_to: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        context = HookContext(event=event, root=self.root, options=dict(options or {}))
        scripts = self.locator.scripts_for(self.root, event)

        logger.info(
            "hook_fire_started",
            hook_event=event,
            root=str(self.root),
            scripts=len(scripts),
        )

        def after_scripts(error: Any) -> None:
            if error is not None:
                logger.error(
                    "hook_fire_failed",
                    hook_event=event,
                    phase="scripts",
                    error=str(error),
                    error_type=type(error).__name__,
                )
                callback(error)
                return
            _fire_listeners(self.registry, context, callback)

        tasks: list[HookTask] = [ScriptTask(script, self.root, self.runner) for script in scripts]
        if offload_to is not None:
            tasks = [_ExecutorTask(task, offload_to) for task in tasks]

        run_serially(
            tasks,
            context,
            after_scripts,
            on_each_start=_log_task_start,
        )

    async def fire_async(self, event: str, options: Mapping[str, Any] | None = None) -> None:
        """Fire ``event`` and wait for it to finish.

        Hook scripts run on the loop's default executor, so other tasks keep
        running while a script does. The listener phase starts on the loop
        thread.

        Raises:
            HookScriptError: If a hook script exited non-zero
            ListenerError: If a listener failed with a non-exception value
        """
        loop = asyncio.get_running_loop()
        await _await_firing(lambda cb: self._fire(event, cb, options, offload_to=loop))

    def __repr__(self) -> str:
        return f"ProjectHooker(root={self.root!r})"


def fire(
    event: str,
    callback: FinalCallback,
    options: Mapping[str, Any] | None = None,
    *,
    registry: ListenerRegistry | None = None,
) -> None:
    """Fire ``event`` to registered listeners only, outside any project.

    Args:
        event: Event name
        callback: Completion callback, receives the first error or None
        options: Extra values exposed as ``context.options``
        registry: Listener registry (default: the process-wide one)
    """
    context = HookContext(event=event, options=dict(options or {}))
    logger.info("hook_fire_started", hook_event=event, root=None, scripts=0)
    _fire_listeners(registry or get_listener_registry(), context, callback)


async def fire_async(
    event: str,
    options: Mapping[str, Any] | None = None,
    *,
    registry: ListenerRegistry | None = None,
) -> None:
    """Fire ``event`` to listeners only and wait for it to finish."""
    await _await_firing(lambda cb: fire(event, cb, options, registry=registry))
