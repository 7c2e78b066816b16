"""Serial invocation of hook tasks.

A task is anything with an ``invoke(context, done)`` method that calls
``done(error=None, result=None)`` exactly once, either before returning or
later (from a timer, another thread, a finished process). Tasks run strictly
one at a time in the given order; the first error stops the run and is
handed to the final callback unchanged.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from buildhooks.exceptions import HookError, ListenerError, wrap_exception
from buildhooks.utils.logging import get_logger

from .models import DoneCallback, HookContext, Listener

logger = get_logger(__name__)

FinalCallback = Callable[[Any], None]


class HookTask(Protocol):
    """Unit of work run by ``run_serially``."""

    def invoke(self, context: HookContext, done: DoneCallback) -> None: ...


class ListenerTask:
    """Serial-invoker task that calls one registered listener.

    Synchronous listeners are called with the context and complete as soon
    as they return; their return value is ignored. Asynchronous listeners
    get ``(context, done)`` and complete when they call ``done``.
    """

    def __init__(self, listener: Listener):
        self.listener = listener

    @property
    def name(self) -> str:
        return self.listener.name

    def invoke(self, context: HookContext, done: DoneCallback) -> None:
        try:
            if self.listener.is_async:
                self.listener.func(context, done)
                return
            if self.listener.takes_context:
                self.listener.func(context)
            else:
                self.listener.func()
        except Exception as e:
            logger.error(
                "listener_raised",
                hook_event=context.event,
                listener=self.name,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            done(
                wrap_exception(
                    e,
                    f"Listener '{self.name}' raised {type(e).__name__}: {e}",
                    exception_class=ListenerError,
                    listener=self.name,
                )
            )
            return
        done()

    def __repr__(self) -> str:
        return f"ListenerTask({self.name!r})"


class _Step:
    """Completion state of the task currently being run."""

    __slots__ = ("task", "lock", "in_invoke", "called", "error")

    def __init__(self, task: HookTask):
        self.task = task
        self.lock = threading.Lock()
        self.in_invoke = True
        self.called = False
        self.error: Any = None


class _SerialRun:
    """Cursor over a task list, advanced by completion signals."""

    def __init__(
        self,
        tasks: list[HookTask],
        context: HookContext,
        callback: FinalCallback,
        on_each_start: Callable[[HookTask], None] | None,
    ):
        self._tasks = tasks
        self._context = context
        self._callback = callback
        self._on_each_start = on_each_start
        self._index = 0
        self._finished = False

    def advance(self) -> None:
        # Tasks that complete before invoke() returns are driven by this loop;
        # only a task that completes later resumes the run from its done().
        while True:
            if self._index >= len(self._tasks):
                self._finish(None)
                return

            task = self._tasks[self._index]
            step = _Step(task)

            if self._on_each_start is not None:
                self._on_each_start(task)

            try:
                task.invoke(self._context, self._make_done(step))
            except Exception as e:
                self._make_done(step)(
                    wrap_exception(
                        e,
                        f"Task {task!r} raised {type(e).__name__}: {e}",
                        exception_class=HookError,
                    )
                )

            with step.lock:
                step.in_invoke = False
                completed = step.called

            if not completed:
                return

            if step.error is not None:
                self._finish(step.error)
                return

            self._index += 1

    def _make_done(self, step: _Step) -> DoneCallback:
        def done(error: Any = None, result: Any = None) -> None:
            with step.lock:
                if step.called:
                    logger.warning("hook_task_done_called_twice", task=repr(step.task))
                    return
                step.called = True
                step.error = error
                synchronous = step.in_invoke

            if synchronous:
                return

            if error is not None:
                self._finish(error)
                return

            self._index += 1
            self.advance()

        return done

    def _finish(self, error: Any) -> None:
        if self._finished:
            return
        self._finished = True
        self._callback(error)


def run_serially(
    tasks: Iterable[HookTask],
    context: HookContext,
    callback: FinalCallback,
    on_each_start: Callable[[HookTask], None] | None = None,
) -> None:
    """Run ``tasks`` one after another.

    Task N+1 starts only after task N has called ``done`` without an error.
    ``callback(None)`` is called once every task has succeeded (immediately
    for an empty sequence); ``callback(error)`` is called with the first
    error reported, and no later task runs. An exception raised by a task's
    ``invoke`` counts as that task's error.

    Returns as soon as the run is finished or waiting on a task that has
    not completed yet.

    Args:
        tasks: Ordered tasks
        context: Context handed to every task
        callback: Final callback, receives the error or None
        on_each_start: Called with each task right before it is invoked
    """
    _SerialRun(list(tasks), context, callback, on_each_start).advance()
