"""Unit tests for the serial invoker."""

import threading

import pytest

from buildhooks.core.hooks.invoker import ListenerTask, run_serially
from buildhooks.core.hooks.models import HookContext, Listener
from buildhooks.exceptions import HookError, ListenerError


class FakeTask:
    """Task that records its start and completes as configured.

    mode: "sync" calls done before returning, "deferred" keeps done for later.
    """

    def __init__(self, name, log, mode="sync", error=None):
        self.name = name
        self.log = log
        self.mode = mode
        self.error = error
        self.done = None

    def invoke(self, context, done):
        self.log.append(self.name)
        if self.mode == "sync":
            done(self.error)
        else:
            self.done = done

    def __repr__(self):
        return f"FakeTask({self.name!r})"


class Outcome:
    """Final callback that records every call."""

    def __init__(self):
        self.calls = []
        self.finished = threading.Event()

    def __call__(self, error):
        self.calls.append(error)
        self.finished.set()


@pytest.fixture
def context():
    return HookContext(event="before_build", root="/work/app")


def test_empty_sequence_succeeds_immediately(context):
    """No tasks means the callback gets no error right away."""
    outcome = Outcome()

    run_serially([], context, outcome)

    assert outcome.calls == [None]


def test_tasks_run_in_order(context):
    """Tasks run in exactly the given order."""
    log = []
    outcome = Outcome()

    run_serially([FakeTask(n, log) for n in ("a", "b", "c")], context, outcome)

    assert log == ["a", "b", "c"]
    assert outcome.calls == [None]


def test_next_task_waits_for_done(context):
    """Task N+1 does not start before task N calls done."""
    log = []
    outcome = Outcome()
    first = FakeTask("first", log, mode="deferred")
    second = FakeTask("second", log, mode="deferred")

    run_serially([first, second], context, outcome)

    assert log == ["first"]
    assert outcome.calls == []

    first.done()
    assert log == ["first", "second"]
    assert outcome.calls == []

    second.done()
    assert outcome.calls == [None]


def test_first_error_stops_the_run(context):
    """The first error is reported verbatim and later tasks never run."""
    log = []
    outcome = Outcome()
    failure = RuntimeError("boom")

    run_serially(
        [FakeTask("a", log), FakeTask("b", log, error=failure), FakeTask("c", log)],
        context,
        outcome,
    )

    assert log == ["a", "b"]
    assert outcome.calls == [failure]
    assert outcome.calls[0] is failure


def test_deferred_error_stops_the_run(context):
    """An error signalled later also stops the run."""
    log = []
    outcome = Outcome()
    first = FakeTask("first", log, mode="deferred")

    run_serially([first, FakeTask("second", log)], context, outcome)
    first.done("bad things")

    assert log == ["first"]
    assert outcome.calls == ["bad things"]


def test_exception_from_invoke_is_reported(context):
    """An exception escaping invoke() fails the run with a HookError."""

    class Exploding:
        def invoke(self, context, done):
            raise ValueError("kaput")

    log = []
    outcome = Outcome()

    run_serially([Exploding(), FakeTask("after", log)], context, outcome)

    (error,) = outcome.calls
    assert isinstance(error, HookError)
    assert isinstance(error.original_error, ValueError)
    assert log == []


def test_done_called_twice_is_ignored(context):
    """A second done() call does not advance the run again."""
    log = []
    outcome = Outcome()
    first = FakeTask("first", log, mode="deferred")
    second = FakeTask("second", log, mode="deferred")

    run_serially([first, second], context, outcome)
    first.done()
    first.done()

    assert log == ["first", "second"]

    second.done()
    second.done("late error")
    assert outcome.calls == [None]


def test_on_each_start_sees_every_task(context):
    """on_each_start is called with each task before it runs."""
    log = []
    started = []
    tasks = [FakeTask(n, log) for n in ("a", "b")]

    run_serially(tasks, context, Outcome(), on_each_start=started.append)

    assert started == tasks


def test_context_is_shared(context):
    """Every task receives the same context object."""
    seen = []

    class Capture:
        def invoke(self, ctx, done):
            seen.append(ctx)
            done()

    run_serially([Capture(), Capture()], context, Outcome())

    assert seen == [context, context]
    assert seen[0] is seen[1]


def test_long_synchronous_chain_does_not_recurse(context):
    """Thousands of synchronous tasks complete without hitting the recursion limit."""
    log = []
    outcome = Outcome()

    run_serially([FakeTask(i, log) for i in range(5000)], context, outcome)

    assert len(log) == 5000
    assert outcome.calls == [None]


def test_completion_from_another_thread(context):
    """A task completing on a timer thread resumes the run there."""
    log = []
    outcome = Outcome()

    class TimerTask:
        def invoke(self, ctx, done):
            log.append("timer")
            threading.Timer(0.02, done).start()

    run_serially([TimerTask(), FakeTask("after", log)], context, outcome)

    assert log == ["timer"]
    assert outcome.finished.wait(timeout=5)
    assert log == ["timer", "after"]
    assert outcome.calls == [None]


class TestListenerTask:
    """Adaptation of registered listeners to the task contract."""

    def test_sync_listener_completes_on_return(self, context):
        received = []

        def listener(ctx):
            received.append(ctx)
            return False

        outcome = Outcome()
        run_serially([ListenerTask(Listener.from_callable(listener))], context, outcome)

        assert received == [context]
        assert outcome.calls == [None]

    def test_async_listener_receives_done(self, context):
        pending = []

        def listener(ctx, done):
            pending.append(done)

        outcome = Outcome()
        run_serially([ListenerTask(Listener.from_callable(listener))], context, outcome)

        assert outcome.calls == []
        pending[0]()
        assert outcome.calls == [None]

    def test_async_listener_error_passes_through(self, context):
        def listener(ctx, done):
            done("not today")

        outcome = Outcome()
        run_serially([ListenerTask(Listener.from_callable(listener))], context, outcome)

        assert outcome.calls == ["not today"]

    def test_raising_listener_fails_with_listener_error(self, context):
        def listener(ctx):
            raise KeyError("root")

        outcome = Outcome()
        run_serially([ListenerTask(Listener.from_callable(listener))], context, outcome)

        (error,) = outcome.calls
        assert isinstance(error, ListenerError)
        assert isinstance(error.original_error, KeyError)
        assert error.context["listener"].endswith("listener")

    def test_explicit_async_shape(self, context):
        pending = []
        outcome = Outcome()

        def listener(*args):
            pending.append(args[1])

        task = ListenerTask(Listener.from_callable(listener, is_async=True))
        run_serially([task], context, outcome)

        assert outcome.calls == []
        pending[0]()
        assert outcome.calls == [None]
