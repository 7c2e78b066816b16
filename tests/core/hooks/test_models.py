"""Unit tests for hook models."""

import functools
from textwrap import dedent
from unittest.mock import MagicMock

import pytest

from buildhooks.core.hooks.models import (
    HookContext,
    Listener,
    ScriptMetadata,
    listener_is_async,
    listener_takes_context,
)


def no_args():
    pass


def context_only(context):
    pass


def context_and_done(context, done):
    pass


def three_params(context, done, extra):
    pass


def var_positional(*args):
    pass


def keyword_only_done(context, *, done):
    pass


class Handler:
    def sync(self, context):
        pass

    def async_(self, context, done):
        pass


class CallableAsync:
    def __call__(self, context, done):
        pass


@pytest.mark.parametrize(
    ("func", "expected"),
    [
        (no_args, False),
        (context_only, False),
        (context_and_done, True),
        (three_params, True),
        (var_positional, False),
        (keyword_only_done, False),
        (lambda ctx: None, False),
        (lambda ctx, done: None, True),
        (Handler().sync, False),
        (Handler().async_, True),
        (CallableAsync(), True),
        (functools.partial(three_params, 1), True),
        (functools.partial(context_and_done, 1), False),
    ],
)
def test_listener_is_async(func, expected):
    """Shape follows the number of declared positional parameters."""
    assert listener_is_async(func) is expected


@pytest.mark.parametrize(
    ("func", "expected"),
    [
        (no_args, False),
        (context_only, True),
        (var_positional, True),
        (lambda: None, False),
        (MagicMock(), True),
    ],
)
def test_listener_takes_context(func, expected):
    """Listeners without positional parameters are called with no arguments."""
    assert listener_takes_context(func) is expected


def test_mock_listener_is_sync():
    """Mocks accept *args/**kwargs only, so they are synchronous."""
    assert listener_is_async(MagicMock()) is False


def test_listener_from_callable():
    """Listener.from_callable infers or takes the shape."""
    assert Listener.from_callable(context_and_done).is_async is True
    assert Listener.from_callable(context_and_done, is_async=False).is_async is False
    assert Listener.from_callable(context_only).name == "context_only"


def test_hook_context_equality():
    """Contexts with the same fields compare equal."""
    assert HookContext(event="before_build", root="/work/app") == HookContext(
        event="before_build", root="/work/app"
    )
    assert HookContext(event="before_build").root is None
    assert HookContext(event="before_build").options == {}


def test_script_metadata_parsing(tmp_path):
    """DESCRIPTION and AUTHOR are read from the comment header."""
    script = tmp_path / "10-version.sh"
    script.write_text(
        dedent(
            """\
            #!/bin/bash
            # DESCRIPTION: Stamp the build number
            # AUTHOR: Jane Doe
            echo ok
            # DESCRIPTION: not part of the header
            """
        )
    )

    metadata = ScriptMetadata.from_script(script)

    assert metadata.description == "Stamp the build number"
    assert metadata.author == "Jane Doe"


def test_script_metadata_missing_file(tmp_path):
    """Unreadable scripts give empty metadata."""
    metadata = ScriptMetadata.from_script(tmp_path / "missing.sh")

    assert metadata.description is None
    assert metadata.author is None


def test_script_metadata_binary_file(tmp_path):
    """Binary hook files give empty metadata."""
    binary = tmp_path / "tool"
    binary.write_bytes(b"#\xff\xfe\x00\x01")

    assert ScriptMetadata.from_script(binary).description is None
