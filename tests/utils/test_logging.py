"""Tests for structured logging helpers."""

from structlog.testing import capture_logs

from buildhooks.core.hooks.registry import ListenerRegistry
from buildhooks.utils.logging import get_logger


def test_get_logger_logs_key_values():
    with capture_logs() as logs:
        get_logger("buildhooks.test").info("hook_fire_started", hook_event="before_build")

    assert logs == [{"event": "hook_fire_started", "hook_event": "before_build", "log_level": "info"}]


def test_registry_logs_through_module_logger():
    """Package modules log through get_logger(__name__)."""
    with capture_logs() as logs:
        ListenerRegistry().on("before_build", lambda context: None)

    (entry,) = [log for log in logs if log["event"] == "listener_registered"]
    assert entry["hook_event"] == "before_build"
    assert entry["is_async"] is False
