"""
Pytest configuration and global fixtures.

This module provides shared fixtures used across all tests.
"""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from buildhooks.core.hooks import reset_listener_registry
from buildhooks.utils import config

BUILDHOOKS_ENV_VARS = (
    "BUILDHOOKS_PROJECT_MARKER",
    "BUILDHOOKS_HOOKS_SUBPATH",
    "BUILDHOOKS_LOG_LEVEL",
    "BUILDHOOKS_JSON_LOGS",
    "BUILDHOOKS_DEV_MODE",
)


@pytest.fixture(autouse=True)
def fresh_listener_registry():
    """Give every test an empty process-wide listener registry."""
    reset_listener_registry()
    yield
    reset_listener_registry()


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from BUILDHOOKS_* variables and cached settings."""
    for var in BUILDHOOKS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "_settings", None)


@pytest.fixture
def project_root(tmp_path) -> Path:
    """Create an empty project (marker directory and hooks tree)."""
    root = tmp_path / "app"
    (root / ".buildhooks" / "hooks").mkdir(parents=True)
    return root


@pytest.fixture
def write_hook(project_root) -> Callable[..., Path]:
    """Write a hook script for an event inside the test project."""

    def _write(event: str, name: str, body: str, executable: bool = True) -> Path:
        hook_dir = project_root / ".buildhooks" / "hooks" / event
        hook_dir.mkdir(parents=True, exist_ok=True)
        script_path = hook_dir / name
        script_path.write_text(dedent(body))
        script_path.chmod(0o755 if executable else 0o644)
        return script_path

    return _write
