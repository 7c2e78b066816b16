"""CLI command groups."""

from . import hooks

__all__ = ["hooks"]
