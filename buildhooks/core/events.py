"""Well-known build lifecycle events.

Event names are plain strings; any string can be fired. These are the
names the build tool fires at its own lifecycle points.
"""

from __future__ import annotations

from enum import StrEnum


class LifecycleEvent(StrEnum):
    """Lifecycle points at which the build tool fires hooks."""

    BEFORE_PLATFORM_ADD = "before_platform_add"
    AFTER_PLATFORM_ADD = "after_platform_add"
    BEFORE_PLATFORM_RM = "before_platform_rm"
    AFTER_PLATFORM_RM = "after_platform_rm"
    BEFORE_PLUGIN_ADD = "before_plugin_add"
    AFTER_PLUGIN_ADD = "after_plugin_add"
    BEFORE_PLUGIN_RM = "before_plugin_rm"
    AFTER_PLUGIN_RM = "after_plugin_rm"
    BEFORE_PREPARE = "before_prepare"
    AFTER_PREPARE = "after_prepare"
    BEFORE_COMPILE = "before_compile"
    AFTER_COMPILE = "after_compile"
    BEFORE_BUILD = "before_build"
    AFTER_BUILD = "after_build"
    BEFORE_EMULATE = "before_emulate"
    AFTER_EMULATE = "after_emulate"
    BEFORE_RUN = "before_run"
    AFTER_RUN = "after_run"


__all__ = ["LifecycleEvent"]
