"""Exception hierarchy for buildhooks.

Every error carries a human-readable message plus a structured ``context``
dict, so it can be logged with structlog without losing detail.

Usage:
    from buildhooks.exceptions import HookScriptError

    def on_fired(error):
        if isinstance(error, HookScriptError):
            logger.error("hook_script_failed", **error.context)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class BuildHooksError(Exception):
    """Base exception for all buildhooks errors.

    Attributes:
        message: Human-readable error message
        context: Additional context for debugging (dict)
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        """Initialize exception with rich context.

        Args:
            message: Human-readable error description
            context: Additional structured data for debugging
            original_error: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Format exception with context for logging."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}]"
        return base

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# =============================================================================
# Configuration & Project Errors
# =============================================================================


class ConfigurationError(BuildHooksError):
    """Raised when settings are invalid or missing."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if setting:
            context["setting"] = setting
        if expected:
            context["expected"] = expected
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class NotAProjectError(BuildHooksError):
    """Raised when a directory is not inside a recognized project.

    Construction of a ProjectHooker fails with this error before any
    hook can be fired.
    """

    def __init__(self, directory: str | Path, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        context["directory"] = str(directory)
        kwargs["context"] = context
        super().__init__("Not a recognized project, can't use hooks.", **kwargs)
        self.directory = directory


# =============================================================================
# Firing Errors
# =============================================================================


class HookError(BuildHooksError):
    """Base class for failures reported by a firing."""


class HookScriptError(HookError):
    """Raised when a hook script exits with a non-zero status code.

    Attributes:
        script_path: Absolute path of the failed script
        exit_code: Process exit code
        output: Combined stdout/stderr captured from the script
    """

    def __init__(
        self,
        script_path: str | Path,
        exit_code: int,
        output: str = "",
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        context["exit_code"] = exit_code
        kwargs["context"] = context
        super().__init__(
            f'Script "{script_path}" exited with non-zero status code {exit_code}. '
            f"Aborting. Output: {output}",
            **kwargs,
        )
        self.script_path = script_path
        self.exit_code = exit_code
        self.output = output


class ListenerError(HookError):
    """Raised when a listener fails.

    Wraps exceptions raised while a listener is being invoked, and error
    values that are not exceptions when they have to be raised (``fire_async``).
    """

    def __init__(
        self,
        message: str,
        *,
        listener: str | None = None,
        error_value: Any = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if listener:
            context["listener"] = listener
        if error_value is not None:
            context["error_value"] = repr(error_value)[:200]
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.error_value = error_value


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    error: BaseException,
    message: str,
    *,
    exception_class: type[BuildHooksError] = BuildHooksError,
    **context: Any,
) -> BuildHooksError:
    """Wrap an external exception in the buildhooks exception hierarchy.

    Args:
        error: Original exception to wrap
        message: Human-readable description
        exception_class: Which buildhooks exception to use
        **context: Additional context to attach

    Returns:
        Wrapped exception with original error preserved

    Example:
        try:
            listener(context)
        except Exception as e:
            done(wrap_exception(e, "Listener raised", exception_class=ListenerError))
    """
    return exception_class(
        message,
        context=context,
        original_error=error,
    )


__all__ = [
    # Base
    "BuildHooksError",
    # Configuration
    "ConfigurationError",
    "NotAProjectError",
    # Firing
    "HookError",
    "HookScriptError",
    "ListenerError",
    # Utilities
    "wrap_exception",
]
