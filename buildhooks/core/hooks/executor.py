"""Hook script execution.

Runs hook scripts through the shell and turns their exit status into the
completion signal of the serial invoker. The process runner is a
collaborator: ``runner(command, on_complete)`` where
``on_complete(exit_code, output)`` is called once the command has finished.
"""

from __future__ import annotations

import shlex
import subprocess
import threading
import time
from collections.abc import Callable
from pathlib import Path

from buildhooks.exceptions import HookError, HookScriptError
from buildhooks.utils.logging import get_logger

from .models import DoneCallback, HookContext, HookScript

logger = get_logger(__name__)

CompletionCallback = Callable[[int, str], None]
CommandRunner = Callable[[str, CompletionCallback], None]


_DOUBLE_QUOTE_SPECIALS = str.maketrans({c: "\\" + c for c in '\\"$`'})


def build_command(script_path: str | Path, project_root: str | Path) -> str:
    """Build the command line of a hook script.

    The project root is passed as a single double-quoted argument:

        /work/app/.buildhooks/hooks/before_build/0.sh "/work/app"

    Backslash, ``"``, ``$`` and backquote are escaped inside the quotes, so
    the script receives the root verbatim and the shell expands nothing in it.
    """
    root = str(project_root).translate(_DOUBLE_QUOTE_SPECIALS)
    return f'{shlex.quote(str(script_path))} "{root}"'


def run_command(command: str, on_complete: CompletionCallback) -> None:
    """Run ``command`` through the shell and report its result.

    Blocks until the command exits, then calls ``on_complete`` with the exit
    code and the combined stdout/stderr output.
    """
    result = subprocess.run(
        command,
        shell=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
    )
    output = result.stdout.decode("utf-8", errors="replace")
    on_complete(result.returncode, output)


def run_command_in_thread(command: str, on_complete: CompletionCallback) -> None:
    """Run ``command`` on a background thread and return immediately.

    ``on_complete`` is called from that thread, so the rest of the firing
    continues there.
    """
    thread = threading.Thread(
        target=run_command,
        args=(command, on_complete),
        name="buildhooks-script",
        daemon=True,
    )
    thread.start()


class ScriptTask:
    """Serial-invoker task that runs one hook script.

    Example:
        >>> task = ScriptTask(script, root="/work/app")
        >>> task.invoke(context, done)  # done(None) on exit 0
    """

    def __init__(
        self,
        script: HookScript,
        root: str | Path,
        runner: CommandRunner = run_command,
    ):
        self.script = script
        self.root = root
        self.runner = runner

    @property
    def name(self) -> str:
        return self.script.name

    def invoke(self, context: HookContext, done: DoneCallback) -> None:
        """Run the script; ``done`` receives a HookScriptError on non-zero exit."""
        command = build_command(self.script.path, self.root)
        start_time = time.perf_counter()

        logger.info(
            "hook_script_executing",
            hook_event=context.event,
            script=str(self.script.path),
            executable=self.script.executable,
        )

        def on_complete(exit_code: int, output: str) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000

            if exit_code != 0:
                logger.warning(
                    "hook_script_failed",
                    hook_event=context.event,
                    script=str(self.script.path),
                    exit_code=exit_code,
                    duration_ms=duration_ms,
                    output=output[:200],
                )
                done(HookScriptError(self.script.path, exit_code, output))
                return

            logger.info(
                "hook_script_executed",
                hook_event=context.event,
                script=str(self.script.path),
                duration_ms=duration_ms,
                output_length=len(output),
            )
            done()

        try:
            self.runner(command, on_complete)
        except OSError as e:
            logger.error(
                "hook_script_launch_failed",
                script=str(self.script.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            done(
                HookError(
                    f'Could not run script "{self.script.path}"',
                    context={"command": command},
                    original_error=e,
                )
            )

    def __repr__(self) -> str:
        return f"ScriptTask({self.script.name!r})"
