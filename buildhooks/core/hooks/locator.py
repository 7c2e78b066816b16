"""Hook script discovery.

Hook scripts live in one directory per event under the project's hooks tree:

    <project-root>/.buildhooks/hooks/before_build/
        00-clean.sh
        10-version.py

Every regular file directly inside the event directory is a hook for that
event; they run in filename order.
"""

from __future__ import annotations

import os
from pathlib import Path

from buildhooks.utils.config import get_settings
from buildhooks.utils.logging import get_logger

from .models import HookScript

logger = get_logger(__name__)


class ScriptLocator:
    """Finds the hook scripts of an event inside a project.

    Example:
        >>> locator = ScriptLocator()
        >>> hook_dir = locator.resolve("/work/app", "before_build")
        >>> [s.name for s in locator.list_scripts(hook_dir)]
        ['0.sh', '1.sh']
    """

    def __init__(self, hooks_subpath: str | Path | None = None):
        """Initialize script locator.

        Args:
            hooks_subpath: Hooks tree relative to the project root
                (default: settings.hooks_subpath)
        """
        self.hooks_subpath = Path(hooks_subpath or get_settings().hooks_subpath)

    def resolve(self, project_root: str | Path, event: str) -> Path:
        """Return the hook directory of ``event``. It may not exist."""
        return Path(project_root) / self.hooks_subpath / event

    def list_scripts(self, hook_dir: Path) -> list[HookScript]:
        """List the hook scripts in ``hook_dir``, sorted by filename.

        A missing directory means the event has no scripts. Subdirectories
        are skipped. Files without the executable bit are still listed and
        fail when they are run.

        Args:
            hook_dir: Event hook directory

        Returns:
            HookScript list in execution order
        """
        if not hook_dir.is_dir():
            return []

        scripts = []
        for entry in sorted(hook_dir.iterdir(), key=lambda p: p.name):
            if not entry.is_file():
                continue

            path = entry.absolute()
            scripts.append(
                HookScript(
                    name=entry.name,
                    path=path,
                    executable=os.access(path, os.X_OK),
                )
            )

        logger.debug(
            "hook_scripts_discovered",
            directory=str(hook_dir),
            scripts=[s.name for s in scripts],
        )
        return scripts

    def scripts_for(self, project_root: str | Path, event: str) -> list[HookScript]:
        """Resolve and list in one step."""
        return self.list_scripts(self.resolve(project_root, event))
