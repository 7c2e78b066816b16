"""Project root discovery."""

from __future__ import annotations

from pathlib import Path

from buildhooks.utils.config import get_settings
from buildhooks.utils.logging import get_logger

logger = get_logger(__name__)


def find_project_root(directory: str | Path, marker: str | None = None) -> str | None:
    """Return the root of the project containing ``directory``.

    Walks up from ``directory`` to the filesystem root and returns the first
    directory that contains the project marker directory.

    Args:
        directory: Directory to start from
        marker: Marker directory name (default: settings.project_marker)

    Returns:
        Absolute path of the project root, or None if there is none
    """
    marker = marker or get_settings().project_marker
    start = Path(directory).expanduser().resolve()

    for candidate in (start, *start.parents):
        if (candidate / marker).is_dir():
            logger.debug("project_root_found", directory=str(start), root=str(candidate))
            return str(candidate)

    logger.debug("project_root_not_found", directory=str(start), marker=marker)
    return None
