"""Scoped workspace lifetime.

open_workspace() is the only way the engine acquires a workspace: the
temporary clone behind a remote source is removed when the ``with`` block
exits, however it exits. Local workspaces are never deleted.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from reposcope.models.source import Workspace
from reposcope.resolver import CloneOptions, resolve

logger = logging.getLogger(__name__)


def release_workspace(workspace: Workspace) -> None:
    """Remove a temporary workspace from disk.

    Removal problems are logged rather than raised so they never hide the
    error that ended the analysis.

    Args:
        workspace: Workspace to release (no-op unless temporary)
    """
    if not workspace.is_temporary:
        return

    logger.info("Cleaning up temporary repository...")
    try:
        workspace.release()
    except OSError as e:
        logger.warning("Failed to remove temporary workspace %s: %s", workspace.local_path, e)


@contextmanager
def open_workspace(
    value: str,
    options: CloneOptions | None = None,
) -> Iterator[Workspace]:
    """Resolve ``value`` and hold the resulting workspace for one analysis.

    Usage:
        with open_workspace("https://example.com/repo.git") as workspace:
            ...  # workspace.local_path is a full clone

    Args:
        value: Path or URL supplied by the user
        options: Clone options

    Yields:
        Resolved Workspace

    Raises:
        ResolutionError: If the source cannot be resolved (nothing is left on disk)
    """
    workspace = resolve(value, options)
    try:
        yield workspace
    finally:
        release_workspace(workspace)
