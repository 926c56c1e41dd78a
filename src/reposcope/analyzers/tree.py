"""HEAD snapshot tree walk.

Counts regular files in every directory of the tree HEAD points at.
Symbolic links and submodules are tree entries too, but not files.
"""

import logging
import stat
from collections.abc import Iterator

from git import Repo
from git.exc import BadName, BadObject, GitError
from git.objects import Tree
from git.objects.base import IndexObject

from reposcope.errors import TreeError

logger = logging.getLogger(__name__)


def iter_tree(tree: Tree) -> Iterator[IndexObject]:
    """Yield every entry of ``tree`` in pre-order (directory before its children)."""
    for entry in tree:
        yield entry
        if entry.type == "tree":
            yield from iter_tree(entry)


def is_regular_file(entry: IndexObject) -> bool:
    """Return True for blobs with a regular (possibly executable) file mode."""
    return entry.type == "blob" and stat.S_ISREG(entry.mode)


def count_files(repo: Repo, head: str | None) -> int:
    """Count regular files in the snapshot of ``head``.

    Args:
        repo: Open repository
        head: Commit id HEAD resolved to, or None for an empty repository

    Returns:
        Number of regular files (0 when head is None)

    Raises:
        TreeError: If the commit's tree cannot be loaded
    """
    if head is None:
        return 0

    try:
        tree = repo.commit(head).tree
        file_count = sum(1 for entry in iter_tree(tree) if is_regular_file(entry))
    except (GitError, ValueError, BadName, BadObject) as e:
        raise TreeError(f"Cannot read tree of {head}: {e}", source=repo.git_dir) from e

    logger.info("Counted %d files at %s", file_count, head[:12])
    return file_count
