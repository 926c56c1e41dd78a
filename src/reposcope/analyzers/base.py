"""Shared plumbing for the repository traversals.

Each traversal opens its own GitPython handle and yields either an item or a
SkippedItem. Skipped items are the best-effort policy made explicit: they are
counted and logged, never raised.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from git import Repo
from git.exc import BadName, BadObject, InvalidGitRepositoryError, NoSuchPathError

from reposcope.errors import RepositoryAnalysisError

T = TypeVar("T")


@dataclass(frozen=True)
class SkippedItem:
    """An item a traversal could not read and left out of its results.

    Attributes:
        identifier: Ref path or commit id of the skipped item
        reason: Why it was skipped
    """

    identifier: str
    reason: str


def partition(results: Iterable[T | SkippedItem]) -> tuple[list[T], list[SkippedItem]]:
    """Split traversal output into items and skipped items.

    Args:
        results: Mixed sequence produced by a traversal

    Returns:
        Tuple of (items, skipped), each in original order
    """
    items: list[T] = []
    skipped: list[SkippedItem] = []
    for result in results:
        if isinstance(result, SkippedItem):
            skipped.append(result)
        else:
            items.append(result)
    return items, skipped


def open_repository(
    path: Path | str,
    error_cls: type[RepositoryAnalysisError],
) -> Repo:
    """Open a git repository, reporting failure as the calling stage's error.

    Args:
        path: Repository working tree or bare repository path
        error_cls: Stage error to raise when the repository cannot be opened

    Returns:
        Open Repo handle (caller closes it)

    Raises:
        RepositoryAnalysisError: The given error_cls
    """
    try:
        return Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError, OSError) as e:
        raise error_cls(f"Cannot open repository at {path}: {e}", source=str(path)) from e


def resolve_head(repo: Repo) -> str | None:
    """Resolve HEAD to a commit id.

    Args:
        repo: Open repository

    Returns:
        Hex commit id, or None when HEAD is unborn or does not name a commit
    """
    try:
        return repo.head.commit.hexsha
    except (ValueError, BadName, BadObject):
        return None
