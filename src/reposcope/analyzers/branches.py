"""Branch enumeration.

Lists local branches and remote-tracking branches in the order
``git for-each-ref`` reports them. Ref names are read as raw bytes so that a
single undecodable name is skipped instead of failing the whole listing.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from git import Repo
from git.exc import GitError

from reposcope.analyzers.base import SkippedItem, partition
from reposcope.errors import BranchError

logger = logging.getLogger(__name__)

# Ref namespaces enumerated, local branches first
BRANCH_NAMESPACES: tuple[bytes, ...] = (b"refs/heads/", b"refs/remotes/")


@dataclass(frozen=True)
class BranchListing:
    """Result of branch enumeration.

    Attributes:
        names: Branch names in enumeration order
        skipped: Refs left out because their name was unreadable
    """

    names: tuple[str, ...] = ()
    skipped: tuple[SkippedItem, ...] = ()


def branch_display_name(refname: bytes) -> str:
    """Turn a full ref name into its branch name.

    ``refs/heads/main`` becomes ``main`` and ``refs/remotes/origin/main``
    becomes ``origin/main``.

    Raises:
        UnicodeDecodeError: If the name is not valid UTF-8
    """
    for namespace in BRANCH_NAMESPACES:
        if refname.startswith(namespace):
            refname = refname[len(namespace):]
            break
    return refname.decode("utf-8")


def iter_branch_names(repo: Repo) -> Iterator[str | SkippedItem]:
    """Yield every branch name, or a SkippedItem for unreadable refs.

    Args:
        repo: Open repository

    Yields:
        Branch name or SkippedItem

    Raises:
        GitError: If the refs cannot be listed
    """
    output: bytes = repo.git.for_each_ref(
        "--format=%(refname)",
        "refs/heads",
        "refs/remotes",
        stdout_as_string=False,
    )
    for refname in output.splitlines():
        if not refname:
            continue
        try:
            yield branch_display_name(refname)
        except UnicodeDecodeError as e:
            yield SkippedItem(identifier=repr(refname), reason=str(e))


def list_branches(repo: Repo) -> BranchListing:
    """List local and remote-tracking branches.

    Args:
        repo: Open repository

    Returns:
        BranchListing with names in enumeration order

    Raises:
        BranchError: If the refs cannot be read at all
    """
    try:
        names, skipped = partition(iter_branch_names(repo))
    except (GitError, OSError) as e:
        raise BranchError(f"Cannot enumerate branches: {e}", source=repo.git_dir) from e

    for item in skipped:
        logger.debug("Skipped branch ref %s: %s", item.identifier, item.reason)

    logger.info("Found %d branches", len(names))
    return BranchListing(names=tuple(names), skipped=tuple(skipped))
