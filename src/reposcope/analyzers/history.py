"""Commit history walk.

Walks every commit reachable from HEAD exactly once (``git rev-list``) and
folds the commit records into a contributor tally. The walk produces a lazy
sequence; the tally is a reduction over it, so no state is shared between
the walk and the count.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from git import Commit, Repo
from git.exc import BadName, BadObject, GitError

from reposcope.analyzers.base import SkippedItem
from reposcope.errors import HistoryError
from reposcope.models.report import UNKNOWN_AUTHOR, HistorySummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitRecord:
    """The part of a commit the history walk cares about."""

    hexsha: str
    author: str


def _load_record(commit: Commit) -> CommitRecord | SkippedItem:
    """Read the author of a single commit, skipping it if it cannot be loaded."""
    try:
        name = commit.author.name
    except (ValueError, BadName, BadObject) as e:
        return SkippedItem(identifier=commit.hexsha, reason=str(e))
    return CommitRecord(hexsha=commit.hexsha, author=name or UNKNOWN_AUTHOR)


def iter_commit_records(repo: Repo, head: str) -> Iterator[CommitRecord | SkippedItem]:
    """Yield one record per commit reachable from ``head``.

    Args:
        repo: Open repository
        head: Commit id to start from

    Yields:
        CommitRecord, or SkippedItem for a commit that could not be loaded

    Raises:
        HistoryError: If the ancestry walk itself fails
    """
    try:
        for commit in repo.iter_commits(head):
            yield _load_record(commit)
    except (GitError, OSError) as e:
        raise HistoryError(f"Cannot walk history from {head}: {e}", source=repo.git_dir) from e


def summarize_history(records: Iterable[CommitRecord | SkippedItem]) -> HistorySummary:
    """Fold commit records into a commit count and contributor tally.

    Args:
        records: Output of iter_commit_records

    Returns:
        HistorySummary with a read-only contributor mapping
    """
    authors: Counter[str] = Counter()
    skipped = 0

    for record in records:
        if isinstance(record, SkippedItem):
            logger.debug("Skipped commit %s: %s", record.identifier, record.reason)
            skipped += 1
            continue
        authors[record.author] += 1

    return HistorySummary(
        commit_count=authors.total(),
        contributors=MappingProxyType(dict(authors)),
        skipped=skipped,
    )


def walk_history(repo: Repo, head: str | None) -> HistorySummary:
    """Count commits reachable from HEAD, per author.

    Args:
        repo: Open repository
        head: Commit id HEAD resolved to, or None for an empty repository

    Returns:
        HistorySummary (all zero when head is None)

    Raises:
        HistoryError: If the ancestry walk cannot be performed
    """
    if head is None:
        logger.info("HEAD has no commit; history is empty")
        return HistorySummary()

    summary = summarize_history(iter_commit_records(repo, head))
    logger.info(
        "Walked %d commits by %d contributors",
        summary.commit_count,
        len(summary.contributors),
    )
    return summary
