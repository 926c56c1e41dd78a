"""Analysis report entity and the aggregation that builds it.

The report is the single, immutable result of an analysis run. It is built
by aggregate() from the independent traversal results and never updated
afterwards.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# Author name used when a commit carries no author name
UNKNOWN_AUTHOR = "Unknown"


@dataclass(frozen=True)
class HistorySummary:
    """Result of walking the commit history from HEAD.

    Attributes:
        commit_count: Number of commits visited
        contributors: Author name -> number of commits
        skipped: Number of commits that could not be loaded
    """

    commit_count: int = 0
    contributors: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    skipped: int = 0


@dataclass(frozen=True)
class AnalysisReport:
    """Summary of a git repository.

    Attributes:
        repository_path: Path of the repository that was opened
        branches: Branch names in enumeration order
        commit_count: Total number of commits reachable from HEAD
        contributors: Author name -> number of commits (read-only)
        file_count: Number of regular files in the HEAD snapshot
        source: Path or URL the analysis was requested for
        head_commit: Commit id HEAD resolved to (None for an empty repository)
        skipped_branches: Branch references skipped because their name was unreadable
        skipped_commits: Commits skipped because they could not be loaded

    Validation Rules:
        - commit_count equals the sum of contributor counts
        - every contributor count is at least 1
    """

    repository_path: str
    branches: tuple[str, ...]
    commit_count: int
    contributors: Mapping[str, int]
    file_count: int
    source: str = ""
    head_commit: str | None = None
    skipped_branches: int = 0
    skipped_commits: int = 0

    def __post_init__(self) -> None:
        """Validate counts and freeze mutable inputs."""
        if not isinstance(self.branches, tuple):
            object.__setattr__(self, "branches", tuple(self.branches))
        if not isinstance(self.contributors, MappingProxyType):
            object.__setattr__(
                self, "contributors", MappingProxyType(dict(self.contributors))
            )

        if self.commit_count < 0 or self.file_count < 0:
            raise ValueError("Counts must not be negative")

        if any(count < 1 for count in self.contributors.values()):
            raise ValueError("Every contributor must have at least one commit")

        tallied = sum(self.contributors.values())
        if tallied != self.commit_count:
            raise ValueError(
                f"Commit count {self.commit_count} does not match "
                f"contributor total {tallied}"
            )

    def __hash__(self) -> int:
        return hash(
            (
                self.repository_path,
                self.branches,
                self.commit_count,
                frozenset(self.contributors.items()),
                self.file_count,
                self.source,
                self.head_commit,
            )
        )

    @property
    def branch_count(self) -> int:
        """Number of branches found."""
        return len(self.branches)

    @property
    def contributor_count(self) -> int:
        """Number of distinct authors."""
        return len(self.contributors)

    @property
    def is_empty(self) -> bool:
        """Return True if the repository has no commits."""
        return self.head_commit is None and self.commit_count == 0

    def contributors_by_count(self) -> list[tuple[str, int]]:
        """Contributors ordered by commit count (descending), then name."""
        return sorted(self.contributors.items(), key=lambda item: (-item[1], item[0]))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "repository_path": self.repository_path,
            "source": self.source,
            "head_commit": self.head_commit,
            "branches": list(self.branches),
            "commit_count": self.commit_count,
            "contributors": dict(self.contributors),
            "file_count": self.file_count,
            "skipped_branches": self.skipped_branches,
            "skipped_commits": self.skipped_commits,
        }


def aggregate(
    repository_path: str,
    branches: Sequence[str],
    history: HistorySummary,
    file_count: int,
    *,
    source: str = "",
    head_commit: str | None = None,
    skipped_branches: int = 0,
) -> AnalysisReport:
    """Combine traversal results into an AnalysisReport.

    Args:
        repository_path: Path of the opened repository
        branches: Branch names from the branch enumerator
        history: Commit count and contributor tally from the history walker
        file_count: Regular-file count from the tree walker
        source: Original path or URL
        head_commit: Commit id observed for HEAD
        skipped_branches: Branch references skipped during enumeration

    Returns:
        Immutable AnalysisReport
    """
    return AnalysisReport(
        repository_path=repository_path,
        branches=tuple(branches),
        commit_count=history.commit_count,
        contributors=history.contributors,
        file_count=file_count,
        source=source,
        head_commit=head_commit,
        skipped_branches=skipped_branches,
        skipped_commits=history.skipped,
    )
