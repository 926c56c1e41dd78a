"""Exception hierarchy for repository analysis.

Every failure that aborts an analysis is a RepositoryAnalysisError tagged
with the stage that raised it:
- ResolutionError: no usable repository could be obtained
- BranchError: branch references could not be listed
- HistoryError: commit history could not be walked
- TreeError: the HEAD snapshot tree could not be loaded

Per-item problems inside a traversal (one bad ref, one unreadable commit)
are not errors; they are reported as skipped items instead.
"""

from enum import Enum


class AnalysisStage(Enum):
    """Stage of the analysis that produced an error."""

    RESOLVE = "resolve"
    BRANCHES = "branches"
    HISTORY = "history"
    TREE = "tree"


class ResolutionFailure(Enum):
    """Why a repository source could not be resolved to a workspace."""

    WORKSPACE = "workspace"  # temporary directory could not be created
    CLONE = "clone"  # remote clone failed
    NOT_A_REPOSITORY = "not_a_repository"  # local path is not a git repository


class RepositoryAnalysisError(Exception):
    """Base class for errors that abort an analysis."""

    stage: AnalysisStage

    def __init__(self, message: str, source: str | None = None) -> None:
        self.message = message
        self.source = source
        super().__init__(f"[{self.stage.value}] {message}")


class ResolutionError(RepositoryAnalysisError):
    """Raised when a path or URL cannot be turned into an openable repository."""

    stage = AnalysisStage.RESOLVE

    def __init__(
        self,
        source: str,
        reason: ResolutionFailure,
        message: str,
    ) -> None:
        self.reason = reason
        super().__init__(message, source=source)


class BranchError(RepositoryAnalysisError):
    """Raised when branch references cannot be enumerated at all."""

    stage = AnalysisStage.BRANCHES


class HistoryError(RepositoryAnalysisError):
    """Raised when the commit history walk cannot be initialized."""

    stage = AnalysisStage.HISTORY


class TreeError(RepositoryAnalysisError):
    """Raised when the HEAD snapshot tree cannot be loaded."""

    stage = AnalysisStage.TREE
