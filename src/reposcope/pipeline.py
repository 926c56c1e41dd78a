"""Analysis pipeline orchestrator.

Resolves the repository source, holds the workspace for the duration of the
run, resolves HEAD once and hands that commit id to the three traversals,
then aggregates their results into an AnalysisReport.

The traversals share nothing but the on-disk repository: each one opens its
own GitPython handle, so they can run on worker threads.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from reposcope.analyzers import (
    BranchListing,
    count_files,
    list_branches,
    open_repository,
    resolve_head,
    walk_history,
)
from reposcope.config import MAX_WORKERS
from reposcope.errors import BranchError, HistoryError, TreeError
from reposcope.models.report import AnalysisReport, HistorySummary, aggregate
from reposcope.models.source import Workspace
from reposcope.resolver import CloneOptions
from reposcope.utils.logging import get_logger
from reposcope.workspace import open_workspace

logger = get_logger(__name__)


@dataclass
class PipelineOptions:
    """Options for controlling pipeline execution.

    Attributes:
        parallel: Run the three traversals on worker threads
        max_workers: Worker thread count when parallel (1-3)
        clone: Options for cloning remote sources
    """

    parallel: bool = True
    max_workers: int = MAX_WORKERS
    clone: CloneOptions = field(default_factory=CloneOptions)

    def __post_init__(self) -> None:
        """Validate worker count."""
        if not 1 <= self.max_workers <= MAX_WORKERS:
            raise ValueError(
                f"max_workers must be between 1 and {MAX_WORKERS} (got {self.max_workers})"
            )


def _branch_stage(path: Path, head: str | None) -> BranchListing:
    with open_repository(path, BranchError) as repo:
        return list_branches(repo)


def _history_stage(path: Path, head: str | None) -> HistorySummary:
    with open_repository(path, HistoryError) as repo:
        return walk_history(repo, head)


def _tree_stage(path: Path, head: str | None) -> int:
    with open_repository(path, TreeError) as repo:
        return count_files(repo, head)


# Stage order decides which error wins when several stages fail
STAGES: tuple[Callable[[Path, str | None], Any], ...] = (
    _branch_stage,
    _history_stage,
    _tree_stage,
)


class AnalysisPipeline:
    """Runs a complete repository analysis.

    The pipeline sequence:
    1. Resolve the source to a workspace (cloning if remote)
    2. Resolve HEAD once (read barrier shared by all traversals)
    3. Branch enumeration, history walk, tree walk (concurrently)
    4. Aggregate into an AnalysisReport
    5. Release the workspace (always)

    Any stage failure aborts the run; no partial report is produced.
    """

    def __init__(self, options: PipelineOptions | None = None) -> None:
        """Initialize the analysis pipeline.

        Args:
            options: Pipeline options (defaults if None)
        """
        self.options = options or PipelineOptions()

    def run(self, source: str) -> AnalysisReport:
        """Analyze the repository at ``source``.

        Args:
            source: Local path or remote URL

        Returns:
            AnalysisReport

        Raises:
            ResolutionError: If the source cannot be resolved
            BranchError, HistoryError, TreeError: If a traversal fails
            ValueError: If source is blank
        """
        logger.info("Analyzing repository: %s", source)

        with open_workspace(source, self.options.clone) as workspace:
            report = self.analyze_workspace(workspace, source=source)

        logger.structured(
            logging.INFO,
            f"Analysis complete: {report.commit_count} commits, "
            f"{report.branch_count} branches, {report.file_count} files",
            branches=report.branch_count,
            commits=report.commit_count,
            contributors=report.contributor_count,
            files=report.file_count,
            head=report.head_commit,
        )
        return report

    def analyze_workspace(
        self,
        workspace: Workspace,
        source: str | None = None,
    ) -> AnalysisReport:
        """Run the traversals against an already resolved workspace.

        Args:
            workspace: Workspace to analyze (not released here)
            source: Original path or URL, for the report

        Returns:
            AnalysisReport
        """
        path = workspace.local_path

        # HEAD is the history walk's starting point; open failures here are HistoryErrors
        with open_repository(path, HistoryError) as repo:
            head = resolve_head(repo)

        logger.debug("HEAD resolved to %s", head or "nothing (empty repository)")

        branches, history, file_count = self._run_stages(path, head)

        return aggregate(
            str(path),
            branches.names,
            history,
            file_count,
            source=source if source is not None else str(workspace.source),
            head_commit=head,
            skipped_branches=len(branches.skipped),
        )

    def _run_stages(
        self,
        path: Path,
        head: str | None,
    ) -> tuple[BranchListing, HistorySummary, int]:
        """Run all traversals, returning their results in stage order.

        Errors are re-raised in stage order, so the reported failure does not
        depend on thread timing.
        """
        if not self.options.parallel or self.options.max_workers == 1:
            branches, history, file_count = (stage(path, head) for stage in STAGES)
            return branches, history, file_count

        with ThreadPoolExecutor(
            max_workers=self.options.max_workers,
            thread_name_prefix="reposcope",
        ) as executor:
            futures = [executor.submit(stage, path, head) for stage in STAGES]
            branches, history, file_count = (future.result() for future in futures)

        return branches, history, file_count


def analyze(source: str, options: PipelineOptions | None = None) -> AnalysisReport:
    """Analyze a repository with a one-off pipeline.

    Args:
        source: Local path or remote URL
        options: Pipeline options

    Returns:
        AnalysisReport
    """
    return AnalysisPipeline(options).run(source)
