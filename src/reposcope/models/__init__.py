"""Reposcope data models.

This module exports the core entities used throughout the application:
- LocalSource / RemoteSource: Where a repository comes from
- Workspace: Resolved, openable repository location
- HistorySummary: Commit count and contributor tally
- AnalysisReport: Immutable repository summary
"""

from reposcope.models.report import (
    UNKNOWN_AUTHOR,
    AnalysisReport,
    HistorySummary,
    aggregate,
)
from reposcope.models.source import (
    LocalSource,
    RemoteSource,
    RepositorySource,
    Workspace,
)

__all__ = [
    "LocalSource",
    "RemoteSource",
    "RepositorySource",
    "Workspace",
    "HistorySummary",
    "AnalysisReport",
    "UNKNOWN_AUTHOR",
    "aggregate",
]
