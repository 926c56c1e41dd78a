"""Repository traversals.

Three independent read-only traversals over a git repository:
- branches: Branch enumeration (local and remote-tracking)
- history: Commit ancestry walk with per-author tally
- tree: Regular-file count of the HEAD snapshot
"""

from reposcope.analyzers.base import (
    SkippedItem,
    open_repository,
    partition,
    resolve_head,
)
from reposcope.analyzers.branches import (
    BranchListing,
    branch_display_name,
    iter_branch_names,
    list_branches,
)
from reposcope.analyzers.history import (
    CommitRecord,
    iter_commit_records,
    summarize_history,
    walk_history,
)
from reposcope.analyzers.tree import count_files, is_regular_file, iter_tree

__all__ = [
    # Shared
    "SkippedItem",
    "open_repository",
    "partition",
    "resolve_head",
    # Branches
    "BranchListing",
    "branch_display_name",
    "iter_branch_names",
    "list_branches",
    # History
    "CommitRecord",
    "iter_commit_records",
    "summarize_history",
    "walk_history",
    # Tree
    "count_files",
    "is_regular_file",
    "iter_tree",
]
