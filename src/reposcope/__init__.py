"""Reposcope - Git repository summary tool.

Reposcope inspects a git repository, given as a local path or a remote URL,
and reports its branches, total commit count, per-author commit counts and
the number of files tracked at HEAD.

Core principles:
- Read-only: the analyzed repository is never modified
- Disposable clones: remote repositories are cloned into a temporary
  directory that is always removed afterwards
- Best-effort traversal: one malformed ref or unreadable commit never
  aborts the whole analysis
"""

__version__ = "0.1.0"
__author__ = "Reposcope Contributors"
