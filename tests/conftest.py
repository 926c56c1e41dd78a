"""Shared pytest fixtures for Reposcope tests.

Fixtures are organized by category:
- Repository fixtures: Real git repositories built with GitPython
- Logging fixtures: Keep handlers from leaking between tests
- Configuration fixtures: Config dictionaries for loader tests
"""

import logging
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from tests.fixtures import RepoBuilder, build_scenario_repo

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_reposcope_logging() -> Iterator[None]:
    """Detach handlers installed by CLI runs (their streams close with the runner)."""
    yield
    logger = logging.getLogger("reposcope")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def repo_builder(tmp_path: Path) -> Iterator[RepoBuilder]:
    """Return a builder for a fresh repository under tmp_path/repo."""
    builder = RepoBuilder(tmp_path / "repo")
    yield builder
    builder.close()


@pytest.fixture
def scenario_repo(tmp_path: Path) -> Path:
    """Repository with 3 commits (alice 2, bob 1), 2 branches and 5 files."""
    path = tmp_path / "scenario"
    build_scenario_repo(path).close()
    return path


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """Freshly initialized repository with no commits."""
    builder = RepoBuilder(tmp_path / "empty")
    builder.close()
    return builder.path


@pytest.fixture
def unknown_author_repo(tmp_path: Path) -> Path:
    """Repository where one of two commits has an empty author name."""
    builder = RepoBuilder(tmp_path / "anonymous")
    builder.commit("Named", author="carol", files={"a.txt": "a"})
    builder.commit("Anonymous", author="", files={"b.txt": "b"})
    builder.close()
    return builder.path


@pytest.fixture
def isolated_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tempfile at a private directory so leftover clones are visible."""
    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    return temp_root


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid Reposcope configuration."""
    return {
        "output": {
            "format": "markdown",
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete Reposcope configuration with all options."""
    return {
        "analysis": {
            "parallel": False,
            "max_workers": 2,
        },
        "clone": {
            "temp_prefix": "scan-",
            "stall_timeout": 30,
        },
        "output": {
            "format": "json",
            "path": "reports/repo.json",
        },
        "ci": {
            "json_output": True,
        },
    }
