"""Unit tests for branch enumeration."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from git import Repo
from git.exc import GitCommandError

from reposcope.analyzers import BranchListing, SkippedItem, branch_display_name, list_branches
from reposcope.analyzers.branches import iter_branch_names
from reposcope.errors import AnalysisStage, BranchError


def fake_repo(refs: bytes) -> MagicMock:
    """Return a stand-in Repo whose for-each-ref prints ``refs``."""
    repo = MagicMock()
    repo.git_dir = "/fake/.git"
    repo.git.for_each_ref.return_value = refs
    return repo


class TestBranchDisplayName:
    """Tests for branch_display_name()."""

    @pytest.mark.parametrize(
        ("refname", "expected"),
        [
            (b"refs/heads/main", "main"),
            (b"refs/heads/feature/login", "feature/login"),
            (b"refs/remotes/origin/main", "origin/main"),
            (b"refs/heads/caf\xc3\xa9", "café"),
        ],
    )
    def test_strips_namespace(self, refname: bytes, expected: str) -> None:
        """Test that the ref namespace is removed."""
        assert branch_display_name(refname) == expected

    def test_invalid_utf8(self) -> None:
        """Test that undecodable names raise."""
        with pytest.raises(UnicodeDecodeError):
            branch_display_name(b"refs/heads/\xff\xfe")


class TestListBranches:
    """Tests for list_branches()."""

    def test_preserves_enumeration_order(self) -> None:
        """Test that names come back in for-each-ref order."""
        repo = fake_repo(b"refs/heads/main\nrefs/heads/dev\nrefs/remotes/origin/main\n")

        listing = list_branches(repo)

        assert listing == BranchListing(names=("main", "dev", "origin/main"), skipped=())

    def test_skips_unreadable_names(self) -> None:
        """Test that one bad name is skipped and the rest still listed."""
        repo = fake_repo(b"refs/heads/main\nrefs/heads/\xff\xfe\nrefs/remotes/origin/main")

        listing = list_branches(repo)

        assert listing.names == ("main", "origin/main")
        assert len(listing.skipped) == 1
        assert isinstance(listing.skipped[0], SkippedItem)

    def test_no_refs(self) -> None:
        """Test a repository without any branches."""
        listing = list_branches(fake_repo(b""))

        assert listing.names == ()
        assert listing.skipped == ()

    def test_reads_both_namespaces_as_bytes(self) -> None:
        """Test the for-each-ref invocation."""
        repo = fake_repo(b"")

        list(iter_branch_names(repo))

        repo.git.for_each_ref.assert_called_once_with(
            "--format=%(refname)",
            "refs/heads",
            "refs/remotes",
            stdout_as_string=False,
        )

    def test_enumeration_failure(self) -> None:
        """Test that failing to read refs at all is a BranchError."""
        repo = fake_repo(b"")
        repo.git.for_each_ref.side_effect = GitCommandError(
            ["git", "for-each-ref"], 128, stderr="fatal: bad object"
        )

        with pytest.raises(BranchError) as exc_info:
            list_branches(repo)

        assert exc_info.value.stage is AnalysisStage.BRANCHES
        assert exc_info.value.source == "/fake/.git"


class TestListBranchesOnRepository:
    """Tests against real repositories."""

    def test_scenario_branches(self, scenario_repo: Path) -> None:
        """Test that local branches are listed."""
        with Repo(scenario_repo) as repo:
            listing = list_branches(repo)

        assert set(listing.names) == {"main", "feature"}
        assert len(listing.names) == 2

    def test_remote_tracking_branches(self, scenario_repo: Path, tmp_path: Path) -> None:
        """Test that a clone reports remote-tracking branches too."""
        clone = Repo.clone_from(scenario_repo.as_uri(), tmp_path / "clone")
        try:
            listing = list_branches(clone)
        finally:
            clone.close()

        assert "main" in listing.names
        assert "origin/main" in listing.names
        assert "origin/feature" in listing.names

    def test_empty_repository(self, empty_repo: Path) -> None:
        """Test that an unborn branch is not listed."""
        with Repo(empty_repo) as repo:
            listing = list_branches(repo)

        assert listing.names == ()
