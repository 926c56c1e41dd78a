"""Unit tests for the HEAD tree walk."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from git import Repo

from reposcope.analyzers import count_files, is_regular_file, iter_tree, resolve_head
from reposcope.errors import AnalysisStage, TreeError


def entry(path: str, type_: str = "blob", mode: int = 0o100644, children=()) -> SimpleNamespace:
    """Build a tree entry stand-in; trees are iterable over their children."""

    class FakeTree(list):
        pass

    if type_ == "tree":
        node = FakeTree(children)
        node.path = path
        node.type = type_
        node.mode = 0o040000
        return node  # type: ignore[return-value]
    return SimpleNamespace(path=path, type=type_, mode=mode)


class TestIsRegularFile:
    """Tests for is_regular_file()."""

    @pytest.mark.parametrize(
        ("type_", "mode", "expected"),
        [
            ("blob", 0o100644, True),
            ("blob", 0o100755, True),
            ("blob", 0o120000, False),
            ("submodule", 0o160000, False),
            ("tree", 0o040000, False),
        ],
    )
    def test_modes(self, type_: str, mode: int, expected: bool) -> None:
        """Test which entries count as files."""
        assert is_regular_file(SimpleNamespace(type=type_, mode=mode)) is expected


class TestIterTree:
    """Tests for iter_tree()."""

    def test_pre_order(self) -> None:
        """Test that a directory is yielded before its children."""
        root = [
            entry("README.md"),
            entry(
                "src",
                "tree",
                children=[
                    entry("src/app.py"),
                    entry("src/pkg", "tree", children=[entry("src/pkg/__init__.py")]),
                ],
            ),
            entry("setup.cfg"),
        ]

        paths = [e.path for e in iter_tree(root)]  # type: ignore[arg-type]

        assert paths == [
            "README.md",
            "src",
            "src/app.py",
            "src/pkg",
            "src/pkg/__init__.py",
            "setup.cfg",
        ]


class TestCountFiles:
    """Tests for count_files()."""

    def test_counts_all_directories(self, scenario_repo: Path) -> None:
        """Test that files in nested directories are counted."""
        with Repo(scenario_repo) as repo:
            assert count_files(repo, resolve_head(repo)) == 5

    def test_no_head(self) -> None:
        """Test that an empty repository has no files."""
        repo = MagicMock()

        assert count_files(repo, None) == 0
        repo.commit.assert_not_called()

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_not_counted(self, repo_builder) -> None:
        """Test that symbolic links are not files."""
        repo_builder.commit(
            "with link",
            files={"real.txt": "data", "docs/guide.md": "# guide"},
            links={"alias.txt": "real.txt"},
        )
        repo = repo_builder.repo

        assert count_files(repo, resolve_head(repo)) == 2

    def test_submodule_not_counted(self) -> None:
        """Test that gitlink entries are not files."""
        tree = [
            entry("README.md"),
            entry("vendor", "tree", children=[entry("vendor/lib", "submodule", 0o160000)]),
        ]
        repo = MagicMock()
        repo.commit.return_value = SimpleNamespace(tree=tree)

        assert count_files(repo, "abc123") == 1

    def test_unloadable_tree(self) -> None:
        """Test that a missing tree object is a TreeError."""
        repo = MagicMock()
        repo.git_dir = "/fake/.git"
        repo.commit.side_effect = ValueError("object not found")

        with pytest.raises(TreeError) as exc_info:
            count_files(repo, "abc123")

        assert exc_info.value.stage is AnalysisStage.TREE
