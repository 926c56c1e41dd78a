"""Test fixtures for Reposcope.

Repositories are built on the fly in pytest's tmp_path with GitPython, so
every test gets a fresh repository with known commits, authors and files.
"""

from pathlib import Path

from git import Actor, Commit, Head, Repo

DEFAULT_BRANCH = "main"


class RepoBuilder:
    """Builds a small git repository with controlled history.

    Usage:
        builder = RepoBuilder(tmp_path / "repo")
        builder.commit("first", author="alice", files={"a.txt": "a"})
        builder.branch("feature")
    """

    def __init__(self, path: Path, initial_branch: str = DEFAULT_BRANCH) -> None:
        path.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.repo = Repo.init(path)
        # Independent of the host's init.defaultBranch setting
        self.repo.git.symbolic_ref("HEAD", f"refs/heads/{initial_branch}")

    def write(self, relative: str, content: str = "") -> Path:
        """Write a file in the working tree, creating parent directories."""
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def symlink(self, relative: str, target: str) -> Path:
        """Create a symbolic link in the working tree."""
        link = self.path / relative
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(target)
        return link

    def commit(
        self,
        message: str,
        author: str = "alice",
        files: dict[str, str] | None = None,
        links: dict[str, str] | None = None,
    ) -> Commit:
        """Stage the given files and links, then commit as ``author``."""
        paths: list[str] = []
        for relative, content in (files or {}).items():
            paths.append(str(self.write(relative, content)))
        for relative, target in (links or {}).items():
            paths.append(str(self.symlink(relative, target)))
        if paths:
            self.repo.index.add(paths)

        actor = Actor(author, f"{author or 'nobody'}@example.com")
        return self.repo.index.commit(message, author=actor, committer=actor)

    def branch(self, name: str) -> Head:
        """Create a branch at the current HEAD."""
        return self.repo.create_head(name)

    def close(self) -> None:
        self.repo.close()


def build_scenario_repo(path: Path) -> Repo:
    """Three commits (alice x2, bob x1), branches main and feature, five files."""
    builder = RepoBuilder(path)
    builder.commit("Add docs", author="alice", files={"README.md": "# demo\n", "LICENSE": "MIT\n"})
    builder.commit(
        "Add package",
        author="alice",
        files={"src/app.py": "print('hi')\n", "src/pkg/__init__.py": ""},
    )
    builder.commit("Add tests", author="bob", files={"tests/test_app.py": "def test(): pass\n"})
    builder.branch("feature")
    builder.close()
    return Repo(path)
