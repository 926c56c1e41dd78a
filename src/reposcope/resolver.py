"""Repository source resolution.

Turns the user's path-or-URL string into a Workspace:
- an existing local path is used in place (no copy, no network)
- anything else is cloned into a fresh temporary directory
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from reposcope.errors import ResolutionError, ResolutionFailure
from reposcope.models.source import LocalSource, RemoteSource, RepositorySource, Workspace

logger = logging.getLogger(__name__)


@dataclass
class CloneOptions:
    """Options for cloning a remote repository.

    Attributes:
        temp_prefix: Prefix of the temporary clone directory name
        stall_timeout: Abort a clone whose transfer stalls this many seconds (0 disables)
    """

    temp_prefix: str = "reposcope-"
    stall_timeout: int = 0

    def __post_init__(self) -> None:
        """Validate clone options."""
        if self.stall_timeout < 0:
            raise ValueError(f"stall_timeout must be >= 0 (got {self.stall_timeout})")

    def environment(self) -> dict[str, str]:
        """Environment variables passed to ``git clone``.

        Credential prompts are disabled so an authentication failure ends the
        clone instead of waiting on a terminal nobody is watching.
        """
        env = {"GIT_TERMINAL_PROMPT": "0"}
        if self.stall_timeout:
            env["GIT_HTTP_LOW_SPEED_LIMIT"] = "1"
            env["GIT_HTTP_LOW_SPEED_TIME"] = str(self.stall_timeout)
        return env


def classify_source(value: str) -> RepositorySource:
    """Decide whether ``value`` is a local path or a remote locator.

    Args:
        value: Path or URL supplied by the user

    Returns:
        LocalSource if the path exists on disk, RemoteSource otherwise

    Raises:
        ValueError: If value is blank
    """
    value = value.strip()
    if not value:
        raise ValueError("Repository source must not be blank")

    try:
        path = Path(value).expanduser()
    except RuntimeError:
        # ~user whose home directory cannot be found
        path = Path(value)
    if path.exists():
        return LocalSource(path=path)
    return RemoteSource(url=value)


def resolve(value: str, options: CloneOptions | None = None) -> Workspace:
    """Resolve a path or URL to an openable repository.

    Args:
        value: Path or URL supplied by the user
        options: Clone options (defaults if None)

    Returns:
        Workspace; temporary when the source was cloned

    Raises:
        ResolutionError: If the path is not a repository, the temporary
            directory cannot be created, or the clone fails
        ValueError: If value is blank
    """
    source = classify_source(value)
    if isinstance(source, LocalSource):
        return _resolve_local(source)
    return _resolve_remote(source, options or CloneOptions())


def _resolve_local(source: LocalSource) -> Workspace:
    """Use an existing local repository in place."""
    path = source.path.resolve()
    try:
        Repo(path).close()
    except (InvalidGitRepositoryError, NoSuchPathError, OSError) as e:
        raise ResolutionError(
            str(source),
            ResolutionFailure.NOT_A_REPOSITORY,
            f"Not a git repository: {path}",
        ) from e

    logger.debug("Using local repository %s", path)
    return Workspace(source=source, local_path=path)


def _resolve_remote(source: RemoteSource, options: CloneOptions) -> Workspace:
    """Clone a remote repository into a new temporary directory."""
    try:
        handle = tempfile.TemporaryDirectory(prefix=options.temp_prefix)
    except OSError as e:
        raise ResolutionError(
            source.url,
            ResolutionFailure.WORKSPACE,
            f"Could not create temporary workspace: {e}",
        ) from e

    local_path = Path(handle.name)
    logger.info("Cloning remote repository %s", source.url)
    logger.debug("Clone target: %s", local_path)

    try:
        Repo.clone_from(source.url, local_path, env=options.environment()).close()
    except (GitError, OSError) as e:
        handle.cleanup()
        raise ResolutionError(
            source.url,
            ResolutionFailure.CLONE,
            f"Could not clone {source.url}: {e}",
        ) from e

    return Workspace(source=source, local_path=local_path, temporary_handle=handle)
