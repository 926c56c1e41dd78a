"""Repository source and workspace entities.

A RepositorySource is what the user asked for (a local path or a remote
URL). A Workspace is what the engine actually opens: either the local path
itself or a temporary clone of the remote repository.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LocalSource:
    """Repository that already exists on the local filesystem.

    Attributes:
        path: Path to the repository as given by the caller
    """

    path: Path

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class RemoteSource:
    """Repository reachable only through a clone URL.

    Attributes:
        url: Locator understood by ``git clone`` (https, ssh, file://, ...)
    """

    url: str

    def __str__(self) -> str:
        return self.url


RepositorySource = LocalSource | RemoteSource


@dataclass(frozen=True)
class Workspace:
    """Resolved, openable repository location.

    A workspace built from a RemoteSource owns a temporary directory holding
    the clone; a workspace built from a LocalSource owns nothing and points
    at the caller's directory.

    Attributes:
        source: The source this workspace was resolved from
        local_path: Filesystem path of an openable git repository
        temporary_handle: Temporary directory backing a clone (None for local)
    """

    source: RepositorySource
    local_path: Path
    temporary_handle: tempfile.TemporaryDirectory | None = None

    @property
    def is_temporary(self) -> bool:
        """Return True if this workspace is a disposable clone."""
        return self.temporary_handle is not None

    def release(self) -> None:
        """Remove the temporary clone, if any.

        Never touches a non-temporary workspace.
        """
        if self.temporary_handle is not None:
            self.temporary_handle.cleanup()
