"""Preflight validation.

GitPython drives the ``git`` executable for everything it does, and refuses
to import when no usable git is found. The preflight check reports on both
before any analysis starts, so a missing git is a clear error up front rather
than an ImportError halfway through.
"""

import importlib.metadata
import importlib.util
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Any

# Oldest git whose clone/for-each-ref/rev-list behavior the analysis relies on
MIN_GIT_VERSION = (2, 0)


@dataclass
class ToolCheck:
    """Result of checking a single tool.

    Attributes:
        name: Tool name
        available: Whether tool is available
        version: Tool version if available
        required: Whether tool is required for this run
        path: Path to executable if available
        message: Status message (human-readable context)
    """

    name: str
    available: bool
    version: str | None = None
    required: bool = True
    path: str | None = None
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required tools are available
        checks: Individual tool check results
        errors: Error messages for missing required tools
        warnings: Warning messages for missing optional tools
    """

    success: bool = True
    checks: list[ToolCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: ToolCheck) -> None:
        """Add a tool check result."""
        self.checks.append(check)

        if not check.available:
            if check.required:
                self.success = False
                self.errors.append(f"Required tool not found: {check.name}")
            else:
                self.warnings.append(f"Optional tool not found: {check.name}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "available": c.available,
                    "version": c.version,
                    "required": c.required,
                    "path": c.path,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


def parse_git_version(output: str) -> tuple[int, ...] | None:
    """Extract the numeric version from ``git --version`` output.

    Examples:
        >>> parse_git_version("git version 2.43.0")
        (2, 43, 0)
        >>> parse_git_version("git version 2.39.3 (Apple Git-146)")
        (2, 39, 3)
    """
    parts = output.split()
    if len(parts) < 3 or parts[:2] != ["git", "version"]:
        return None

    numbers: list[int] = []
    for token in parts[2].split("."):
        if not token.isdigit():
            break
        numbers.append(int(token))
    return tuple(numbers) or None


class PreflightChecker:
    """Validates git availability before analysis.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all()
        if not result.success:
            sys.exit(1)
    """

    def __init__(self, timeout: int = 10) -> None:
        """Initialize preflight checker.

        Args:
            timeout: Timeout in seconds for version checks
        """
        self.timeout = timeout

    def check_command_available(self, command: str) -> tuple[bool, str | None]:
        """Check if a command is available in PATH.

        Returns:
            Tuple of (available, path)
        """
        path = shutil.which(command)
        return path is not None, path

    def get_command_version(
        self,
        command: str,
        version_args: list[str] | None = None,
    ) -> str | None:
        """Get the first line of a command's version output.

        Args:
            command: Command to get version for
            version_args: Arguments to get version (default: ["--version"])

        Returns:
            Version string if available, None otherwise
        """
        if version_args is None:
            version_args = ["--version"]

        try:
            result = subprocess.run(
                [command, *version_args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
            return None

        if result.returncode != 0:
            return None
        output = result.stdout.strip() or result.stderr.strip()
        return output.split("\n")[0] if output else None

    def check_git(self, required: bool = True) -> ToolCheck:
        """Check that a recent enough git executable is on PATH."""
        available, path = self.check_command_available("git")
        if not available:
            return ToolCheck(
                name="git",
                available=False,
                required=required,
                message="Install git: https://git-scm.com/downloads",
            )

        version = self.get_command_version("git")
        parsed = parse_git_version(version or "")
        if parsed is not None and parsed < MIN_GIT_VERSION:
            minimum = ".".join(str(n) for n in MIN_GIT_VERSION)
            return ToolCheck(
                name="git",
                available=False,
                version=version,
                required=required,
                path=path,
                message=f"git {minimum} or newer required",
            )

        return ToolCheck(
            name="git",
            available=True,
            version=version,
            required=required,
            path=path,
            message="Version control backend",
        )

    def check_gitpython(self, required: bool = True) -> ToolCheck:
        """Check that GitPython is installed and can find git."""
        if importlib.util.find_spec("git") is None:
            return ToolCheck(
                name="GitPython",
                available=False,
                required=required,
                message="Install with: pip install GitPython",
            )

        try:
            import git  # noqa: F401
        except ImportError as e:
            return ToolCheck(
                name="GitPython",
                available=False,
                required=required,
                message=f"GitPython cannot use git: {e}",
            )

        return ToolCheck(
            name="GitPython",
            available=True,
            version=importlib.metadata.version("GitPython"),
            required=required,
            message="Python git bindings",
        )

    def check_all(self) -> PreflightResult:
        """Run all preflight checks.

        Returns:
            PreflightResult with every check
        """
        result = PreflightResult()
        result.add_check(self.check_git())
        result.add_check(self.check_gitpython())
        return result
