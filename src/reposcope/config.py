"""Reposcope configuration system.

Configuration is YAML-based with per-run CLI overrides (--format, --output,
--sequential, --ci). Supports environment variable substitution (${VAR}) in
config files.

The analysis engine never reads configuration itself: the CLI loads it and
passes explicit PipelineOptions into the engine.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.reposcope/config.yaml
3. ./reposcope.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from reposcope.pipeline import PipelineOptions

OUTPUT_FORMATS = {"text", "markdown", "json"}

# One worker per traversal (branches, history, tree)
MAX_WORKERS = 3

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class AnalysisConfig:
    """Traversal scheduling.

    Attributes:
        parallel: Run branch, history and tree traversals on worker threads
        max_workers: Worker thread count (1-3)
    """

    parallel: bool = True
    max_workers: int = MAX_WORKERS

    def __post_init__(self) -> None:
        """Validate analysis configuration."""
        if not 1 <= self.max_workers <= MAX_WORKERS:
            raise ValueError(
                f"analysis.max_workers must be between 1 and {MAX_WORKERS} "
                f"(got {self.max_workers})"
            )


@dataclass
class CloneConfig:
    """Remote clone settings.

    Attributes:
        temp_prefix: Prefix of temporary clone directories
        stall_timeout: Seconds a clone may transfer nothing before it is aborted (0 disables)
    """

    temp_prefix: str = "reposcope-"
    stall_timeout: int = 0

    def __post_init__(self) -> None:
        """Validate clone configuration."""
        if self.stall_timeout < 0:
            raise ValueError(f"clone.stall_timeout must be >= 0 (got {self.stall_timeout})")
        if not self.temp_prefix or os.sep in self.temp_prefix:
            raise ValueError(f"Invalid clone.temp_prefix: {self.temp_prefix!r}")


@dataclass
class OutputConfig:
    """Report output configuration.

    Attributes:
        format: Output format (text, markdown, json)
        path: Write the report to this file instead of stdout
    """

    format: str = "text"
    path: str | None = None

    def __post_init__(self) -> None:
        """Validate output format."""
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.format}. Valid: {sorted(OUTPUT_FORMATS)}"
            )


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        json_output: Use JSON log output
    """

    json_output: bool = False


@dataclass
class ReposcopeConfig:
    """Top-level Reposcope configuration.

    Attributes:
        analysis: Traversal scheduling
        clone: Remote clone settings
        output: Report format and destination
        ci: CI/CD settings
    """

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    clone: CloneConfig = field(default_factory=CloneConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def pipeline_options(self, parallel: bool | None = None) -> "PipelineOptions":
        """Build engine options from this configuration.

        Args:
            parallel: Override analysis.parallel (None keeps the config value)

        Returns:
            PipelineOptions for AnalysisPipeline
        """
        from reposcope.pipeline import PipelineOptions
        from reposcope.resolver import CloneOptions

        return PipelineOptions(
            parallel=self.analysis.parallel if parallel is None else parallel,
            max_workers=self.analysis.max_workers,
            clone=CloneOptions(
                temp_prefix=self.clone.temp_prefix,
                stall_timeout=self.clone.stall_timeout,
            ),
        )


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${REPOSCOPE_TMP} -> value of REPOSCOPE_TMP

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_PATTERN.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.reposcope/config.yaml
    2. ./reposcope.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".reposcope" / "config.yaml",
        start_path / "reposcope.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section, treating an empty section as {}."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def load_config_from_dict(data: dict[str, Any]) -> ReposcopeConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        ReposcopeConfig instance

    Raises:
        ValueError: If a value is invalid
    """
    data = substitute_env_vars(data)

    config = ReposcopeConfig()

    if "analysis" in data:
        analysis_data = _section(data, "analysis")
        config.analysis = AnalysisConfig(
            parallel=analysis_data.get("parallel", config.analysis.parallel),
            max_workers=int(analysis_data.get("max_workers", config.analysis.max_workers)),
        )

    if "clone" in data:
        clone_data = _section(data, "clone")
        config.clone = CloneConfig(
            temp_prefix=clone_data.get("temp_prefix", config.clone.temp_prefix),
            stall_timeout=int(clone_data.get("stall_timeout", config.clone.stall_timeout)),
        )

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputConfig(
            format=output_data.get("format", config.output.format),
            path=output_data.get("path", config.output.path),
        )

    if "ci" in data:
        ci_data = _section(data, "ci")
        config.ci = CIConfig(
            json_output=ci_data.get("json_output", False),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ReposcopeConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ReposcopeConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return ReposcopeConfig()

    with open(found_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {found_path}")

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Reposcope Configuration

# Traversal scheduling
analysis:
  parallel: true       # run branch/history/tree traversals on worker threads
  max_workers: 3       # 1-3

# Remote repositories are cloned into a temporary directory that is
# removed after every run
clone:
  temp_prefix: "reposcope-"
  stall_timeout: 0     # seconds without transfer before a clone is aborted (0 disables)

# Report output
output:
  format: "text"       # text, markdown, json
  # path: "repo-report.md"

# CI/CD settings
ci:
  json_output: false
'''
