"""Reposcope CLI interface.

Commands:
- analyze: Summarize a repository (local path or remote URL)
- check: Validate that git and GitPython are usable
- init: Write a default configuration file

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output, no interactive prompts
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from reposcope import __version__
from reposcope.config import OUTPUT_FORMATS, ReposcopeConfig, create_default_config, load_config
from reposcope.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="reposcope",
    help="Summarize a git repository: branches, commits, contributors and files",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: ReposcopeConfig | None = None
_ci_mode = False
_logger = get_logger()

SOURCE_PROMPT = "Enter the path or URL to the Git repository"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"reposcope {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode (JSON logs, no prompts)",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Reposcope - Git repository summary tool.

    Reports branches, commit count, per-author commit counts and the number
    of files tracked at HEAD, for a local repository or a remote URL.
    """
    global _config, _ci_mode

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)
    _ci_mode = ci

    try:
        _config = load_config(config_path=config)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    if _config.config_path:
        _logger.debug(f"Loaded config from: {_config.config_path}")

    if _config.ci.json_output and not ci:
        _ci_mode = True
        configure_from_cli(verbose=verbose, quiet=quiet, ci=True)


def prompt_for_source() -> str:
    """Ask for a repository path or URL until a non-blank one is given."""
    while True:
        value = typer.prompt(SOURCE_PROMPT, default="", show_default=False).strip()
        if value:
            return value
        typer.echo("Please enter a valid path or URL.")


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    source: Annotated[
        str | None,
        typer.Argument(
            help="Repository path or clone URL (prompted for when omitted)",
            show_default=False,
        ),
    ] = None,
    format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: text, markdown, json",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the report to a file instead of stdout",
            dir_okay=False,
        ),
    ] = None,
    sequential: Annotated[
        bool,
        typer.Option(
            "--sequential",
            help="Run the traversals one after another instead of on worker threads",
        ),
    ] = False,
) -> None:
    """Analyze a git repository.

    A SOURCE that exists on disk is analyzed in place; anything else is
    cloned into a temporary directory that is removed afterwards.

    Exit codes:
        0: Report produced
        1: Repository could not be resolved or analyzed
    """
    from reposcope.errors import AnalysisStage, RepositoryAnalysisError
    from reposcope.pipeline import AnalysisPipeline
    from reposcope.templates import ReportRenderer

    config = _config or ReposcopeConfig()

    output_format = format or config.output.format
    if output_format not in OUTPUT_FORMATS:
        _logger.error(f"Invalid format: {output_format}. Use one of {sorted(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    output_path = output or (Path(config.output.path) if config.output.path else None)

    if source is None or not source.strip():
        if _ci_mode:
            _logger.error("No repository given (prompting is disabled in CI mode)")
            raise typer.Exit(1)
        source = prompt_for_source()

    pipeline = AnalysisPipeline(config.pipeline_options(parallel=False if sequential else None))

    try:
        report = pipeline.run(source.strip())
    except RepositoryAnalysisError as e:
        if e.stage is AnalysisStage.RESOLVE:
            _logger.error(f"Error preparing repository: {e.message}")
        else:
            _logger.error(f"Error analyzing repository [{e.stage.value}]: {e.message}")
        raise typer.Exit(1)

    renderer = ReportRenderer()
    if output_path is not None:
        written = renderer.render_to_file(report, output_path, output_format)
        typer.echo(f"Report written to: {written}")
    else:
        typer.echo(renderer.render(report, output_format), nl=False)


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Validate that git and GitPython are usable.

    Exit codes:
        0: All required tools available
        1: One or more required tools missing
    """
    from reposcope.utils.preflight import PreflightChecker

    result = PreflightChecker().check_all()

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        raise typer.Exit(0 if result.success else 1)

    typer.echo("\nPreflight Check Results\n")
    for check_result in result.checks:
        status = "ok" if check_result.available else "MISSING"
        version_str = f" ({check_result.version})" if check_result.version else ""
        typer.echo(f"  [{status}] {check_result.name}{version_str}")
        if check_result.available and check_result.path:
            typer.echo(f"     path: {check_result.path}")
        elif not check_result.available:
            typer.echo(f"     {check_result.message}")
    typer.echo()

    if not result.success:
        typer.echo("Preflight check FAILED")
        for error in result.errors:
            typer.echo(f"   - {error}")
        raise typer.Exit(1)

    typer.echo("All preflight checks passed")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Write a default .reposcope/config.yaml in the current directory."""
    config_dir = Path(".reposcope")
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")
    typer.echo(f"Reposcope configuration initialized: {config_file}")


if __name__ == "__main__":
    app()
