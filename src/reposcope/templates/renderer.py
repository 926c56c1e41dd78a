"""Report renderer.

Renders an AnalysisReport as plain text (the classic console summary),
markdown or JSON. Text and markdown use Jinja2 templates shipped with the
package; output is deterministic for a given report.
"""

import json
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from reposcope.models.report import AnalysisReport

logger = logging.getLogger(__name__)

TEMPLATES = {
    "text": "report.txt.j2",
    "markdown": "report.md.j2",
}

FORMATS = (*TEMPLATES, "json")


def short_sha(sha: str | None, length: int = 12) -> str:
    """Abbreviate a commit id for display."""
    if not sha:
        return "N/A"
    return sha[:length]


def md_cell(text: str) -> str:
    """Escape a value for use inside a markdown table cell."""
    return str(text).replace("|", "\\|").replace("\n", " ")


class ReportRenderer:
    """Renders analysis reports.

    Usage:
        renderer = ReportRenderer()
        text = renderer.render(report, "markdown")
    """

    def __init__(self) -> None:
        """Initialize the renderer with the package templates."""
        self._env = Environment(
            loader=PackageLoader("reposcope", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["short_sha"] = short_sha
        self._env.filters["md_cell"] = md_cell

    def render(self, report: AnalysisReport, output_format: str = "text") -> str:
        """Render a report.

        Args:
            report: Report to render
            output_format: text, markdown or json

        Returns:
            Rendered report

        Raises:
            ValueError: If the format is unknown
        """
        if output_format == "json":
            return json.dumps(report.to_dict(), indent=2) + "\n"

        if output_format not in TEMPLATES:
            raise ValueError(f"Unknown output format: {output_format}. Valid: {list(FORMATS)}")

        template = self._env.get_template(TEMPLATES[output_format])
        return template.render(**self._build_context(report))

    def _build_context(self, report: AnalysisReport) -> dict[str, Any]:
        """Build the template rendering context."""
        return {
            "repository_path": report.repository_path,
            "source": report.source,
            "head_commit": report.head_commit,
            "branches": list(report.branches),
            "commit_count": report.commit_count,
            "contributors": report.contributors_by_count(),
            "file_count": report.file_count,
            "skipped_branches": report.skipped_branches,
            "skipped_commits": report.skipped_commits,
        }

    def render_to_file(
        self,
        report: AnalysisReport,
        output_path: Path,
        output_format: str = "text",
    ) -> Path:
        """Render a report and write it to a file.

        Args:
            report: Report to render
            output_path: Destination file (parent directories are created)
            output_format: text, markdown or json

        Returns:
            Path to written file
        """
        content = self.render(report, output_format)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote report to %s", output_path)
        return output_path
