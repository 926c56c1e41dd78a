"""Report rendering.

Jinja2 templates for the text and markdown report layouts, plus JSON output.
"""

from reposcope.templates.renderer import FORMATS, ReportRenderer

__all__ = ["FORMATS", "ReportRenderer"]
