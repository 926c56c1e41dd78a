"""Reposcope utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: git and GitPython availability checks
"""

from reposcope.utils.logging import configure_from_cli, get_logger, setup_logging
from reposcope.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "configure_from_cli",
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
