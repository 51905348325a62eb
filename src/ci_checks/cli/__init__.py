"""Command-line layer for ci-checks."""

from .helpers import CheckCommand, configure_logging, console, err_console, report_failure

__all__ = [
    "CheckCommand",
    "configure_logging",
    "console",
    "err_console",
    "report_failure",
]
