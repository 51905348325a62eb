"""Shared console, logging and error reporting helpers for the CLI."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from typer.core import TyperCommand

from ci_checks.core.errors import CheckError

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

DEBUG_ENV = "CI_CHECKS_DEBUG"


def _parser_usage_error() -> type[Exception]:
    """Return the ``UsageError`` of the Click that ``TyperCommand`` is built on.

    Older Typer releases build on the standalone ``click`` package, newer ones
    ship their own copy under ``typer._click``; the classes are not shared.
    """
    command_base = next(base for base in TyperCommand.__mro__ if base.__name__ == "Command")
    return sys.modules[command_base.__module__].UsageError


UsageError = _parser_usage_error()


class CheckCommand(TyperCommand):
    """Command whose usage errors exit with status 1 like every other failure."""

    def parse_args(self, ctx: Any, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except UsageError as exc:
            exc.exit_code = 1
            raise


def debug_requested() -> bool:
    return os.getenv(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(debug: bool = False) -> None:
    """Send ``ci_checks`` debug records to stderr when debugging is on."""
    if not (debug or debug_requested()):
        return
    package_logger = logging.getLogger("ci_checks")
    if any(isinstance(h, RichHandler) for h in package_logger.handlers):
        return
    handler = RichHandler(console=err_console, show_path=False, markup=False)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def report_failure(error: CheckError) -> None:
    for line in error.lines():
        err_console.print(line, markup=False, soft_wrap=True)


def report_success(message: str) -> None:
    console.print(message, markup=False, soft_wrap=True)


__all__ = [
    "CheckCommand",
    "UsageError",
    "configure_logging",
    "console",
    "debug_requested",
    "err_console",
    "report_failure",
    "report_success",
]
