"""CLI command modules for ci-checks.

Each module also exposes its own single-command ``app`` used by the
standalone console scripts.
"""

from __future__ import annotations

import typer

from ci_checks.cli.helpers import CheckCommand

from . import branch, coverage, run_script


def register_commands(app: typer.Typer) -> None:
    """Attach all check commands to the umbrella Typer app."""
    app.command("branch", cls=CheckCommand)(branch.check_branch)
    app.command("coverage", cls=CheckCommand)(coverage.check_coverage_summary)
    app.command("run-script", cls=CheckCommand)(run_script.run_package_script)


__all__ = ["register_commands"]
