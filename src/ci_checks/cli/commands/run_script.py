"""Run a named package.json script, failing with guidance when it is missing."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ci_checks.cli.helpers import CheckCommand, configure_logging, err_console, report_failure
from ci_checks.core.errors import CheckError
from ci_checks.core.package_scripts import DEFAULT_MANIFEST, DEFAULT_NPM, load_scripts, require_script, run_script

app = typer.Typer(add_completion=False, help="Run a script declared in package.json")

USAGE = "Usage: run-npm-script <script-name>"


def run_package_script(
    script_name: Optional[str] = typer.Argument(None, help="Script declared in package.json (e.g. test:tdd)"),
    manifest: str = typer.Option(DEFAULT_MANIFEST, "--manifest", help="Package manifest, relative to the working directory"),
    npm: str = typer.Option(DEFAULT_NPM, "--npm", envvar="NPM_BIN", help="npm executable"),
) -> None:
    """Run SCRIPT_NAME with npm and exit with its status."""
    configure_logging()

    if not script_name:
        err_console.print(USAGE, markup=False)
        raise typer.Exit(1)

    cwd = Path.cwd()
    try:
        scripts = load_scripts(cwd / manifest)
        require_script(scripts, script_name)
    except CheckError as exc:
        report_failure(exc)
        raise typer.Exit(1) from exc

    raise typer.Exit(run_script(script_name, cwd=cwd, npm=npm))


app.command(cls=CheckCommand)(run_package_script)


__all__ = ["USAGE", "app", "run_package_script"]
