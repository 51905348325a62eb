"""
ci-checks - small continuous-integration gates.

Usage:
    ci-checks branch
    ci-checks coverage --file coverage/coverage-summary.json --min 80
    ci-checks run-script test:tdd
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

import typer

from ci_checks.cli.commands import register_commands
from ci_checks.cli.helpers import configure_logging, console

try:
    __version__ = version("ci-checks")
except PackageNotFoundError:
    __version__ = "0.0.0"

app = typer.Typer(
    name="ci-checks",
    help="Continuous-integration gates: branch freshness, coverage threshold, npm scripts",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ci-checks {__version__}", markup=False)
        raise typer.Exit()


@app.callback()
def callback(
    debug: bool = typer.Option(False, "--debug", help="Log every git/npm invocation to stderr"),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Continuous-integration gates."""
    configure_logging(debug)


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
