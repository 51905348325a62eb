"""Coverage threshold command."""

from __future__ import annotations

import typer

from ci_checks.cli.helpers import CheckCommand, configure_logging, report_failure, report_success
from ci_checks.core.coverage_summary import (
    DEFAULT_SUMMARY_PATH,
    check_coverage,
    format_percent,
    parse_minimum,
)
from ci_checks.core.errors import CheckError

app = typer.Typer(add_completion=False, help="Check line coverage against a minimum")


def check_coverage_summary(
    file: str = typer.Option(DEFAULT_SUMMARY_PATH, "--file", help="Coverage summary JSON, relative to the working directory"),
    minimum: str = typer.Option("80", "--min", help="Minimum line coverage percentage"),
) -> None:
    """Fail when the line coverage in the summary is below the minimum."""
    configure_logging()

    try:
        min_value = parse_minimum(minimum)
        result = check_coverage(file, min_value)
    except CheckError as exc:
        report_failure(exc)
        raise typer.Exit(1) from exc

    report_success(
        f"Coverage check passed: {format_percent(result.percent)}% >= {format_percent(result.minimum)}%."
    )


app.command(cls=CheckCommand)(check_coverage_summary)


__all__ = ["app", "check_coverage_summary"]
