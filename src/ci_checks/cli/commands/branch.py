"""Branch freshness command: rebased on the base branch, no merge commits."""

from __future__ import annotations

import typer

from ci_checks.cli.helpers import CheckCommand, configure_logging, report_failure, report_success
from ci_checks.core.errors import CheckError
from ci_checks.core.git_freshness import DEFAULT_REMOTE, BranchContext, verify_branch_freshness

app = typer.Typer(add_completion=False, help="Verify the branch is rebased and has linear history")


def check_branch(
    remote: str = typer.Option(DEFAULT_REMOTE, "--remote", help="Remote to fetch base/head branches from"),
) -> None:
    """Verify the branch is up to date with its base branch and has linear history.

    Branches come from GITHUB_EVENT_NAME, GITHUB_BASE_REF, GITHUB_HEAD_REF and
    BASE_BRANCH (default: master).
    """
    configure_logging()
    context = BranchContext.from_env()

    try:
        report = verify_branch_freshness(context, remote=remote)
    except CheckError as exc:
        report_failure(exc)
        raise typer.Exit(1) from exc

    report_success(f"Branch is up to date with {remote}/{report.base_ref} and has linear history.")


app.command(cls=CheckCommand)(check_branch)


__all__ = ["app", "check_branch"]
