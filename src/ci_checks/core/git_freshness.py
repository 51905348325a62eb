"""Branch freshness and linear history verification.

A branch is fresh when the tip of its base branch is an ancestor of its head
(the merge-base of the two equals the base tip) and no merge commits sit
between the base tip and the head.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import subprocess
from typing import Mapping

from ci_checks.core.errors import (
    CommandExecutionError,
    ConfigurationError,
    InvariantViolation,
)

__all__ = [
    "BranchContext",
    "MergeCommit",
    "FreshnessReport",
    "DEFAULT_BASE_BRANCH",
    "DEFAULT_REMOTE",
    "verify_branch_freshness",
]

logger = logging.getLogger(__name__)

DEFAULT_BASE_BRANCH = "master"
DEFAULT_REMOTE = "origin"
PULL_REQUEST_EVENT = "pull_request"


@dataclass(frozen=True)
class BranchContext:
    """Base/head references for one CI run."""

    event_name: str
    base_ref: str | None
    head_ref: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BranchContext":
        env = os.environ if environ is None else environ
        event_name = env.get("GITHUB_EVENT_NAME", "")
        if event_name == PULL_REQUEST_EVENT:
            base_ref = env.get("GITHUB_BASE_REF") or None
        else:
            base_ref = env.get("BASE_BRANCH") or DEFAULT_BASE_BRANCH
        head_ref = env.get("GITHUB_HEAD_REF") or None
        return cls(event_name=event_name, base_ref=base_ref, head_ref=head_ref)

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == PULL_REQUEST_EVENT

    @property
    def uses_remote_head(self) -> bool:
        return self.is_pull_request and bool(self.head_ref)


@dataclass(frozen=True)
class MergeCommit:
    sha: str
    subject: str

    def describe(self) -> str:
        return f"- {self.sha} {self.subject}"


@dataclass
class FreshnessReport:
    """Resolved revisions and the merge commits found between them."""

    base_ref: str
    base_tip: str
    head: str
    merge_base: str
    merge_commits: list[MergeCommit] = field(default_factory=list)

    @property
    def is_up_to_date(self) -> bool:
        return self.merge_base == self.base_tip

    @property
    def is_linear(self) -> bool:
        return not self.merge_commits


@dataclass
class _GitCommandResult:
    returncode: int
    stdout: str
    stderr: str


class _GitCommandFailed(Exception):
    pass


def _run_git(
    repo_root: Path,
    args: list[str],
    *,
    capture: bool = True,
    timeout: int = 120,
) -> _GitCommandResult:
    """Run git and normalize failure shape for deterministic handling."""
    logger.debug("git %s", " ".join(args))
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(repo_root),
            capture_output=capture,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
        return _GitCommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    except FileNotFoundError:
        return _GitCommandResult(
            returncode=127,
            stdout="",
            stderr="git executable not found on PATH",
        )
    except subprocess.TimeoutExpired:
        return _GitCommandResult(
            returncode=124,
            stdout="",
            stderr=f"git command timed out: git {' '.join(args)}",
        )


def _git_output(repo_root: Path, args: list[str]) -> str:
    result = _run_git(repo_root, args)
    if result.returncode != 0:
        stderr = result.stderr.strip()
        detail = f" ({stderr})" if stderr else ""
        raise _GitCommandFailed(f"command failed: git {' '.join(args)}{detail}")
    return result.stdout.strip()


def _fetch(repo_root: Path, remote: str, ref: str) -> None:
    # Progress goes straight to the CI log.
    result = _run_git(repo_root, ["fetch", "--no-tags", remote, ref], capture=False)
    if result.returncode != 0:
        detail = f" ({result.stderr.strip()})" if result.stderr.strip() else ""
        raise _GitCommandFailed(
            f"command failed: git fetch --no-tags {remote} {ref}{detail}"
        )


def _list_merge_commits(repo_root: Path, revision_range: str) -> list[MergeCommit]:
    result = _run_git(repo_root, ["rev-list", "--merges", revision_range])
    if result.returncode != 0:
        logger.debug("rev-list --merges failed, assuming no merges: %s", result.stderr.strip())
        return []

    commits: list[MergeCommit] = []
    for line in result.stdout.splitlines():
        sha = line.strip()
        if not sha:
            continue
        show = _run_git(repo_root, ["show", "-s", "--format=%s", sha])
        subject = show.stdout.strip() if show.returncode == 0 else ""
        commits.append(MergeCommit(sha=sha, subject=subject))
    return commits


def _resolve_report(
    context: BranchContext,
    base_ref: str,
    repo_root: Path,
    remote: str,
) -> FreshnessReport:
    _fetch(repo_root, remote, base_ref)
    if context.uses_remote_head:
        _fetch(repo_root, remote, context.head_ref)

    base_tip = _git_output(repo_root, ["rev-parse", f"{remote}/{base_ref}"])
    if context.uses_remote_head:
        head = _git_output(repo_root, ["rev-parse", f"{remote}/{context.head_ref}"])
    else:
        head = _git_output(repo_root, ["rev-parse", "HEAD"])
    merge_base = _git_output(repo_root, ["merge-base", head, base_tip])
    logger.debug("base_tip=%s head=%s merge_base=%s", base_tip, head, merge_base)

    return FreshnessReport(
        base_ref=base_ref,
        base_tip=base_tip,
        head=head,
        merge_base=merge_base,
    )


def verify_branch_freshness(
    context: BranchContext,
    repo_root: Path | None = None,
    *,
    remote: str = DEFAULT_REMOTE,
) -> FreshnessReport:
    """Verify the head is rebased on the base tip and has linear history.

    Raises:
        ConfigurationError: no base branch could be resolved.
        CommandExecutionError: fetching or resolving a revision failed.
        InvariantViolation: the branch is behind its base or contains merges.
    """
    base_ref = context.base_ref
    if not base_ref:
        raise ConfigurationError("Missing base branch reference.")

    root = (repo_root or Path.cwd()).resolve()

    try:
        report = _resolve_report(context, base_ref, root, remote)
    except _GitCommandFailed as exc:
        raise CommandExecutionError(
            "Failed to verify branch freshness and linear history.",
            hints=[str(exc)],
        ) from exc

    if not report.is_up_to_date:
        raise InvariantViolation(
            f"Branch is behind {remote}/{base_ref}.",
            hints=[
                f"Expected merge-base {report.base_tip}, got {report.merge_base}.",
                "Please rebase on the latest base branch.",
            ],
        )

    report.merge_commits = _list_merge_commits(root, f"{remote}/{base_ref}..{report.head}")
    if not report.is_linear:
        raise InvariantViolation(
            "Linear history required: merge commits found in branch.",
            hints=[
                *(commit.describe() for commit in report.merge_commits),
                "Please rebase and remove merge commits before pushing.",
            ],
        )

    return report
