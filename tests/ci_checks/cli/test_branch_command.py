"""CLI tests for the branch freshness command."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from ci_checks.cli.commands import branch
from tests.utils import commit, git

runner = CliRunner()


def test_up_to_date_branch_passes(remote_repo, monkeypatch) -> None:
    monkeypatch.chdir(remote_repo.work)
    git(remote_repo.work, "checkout", "-b", "feature")
    commit(remote_repo.work, "feature.txt")

    result = runner.invoke(branch.app, [])

    assert result.exit_code == 0
    assert "Branch is up to date with origin/master and has linear history." in result.output


def test_stale_branch_fails_with_both_revisions(remote_repo, monkeypatch) -> None:
    work = remote_repo.work
    monkeypatch.chdir(work)
    git(work, "branch", "feature")
    base_tip = commit(work, "base.txt")
    git(work, "push", "origin", "master")
    git(work, "checkout", "feature")
    commit(work, "feature.txt")

    result = runner.invoke(branch.app, [])

    assert result.exit_code == 1
    assert "Branch is behind origin/master." in result.output
    assert base_tip in result.output
    assert remote_repo.initial in result.output


def test_base_branch_variable_selects_base(remote_repo, monkeypatch) -> None:
    work = remote_repo.work
    monkeypatch.chdir(work)
    git(work, "checkout", "-b", "develop")
    commit(work, "develop.txt")
    git(work, "push", "origin", "develop")
    git(work, "checkout", "-b", "feature")
    commit(work, "feature.txt")
    monkeypatch.setenv("BASE_BRANCH", "develop")

    result = runner.invoke(branch.app, [])

    assert result.exit_code == 0
    assert "origin/develop" in result.output


def test_pull_request_without_base_ref_fails_fast(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")

    with patch("ci_checks.core.git_freshness._run_git") as run_git:
        result = runner.invoke(branch.app, [])

    assert result.exit_code == 1
    assert "Missing base branch reference." in result.output
    run_git.assert_not_called()


def test_fetch_failure_is_reported(remote_repo, monkeypatch) -> None:
    monkeypatch.chdir(remote_repo.work)

    result = runner.invoke(branch.app, ["--remote", "upstream"])

    assert result.exit_code == 1
    assert "Failed to verify branch freshness and linear history." in result.output
    assert "git fetch --no-tags upstream master" in result.output
