from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pytest

from tests.utils import commit, git, run

CI_ENV_VARS = ("GITHUB_EVENT_NAME", "GITHUB_BASE_REF", "GITHUB_HEAD_REF", "BASE_BRANCH", "CI_CHECKS_DEBUG", "NPM_BIN")


@dataclass
class RemoteRepo:
    """A working repository with an ``origin`` bare remote, on branch ``master``."""

    work: Path
    origin: Path
    initial: str


@pytest.fixture(autouse=True)
def clean_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # CI runners export these; tests set them explicitly.
    for name in CI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def remote_repo(tmp_path: Path) -> Iterator[RemoteRepo]:
    origin = tmp_path / "origin.git"
    origin.mkdir()
    run(["git", "init", "--bare"], cwd=origin)
    git(origin, "symbolic-ref", "HEAD", "refs/heads/master")

    work = tmp_path / "work"
    work.mkdir()
    run(["git", "init"], cwd=work)
    git(work, "symbolic-ref", "HEAD", "refs/heads/master")
    git(work, "config", "user.name", "CI Checks")
    git(work, "config", "user.email", "ci@example.com")
    git(work, "config", "commit.gpgsign", "false")
    initial = commit(work, "README.md", "init")
    git(work, "remote", "add", "origin", str(origin))
    git(work, "push", "origin", "master")
    yield RemoteRepo(work=work, origin=origin, initial=initial)
