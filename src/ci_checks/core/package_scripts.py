"""Run a script declared in ``package.json`` through npm."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import subprocess
from typing import Any

from ci_checks.core.errors import InputFileError, InvariantViolation

__all__ = [
    "DEFAULT_MANIFEST",
    "DEFAULT_NPM",
    "EXPECTED_SUITES",
    "load_scripts",
    "require_script",
    "run_script",
]

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = "package.json"
DEFAULT_NPM = "npm"

EXPECTED_SUITES: dict[str, str] = {
    "test:tdd": "tests based on how the code works",
    "test:bdd": "tests based on scenarios derived from the specs",
    "test:e2e": "end-to-end tests derived from the specs",
    "test:coverage": "coverage report generation (coverage/coverage-summary.json)",
}


def load_scripts(manifest_path: Path) -> dict[str, Any]:
    """Return the manifest's ``scripts`` mapping, empty when absent."""
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise InputFileError(
            f"Unable to read package manifest at {manifest_path}: {exc.strerror or exc}"
        ) from exc
    except UnicodeDecodeError as exc:
        raise InputFileError(
            f"Unable to read package manifest at {manifest_path}: not valid UTF-8 ({exc.reason})"
        ) from exc
    except ValueError as exc:
        raise InputFileError(f"Invalid JSON in package manifest {manifest_path}: {exc}") from exc

    scripts = manifest.get("scripts") if isinstance(manifest, dict) else None
    return scripts if isinstance(scripts, dict) else {}


def require_script(scripts: dict[str, Any], name: str) -> None:
    if name in scripts:
        return
    raise InvariantViolation(
        f'Missing required npm script: "{name}".',
        hints=[
            "Define it in package.json.",
            "Expected suites:",
            *(f'- "{suite}": {meaning}.' for suite, meaning in EXPECTED_SUITES.items()),
        ],
    )


def run_script(name: str, cwd: Path | None = None, npm: str = DEFAULT_NPM) -> int:
    """Run ``npm run <name>`` with inherited stdio and return its exit code."""
    command = [npm, "run", name]
    logger.debug("running %s", " ".join(command))
    try:
        completed = subprocess.run(command, cwd=str(cwd) if cwd else None, check=False)
    except OSError as exc:
        logger.error("Unable to start %s: %s", npm, exc)
        return 1

    returncode = completed.returncode
    if not isinstance(returncode, int) or returncode < 0:
        # Killed by a signal: no exit status to mirror.
        return 1
    return returncode
