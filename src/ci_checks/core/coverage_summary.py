"""Line-coverage threshold check against a JSON coverage summary.

Coverage tools disagree on where the line percentage lives, so a small
ordered list of key paths is tried and the first finite number wins:

* ``total.lines.pct`` (istanbul/nyc ``json-summary``)
* ``totals.lines.percent`` (cargo-llvm-cov summary)
* ``data[0].totals.lines.percent`` (``llvm-cov export --summary-only``)
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import math
from pathlib import Path
from typing import Any, Union

from ci_checks.core.errors import ConfigurationError, InputFileError, InvariantViolation

__all__ = [
    "COVERAGE_KEY_PATHS",
    "DEFAULT_MIN_COVERAGE",
    "DEFAULT_SUMMARY_PATH",
    "CoverageResult",
    "check_coverage",
    "extract_line_coverage",
    "format_percent",
    "load_summary",
    "parse_minimum",
]

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_PATH = "coverage/coverage-summary.json"
DEFAULT_MIN_COVERAGE = 80.0

KeyPath = tuple[Union[str, int], ...]

COVERAGE_KEY_PATHS: tuple[tuple[str, KeyPath], ...] = (
    ("total.lines.pct", ("total", "lines", "pct")),
    ("totals.lines.percent", ("totals", "lines", "percent")),
    ("data[0].totals.lines.percent", ("data", 0, "totals", "lines", "percent")),
)


@dataclass(frozen=True)
class CoverageResult:
    percent: float
    minimum: float
    key_path: str
    path: Path

    @property
    def passed(self) -> bool:
        return self.percent >= self.minimum


def format_percent(value: float) -> str:
    """Render ``85.0`` as ``85`` and leave fractional values alone."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_minimum(raw: str | float | int) -> float:
    """Parse the ``--min`` value; reject anything that is not a finite number."""
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid --min value: {raw}") from exc
    if not math.isfinite(value):
        raise ConfigurationError(f"Invalid --min value: {raw}")
    return value


def _hint_for(path: Path, cwd: Path) -> str:
    try:
        display = path.relative_to(cwd)
    except ValueError:
        display = path
    return f"Ensure test:coverage generates {display.as_posix()}."


def load_summary(path: str | Path, cwd: Path | None = None) -> tuple[Path, Any]:
    """Read and parse the summary file, resolved against ``cwd``."""
    base = (cwd or Path.cwd()).resolve()
    resolved = (base / Path(path)).resolve()
    hint = _hint_for(resolved, base)

    try:
        content = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputFileError(
            f"Unable to read coverage summary at {resolved}: {exc.strerror or exc}",
            hints=[hint],
        ) from exc
    except UnicodeDecodeError as exc:
        raise InputFileError(
            f"Unable to read coverage summary at {resolved}: not valid UTF-8 ({exc.reason})",
            hints=[hint],
        ) from exc

    try:
        return resolved, json.loads(content)
    except ValueError as exc:
        # JSONDecodeError, or an integer past the int-to-str digit limit.
        raise InputFileError(
            f"Invalid JSON in coverage summary {resolved}: {exc}",
            hints=[hint],
        ) from exc


def _lookup(document: Any, key_path: KeyPath) -> Any:
    node = document
    for key in key_path:
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
            node = node[key]
        else:
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
    return node


def _as_finite(value: Any) -> float | None:
    # bool is an int subclass; JSON true is not a percentage.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def extract_line_coverage(summary: Any) -> tuple[float, str] | None:
    """Return ``(percent, key_path)`` for the first key path holding a finite number."""
    for label, key_path in COVERAGE_KEY_PATHS:
        candidate = _as_finite(_lookup(summary, key_path))
        logger.debug("coverage key %s -> %r", label, candidate)
        if candidate is not None:
            return candidate, label
    return None


def check_coverage(
    path: str | Path = DEFAULT_SUMMARY_PATH,
    minimum: float = DEFAULT_MIN_COVERAGE,
    cwd: Path | None = None,
) -> CoverageResult:
    """Compare the summary's line coverage against ``minimum``.

    Raises:
        InputFileError: the summary cannot be read or parsed.
        InvariantViolation: no known key path matched, or coverage is too low.
    """
    resolved, summary = load_summary(path, cwd)

    found = extract_line_coverage(summary)
    if found is None:
        expected = ", ".join(label for label, _ in COVERAGE_KEY_PATHS)
        raise InvariantViolation(
            "Invalid coverage summary format.",
            hints=[f"Expected one of: {expected}"],
        )

    percent, key_path = found
    result = CoverageResult(percent=percent, minimum=minimum, key_path=key_path, path=resolved)
    if not result.passed:
        raise InvariantViolation(
            f"Coverage check failed: {format_percent(percent)}% < "
            f"{format_percent(minimum)}% (minimum required)."
        )
    return result
