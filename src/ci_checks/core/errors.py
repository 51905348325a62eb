"""Error types shared by the CI checks.

Every failure a check can report is one of the ``CheckError`` subclasses
below. The command layer catches them, prints the message and hints to
stderr and exits with status 1.
"""

from __future__ import annotations

__all__ = [
    "CheckError",
    "ConfigurationError",
    "InputFileError",
    "InvariantViolation",
    "CommandExecutionError",
]


class CheckError(RuntimeError):
    """Base class for failures reported by a CI check."""

    def __init__(self, message: str, hints: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hints = list(hints or [])

    def lines(self) -> list[str]:
        return [self.message, *self.hints]


class ConfigurationError(CheckError):
    """Missing required input or an invalid option value."""


class InputFileError(CheckError):
    """A file the check depends on is unreadable or malformed."""


class InvariantViolation(CheckError):
    """The checked property does not hold."""


class CommandExecutionError(CheckError):
    """An external command (git, npm) failed."""
