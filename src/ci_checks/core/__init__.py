"""Check implementations, independent of the command-line layer."""

from .errors import (
    CheckError,
    CommandExecutionError,
    ConfigurationError,
    InputFileError,
    InvariantViolation,
)

__all__ = [
    "CheckError",
    "CommandExecutionError",
    "ConfigurationError",
    "InputFileError",
    "InvariantViolation",
]
