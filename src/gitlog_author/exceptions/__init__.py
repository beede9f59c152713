"""Exception hierarchy for gitlog-author."""

from .base import (
    ConfigurationError,
    DiffStreamError,
    GitCommandError,
    GitLogError,
    OperationCancelled,
    ValidationError,
)
from .taxonomy import ErrorCode

__all__ = [
    "GitLogError",
    "ValidationError",
    "GitCommandError",
    "ConfigurationError",
    "DiffStreamError",
    "OperationCancelled",
    "ErrorCode",
]
