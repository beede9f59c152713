"""Base exception for gitlog-author."""

from typing import Any, Dict, Optional

from .taxonomy import ErrorCode


class GitLogError(Exception):
    """Base exception for all gitlog-author errors.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        details: Additional context (command, exit code, offending value...)
    """

    default_code = ErrorCode.GIT_OPERATION_FAILED

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_json(self) -> Dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(GitLogError):
    """Bad user input. Raised immediately and never retried."""

    default_code = ErrorCode.INVALID_ARGS


class GitCommandError(GitLogError):
    """A git invocation failed or could not be started."""

    default_code = ErrorCode.GIT_OPERATION_FAILED


class ConfigurationError(GitLogError):
    """Invalid configuration file, environment variable or override."""

    default_code = ErrorCode.INVALID_CONFIG


class DiffStreamError(GitLogError):
    """A streamed diff could not be read to completion."""

    default_code = ErrorCode.DIFF_STREAM_ERROR


class OperationCancelled(GitLogError):
    """Raised at the next checkpoint after a cancel token fired."""

    default_code = ErrorCode.OPERATION_CANCELLED
