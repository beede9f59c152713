"""Tests for the error hierarchy and cancellation checkpoints."""

import pytest

from gitlog_author.cancellation import CancelToken, check_cancelled
from gitlog_author.exceptions import (
    ConfigurationError,
    DiffStreamError,
    ErrorCode,
    GitCommandError,
    GitLogError,
    OperationCancelled,
    ValidationError,
)


class TestErrorCode:
    """Codes are plain strings matching their names."""

    def test_values_match_names(self):
        for code in ErrorCode:
            assert code.value == code.name

    def test_validation_codes_present(self):
        names = {code.name for code in ErrorCode}
        assert {
            "INVALID_AUTHOR",
            "INVALID_DATE_FORMAT",
            "INVALID_ARGS",
            "INVALID_HASH_FORMAT",
            "INVALID_TREND_PERIOD",
            "INVALID_DATE_RANGE",
        } <= names


class TestGitLogError:
    """Base error carries message, code and details."""

    def test_default_code_per_subclass(self):
        assert ValidationError("x").code == ErrorCode.INVALID_ARGS
        assert GitCommandError("x").code == ErrorCode.GIT_OPERATION_FAILED
        assert ConfigurationError("x").code == ErrorCode.INVALID_CONFIG
        assert DiffStreamError("x").code == ErrorCode.DIFF_STREAM_ERROR
        assert OperationCancelled("x").code == ErrorCode.OPERATION_CANCELLED

    def test_explicit_code_overrides_default(self):
        err = ValidationError("bad author", ErrorCode.INVALID_AUTHOR)
        assert err.code == ErrorCode.INVALID_AUTHOR

    def test_all_errors_share_base(self):
        for cls in (ValidationError, GitCommandError, ConfigurationError, DiffStreamError):
            assert issubclass(cls, GitLogError)

    def test_str_includes_details(self):
        err = GitCommandError("git failed", details={"exit_code": 128})
        assert str(err) == "git failed (exit_code=128)"
        assert err.message == "git failed"

    def test_str_without_details(self):
        assert str(ValidationError("nope")) == "nope"

    def test_to_json(self):
        err = ValidationError("bad", ErrorCode.INVALID_DATE_FORMAT, {"value": "tomorrowish"})
        assert err.to_json() == {
            "error_code": "INVALID_DATE_FORMAT",
            "message": "bad",
            "details": {"value": "tomorrowish"},
        }


class TestCancelToken:
    """Cooperative cancellation."""

    def test_not_cancelled_initially(self):
        token = CancelToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel_raises_at_checkpoint(self):
        token = CancelToken()
        token.cancel("interrupted by user")
        assert token.cancelled
        with pytest.raises(OperationCancelled) as exc_info:
            token.raise_if_cancelled()
        assert exc_info.value.details["reason"] == "interrupted by user"

    def test_check_cancelled_accepts_none(self):
        check_cancelled(None)

    def test_wait_returns_early_when_cancelled(self):
        token = CancelToken()
        token.cancel()
        assert token.wait(5.0) is True
