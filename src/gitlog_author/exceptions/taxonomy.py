"""Error codes for gitlog-author.

Code groups:
    Input validation  - INVALID_AUTHOR, INVALID_DATE_FORMAT, INVALID_ARGS,
                        INVALID_HASH_FORMAT, INVALID_TREND_PERIOD,
                        INVALID_DATE_RANGE, INVALID_CONFIG
    Git execution     - INVALID_COMMAND, GIT_NOT_FOUND, GIT_EXECUTION_ERROR,
                        NOT_GIT_REPO, EMPTY_REPOSITORY, INVALID_GIT_REF,
                        GIT_OPERATION_FAILED, COMMIT_NOT_FOUND
    Pipeline          - DIFF_STREAM_ERROR, OPERATION_CANCELLED
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-checkable error codes carried by every raised error."""

    # Input validation
    INVALID_AUTHOR = "INVALID_AUTHOR"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_ARGS = "INVALID_ARGS"
    INVALID_HASH_FORMAT = "INVALID_HASH_FORMAT"
    INVALID_TREND_PERIOD = "INVALID_TREND_PERIOD"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_CONFIG = "INVALID_CONFIG"

    # Git execution
    INVALID_COMMAND = "INVALID_COMMAND"
    GIT_NOT_FOUND = "GIT_NOT_FOUND"
    GIT_EXECUTION_ERROR = "GIT_EXECUTION_ERROR"
    NOT_GIT_REPO = "NOT_GIT_REPO"
    EMPTY_REPOSITORY = "EMPTY_REPOSITORY"
    INVALID_GIT_REF = "INVALID_GIT_REF"
    GIT_OPERATION_FAILED = "GIT_OPERATION_FAILED"
    COMMIT_NOT_FOUND = "COMMIT_NOT_FOUND"

    # Pipeline
    DIFF_STREAM_ERROR = "DIFF_STREAM_ERROR"
    OPERATION_CANCELLED = "OPERATION_CANCELLED"
