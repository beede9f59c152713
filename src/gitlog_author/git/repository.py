"""Repository-level checks run before any pipeline work starts."""

from ..exceptions import ErrorCode, GitCommandError
from ..logging_config import get_logger
from .executor import GitExecutor

logger = get_logger(__name__)


def is_git_repository(executor: GitExecutor) -> bool:
    """Check that the working directory is inside a non-empty repository.

    Returns:
        False when git reports the directory is not a repository.

    Raises:
        GitCommandError: EMPTY_REPOSITORY when the repository has no commits;
            GIT_NOT_FOUND and other executor failures propagate.
    """
    try:
        inside = executor.run("git", ["rev-parse", "--is-inside-work-tree"]).strip()
    except GitCommandError as e:
        if e.code is ErrorCode.NOT_GIT_REPO:
            return False
        raise
    if inside != "true":
        return False

    try:
        count = int(executor.run("git", ["rev-list", "--count", "--all"]).strip() or 0)
    except (GitCommandError, ValueError) as e:
        raise GitCommandError(
            "Repository has no commits",
            ErrorCode.EMPTY_REPOSITORY,
            {"error": str(e)},
        ) from e
    if count == 0:
        raise GitCommandError("Repository has no commits", ErrorCode.EMPTY_REPOSITORY)
    return True


def ensure_repository(executor: GitExecutor) -> None:
    """Raise NOT_GIT_REPO unless :func:`is_git_repository` holds."""
    if not is_git_repository(executor):
        raise GitCommandError(
            "Not a git repository. Please run this command from within a git repository.",
            ErrorCode.NOT_GIT_REPO,
            {"path": executor.repo_path},
        )


def fetch_latest_changes(executor: GitExecutor) -> bool:
    """Run ``git fetch --all``. Failures are logged, never raised."""
    try:
        executor.run("git", ["fetch", "--all"])
        return True
    except GitCommandError as e:
        logger.warning(f"Could not fetch latest changes: {e.message}")
        return False


def list_tracked_files(executor: GitExecutor) -> list[str]:
    output = executor.run("git", ["ls-files"])
    return [line for line in output.splitlines() if line]
