"""Run git as a subprocess, buffered or streamed.

This is the only place that spawns processes. Callers pass the command name
and an argument list; only ``git`` is accepted, and failures surface as
``GitCommandError`` with a code that tells "git missing", "not a repository",
"bad revision" and "non-zero exit" apart.
"""

import os
import subprocess
import sys
import tempfile
from typing import Iterator, Optional, Sequence

from ..cancellation import CancelToken, check_cancelled
from ..exceptions import ErrorCode, GitCommandError
from ..logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_COMMANDS = frozenset({"git"})
STREAM_CHUNK_SIZE = 1024 * 1024  # 1 MB

_BAD_REF_MARKERS = (
    "bad revision",
    "unknown revision",
    "bad object",
    "invalid object name",
    "ambiguous argument",
)


def _git_environment() -> dict:
    env = dict(os.environ)
    env.update(
        {
            "LANG": "en_US.UTF-8",
            "LC_ALL": "en_US.UTF-8",
            "GIT_TERMINAL_PROMPT": "0",
        }
    )
    return env


def _classify_failure(command: str, args: Sequence[str], returncode: int, stderr: str) -> GitCommandError:
    """Map a non-zero git exit to a typed error."""
    lowered = stderr.lower()
    details = {"command": f"{command} {' '.join(args[:3])}".strip(), "exit_code": returncode}
    if "not a git repository" in lowered:
        return GitCommandError(
            "Not a git repository. Please run this command from within a git repository.",
            ErrorCode.NOT_GIT_REPO,
            details,
        )
    if any(marker in lowered for marker in _BAD_REF_MARKERS):
        return GitCommandError(
            f"Invalid git reference: {stderr.strip()}",
            ErrorCode.INVALID_GIT_REF,
            details,
        )
    details["stderr"] = stderr.strip()
    return GitCommandError(
        f"Git command failed with exit code {returncode}",
        ErrorCode.GIT_OPERATION_FAILED,
        details,
    )


class GitExecutor:
    """Allow-listed git runner bound to one working directory.

    Args:
        repo_path: Directory git runs in
        timeout: Seconds before a buffered call is abandoned
    """

    def __init__(self, repo_path: str = ".", timeout: int = 120):
        self.repo_path = str(repo_path)
        self.timeout = timeout

    def _resolve(self, command: str) -> str:
        if command not in ALLOWED_COMMANDS:
            raise GitCommandError(
                "Only git commands are allowed",
                ErrorCode.INVALID_COMMAND,
                {"command": command},
            )
        return "git.exe" if sys.platform == "win32" else "git"

    def run(self, command: str, args: Sequence[str]) -> str:
        """Run a command to completion and return its stdout as text.

        Raises:
            GitCommandError: On a disallowed command, missing executable,
                timeout or non-zero exit.
        """
        executable = self._resolve(command)
        logger.debug(f"{command} {' '.join(args)}")
        try:
            result = subprocess.run(
                [executable, *args],
                cwd=self.repo_path,
                env=_git_environment(),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitCommandError(
                "Git is not installed or not in PATH",
                ErrorCode.GIT_NOT_FOUND,
                {"error": str(e)},
            ) from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"Git command timed out after {self.timeout}s",
                ErrorCode.GIT_OPERATION_FAILED,
                {"command": f"{command} {' '.join(args[:3])}", "timeout": self.timeout},
            ) from e
        except OSError as e:
            raise GitCommandError(
                f"Failed to execute git command: {e}",
                ErrorCode.GIT_EXECUTION_ERROR,
                {"error": str(e)},
            ) from e

        if result.returncode != 0:
            raise _classify_failure(command, args, result.returncode, result.stderr)
        return result.stdout

    def stream(
        self,
        command: str,
        args: Sequence[str],
        chunk_size: int = STREAM_CHUNK_SIZE,
        cancel_token: Optional[CancelToken] = None,
    ) -> Iterator[bytes]:
        """Yield stdout in raw byte chunks while the process runs.

        The child is killed if the consumer stops early or the token is
        cancelled. A non-zero exit raises after the output is drained.
        stderr is spooled to a temporary file so a chatty child can never
        block on a full pipe while stdout is being read.
        """
        executable = self._resolve(command)
        logger.debug(f"{command} {' '.join(args)} (streaming)")
        stderr_file = tempfile.TemporaryFile()
        try:
            proc = subprocess.Popen(
                [executable, *args],
                cwd=self.repo_path,
                env=_git_environment(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
            )
        except FileNotFoundError as e:
            stderr_file.close()
            raise GitCommandError(
                "Git is not installed or not in PATH",
                ErrorCode.GIT_NOT_FOUND,
                {"error": str(e)},
            ) from e
        except OSError as e:
            stderr_file.close()
            raise GitCommandError(
                f"Failed to execute git command: {e}",
                ErrorCode.GIT_EXECUTION_ERROR,
                {"error": str(e)},
            ) from e

        finished = False
        try:
            assert proc.stdout is not None
            while True:
                check_cancelled(cancel_token)
                chunk = proc.stdout.read(chunk_size)
                if not chunk:
                    break
                yield chunk

            returncode = proc.wait()
            finished = True
            if returncode != 0:
                stderr_file.seek(0)
                stderr = stderr_file.read().decode("utf-8", errors="replace")
                raise _classify_failure(command, args, returncode, stderr)
        finally:
            if not finished:
                proc.kill()
                proc.wait()
            if proc.stdout:
                proc.stdout.close()
            stderr_file.close()
