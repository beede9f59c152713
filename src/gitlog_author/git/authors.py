"""Resolve a free-text author query to that author's commits.

Commit metadata spells names inconsistently (middle names, doubled spaces,
case), so the resolver tries a ladder of ``git log --author`` patterns and
keeps the first one that returns anything:

    1. the trimmed query, regex-escaped
    2. name tokens joined by ``.*`` (non-email queries only)
    3. pattern 2 or the exact query, case-insensitive

Subjects and bodies are then fetched per commit in fixed-size batches on a
thread pool, through the shared commit detail cache.
"""

import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..cache import LRUCache, details_key, message_key
from ..cancellation import CancelToken, check_cancelled
from ..exceptions import ErrorCode, GitCommandError, ValidationError
from ..logging_config import get_logger
from ..patterns import is_excluded, is_under
from .executor import GitExecutor
from .models import Author, Commit
from .repository import list_tracked_files

logger = get_logger(__name__)

UNSAFE_DATE_CHARS = re.compile(r"[<>|&;$]")
HASH_RE = re.compile(r"^[0-9a-f]+$", re.IGNORECASE)
SHORTLOG_RE = re.compile(r"^\s*(\d+)\s+(.+?)\s+<(.+)>$")
_ERE_SPECIAL = re.compile(r"([.*+?^${}()|\[\]\\])")

# Keeps each ``git log`` argv well under the OS limit when excluding dirs
PATHSPEC_CHUNK_SIZE = 1000

# %x00 separates subject from body; subjects may contain any printable text
MESSAGE_FORMAT = "--format=%s%x00%b"


@dataclass(frozen=True)
class AuthorPattern:
    pattern: str
    ignore_case: bool = False


def escape_pattern(text: str) -> str:
    """Escape POSIX extended regex metacharacters."""
    return _ERE_SPECIAL.sub(r"\\\1", text)


def build_author_patterns(query: str) -> list[AuthorPattern]:
    """Return the ordered ``--author`` pattern ladder for a query."""
    trimmed = query.strip()
    exact = escape_pattern(trimmed)
    if "@" in trimmed:
        return [AuthorPattern(exact), AuthorPattern(exact, ignore_case=True)]

    flexible = ".*".join(escape_pattern(token) for token in trimmed.split())
    patterns = [AuthorPattern(exact)]
    if flexible != exact:
        patterns.append(AuthorPattern(flexible))
    patterns.append(AuthorPattern(f"{flexible}|{exact}", ignore_case=True))
    return patterns


def validate_date_expression(value: Optional[str], name: str) -> None:
    """Reject date expressions carrying shell metacharacters."""
    if value and UNSAFE_DATE_CHARS.search(value):
        raise ValidationError(
            f"Invalid {name} date: {value}",
            ErrorCode.INVALID_DATE_FORMAT,
            {name: value},
        )


def parse_shortlog(output: str) -> list[Author]:
    authors = []
    for line in output.splitlines():
        match = SHORTLOG_RE.match(line)
        if match:
            count, name, email = match.groups()
            authors.append(Author(name=name.strip(), email=email.strip(), commit_count=int(count)))
    return authors


def find_matching_authors(authors: Iterable[Author], query: str) -> list[Author]:
    """Case-insensitive substring match on name or email."""
    needle = query.strip().lower()
    return [a for a in authors if needle in a.name.lower() or needle in a.email.lower()]


def _chunks(items: Sequence, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class AuthorResolver:
    """Turns author queries into commits and serves per-commit details.

    Args:
        executor: Git runner
        cache: Shared commit detail cache
        batch_size: Commits per message lookup batch
        batch_pause: Seconds to wait between batches
        max_workers: Concurrent git processes within a batch
    """

    def __init__(
        self,
        executor: GitExecutor,
        cache: LRUCache,
        batch_size: int = 50,
        batch_pause: float = 0.05,
        max_workers: int = 8,
    ):
        self.executor = executor
        self.cache = cache
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self.max_workers = max_workers
        self.pathspec_chunk_size = PATHSPEC_CHUNK_SIZE

    # ── Commit resolution ─────────────────────────────────────────────

    def resolve_commits(
        self,
        author: str,
        since: Optional[str] = None,
        until: Optional[str] = None,
        include_dirs: Sequence[str] = (),
        exclude_dirs: Sequence[str] = (),
        cancel_token: Optional[CancelToken] = None,
    ) -> list[Commit]:
        """Return the author's non-merge commits, newest first.

        Raises:
            ValidationError: Empty author or unsafe date expression.
            GitCommandError: When the last pattern of the ladder fails.
        """
        if not author or not author.strip():
            raise ValidationError("Author name or email is required", ErrorCode.INVALID_AUTHOR)
        validate_date_expression(since, "since")
        validate_date_expression(until, "until")

        paths = self._path_scope(include_dirs, exclude_dirs)
        if paths is not None and not paths:
            logger.info("No tracked files left after applying directory exclusions")
            return []

        entries = self._match_log_entries(author, since, until, paths)
        if not entries:
            return []

        commits = self._attach_messages(entries, cancel_token)
        commits.sort(key=lambda c: c.timestamp, reverse=True)
        return commits

    def _path_scope(
        self, include_dirs: Sequence[str], exclude_dirs: Sequence[str]
    ) -> Optional[list[str]]:
        """Pathspecs for the log query; None means the whole repository."""
        if include_dirs:
            return [d for d in include_dirs if d]
        if exclude_dirs:
            return [
                path
                for path in list_tracked_files(self.executor)
                if not is_excluded(path) and not any(is_under(path, d) for d in exclude_dirs)
            ]
        return None

    def _log_args(
        self, pattern: AuthorPattern, since: Optional[str], until: Optional[str], paths
    ) -> list[str]:
        args = [
            "log",
            f"--author={pattern.pattern}",
            "--extended-regexp",
        ]
        if pattern.ignore_case:
            args.append("--regexp-ignore-case")
        args += [
            "--pretty=format:%H|%aI",
            "--no-merges",
            "--no-notes",
            "--all",
            "--date-order",
        ]
        if since:
            args.append(f"--since={since}")
        if until:
            args.append(f"--until={until}")
        args.append("--")
        args += paths if paths is not None else ["."]
        return args

    def _match_log_entries(self, author, since, until, paths) -> list[tuple[str, str]]:
        patterns = build_author_patterns(author)
        last_error: Optional[GitCommandError] = None

        for index, pattern in enumerate(patterns):
            try:
                output = self._run_log(pattern, since, until, paths)
            except GitCommandError as e:
                if e.code in (ErrorCode.GIT_NOT_FOUND, ErrorCode.NOT_GIT_REPO):
                    raise
                logger.debug(f"Author pattern {pattern.pattern!r} failed: {e.message}")
                last_error = e if index == len(patterns) - 1 else None
                continue

            last_error = None
            entries = self._parse_log(output)
            if entries:
                logger.debug(f"Author pattern {pattern.pattern!r} matched {len(entries)} commits")
                return entries

        if last_error is not None:
            raise last_error
        return []

    def _run_log(self, pattern: AuthorPattern, since, until, paths) -> str:
        """One ``git log`` per slice of a long path list, outputs concatenated."""
        if paths is None or len(paths) <= self.pathspec_chunk_size:
            return self.executor.run("git", self._log_args(pattern, since, until, paths))
        outputs = [
            self.executor.run("git", self._log_args(pattern, since, until, chunk))
            for chunk in _chunks(paths, self.pathspec_chunk_size)
        ]
        return "\n".join(outputs)

    @staticmethod
    def _parse_log(output: str) -> list[tuple[str, str]]:
        seen = set()
        entries = []
        for line in output.splitlines():
            commit_hash, sep, date = line.strip().partition("|")
            if not sep or not commit_hash or commit_hash in seen:
                continue
            seen.add(commit_hash)
            entries.append((commit_hash, date))
        return entries

    def _attach_messages(
        self, entries: list[tuple[str, str]], cancel_token: Optional[CancelToken]
    ) -> list[Commit]:
        commits: list[Commit] = []
        workers = max(1, min(self.max_workers, self.batch_size))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for batch_number, batch in enumerate(_chunks(entries, self.batch_size)):
                check_cancelled(cancel_token)
                if batch_number and self.batch_pause:
                    time.sleep(self.batch_pause)
                messages = list(pool.map(lambda entry: self.get_commit_message(entry[0]), batch))
                for (commit_hash, date), (subject, body) in zip(batch, messages):
                    commits.append(Commit(hash=commit_hash, date=date, subject=subject, body=body))
        return commits

    # ── Per-commit details ────────────────────────────────────────────

    def get_commit_message(self, commit_hash: str) -> tuple[str, str]:
        """Return ``(subject, body)``; empty strings when git fails."""
        try:
            return self.cache.get_or_compute(
                message_key(commit_hash), lambda: self._fetch_message(commit_hash)
            )
        except GitCommandError as e:
            logger.debug(f"Message lookup failed for {commit_hash[:7]}: {e.message}")
            return "", ""

    def _fetch_message(self, commit_hash: str) -> tuple[str, str]:
        output = self.executor.run("git", ["show", "-s", MESSAGE_FORMAT, "--no-notes", commit_hash])
        subject, _, body = output.partition("\x00")
        return subject.strip(), body.strip()

    def get_commit_details(self, commit_hash: str) -> str:
        """Return the ``--stat`` summary of one commit, cached.

        Raises:
            ValidationError: INVALID_HASH_FORMAT for non-hex input.
            GitCommandError: COMMIT_NOT_FOUND when git prints nothing.
        """
        if not commit_hash or not HASH_RE.match(commit_hash):
            raise ValidationError(
                f"Invalid commit hash: {commit_hash}",
                ErrorCode.INVALID_HASH_FORMAT,
                {"hash": commit_hash},
            )
        return self.cache.get_or_compute(details_key(commit_hash), lambda: self._fetch_details(commit_hash))

    def _fetch_details(self, commit_hash: str) -> str:
        output = self.executor.run(
            "git",
            [
                "show",
                commit_hash,
                "--stat=1000,800",
                "--format=",
                "--no-color",
                "--no-notes",
                "--no-abbrev-commit",
            ],
        )
        if not output.strip():
            raise GitCommandError(
                f"Commit not found: {commit_hash}",
                ErrorCode.COMMIT_NOT_FOUND,
                {"hash": commit_hash},
            )
        return output

    # ── Repository-wide queries ───────────────────────────────────────

    def list_authors(self) -> list[Author]:
        """Every distinct name/email pair with its commit count."""
        output = self.executor.run("git", ["shortlog", "-sne", "--all", "--no-merges"])
        return parse_shortlog(output)
