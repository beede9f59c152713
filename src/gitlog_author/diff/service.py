"""Fetch commit diffs from git and turn them into change sets."""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, Optional, Sequence

from ..cache import LRUCache, diff_key
from ..cancellation import CancelToken, check_cancelled
from ..exceptions import GitLogError
from ..git.executor import GitExecutor
from ..git.models import Commit
from ..logging_config import get_logger
from .models import ChangeSet
from .parser import parse_diff_stream, parse_diff_text

logger = get_logger(__name__)

MB = 1024 * 1024


class ChangeSetService:
    """Diff retrieval plus batched change-set reconstruction.

    Buffered diffs go through the shared cache; streamed diffs never do.
    """

    def __init__(
        self,
        executor: GitExecutor,
        cache: LRUCache,
        batch_size: int = 3,
        context_lines: int = 5,
        single_diff_limit_mb: float = 50.0,
        total_diff_limit_mb: float = 200.0,
    ):
        self.executor = executor
        self.cache = cache
        self.batch_size = batch_size
        self.context_lines = context_lines
        self.single_diff_limit_mb = single_diff_limit_mb
        self.total_diff_limit_mb = total_diff_limit_mb

    def _diff_args(self, ref: str, other: Optional[str]) -> list[str]:
        common = [
            "--no-color",
            "--no-ext-diff",
            "-M",
            f"--unified={self.context_lines}",
            "--src-prefix=a/",
            "--dst-prefix=b/",
        ]
        if other:
            return ["diff", *common, ref, other]
        return ["show", *common, "--format=", "--no-notes", ref]

    def get_diff(self, ref: str, other: Optional[str] = None) -> str:
        """Full diff text of one commit, or between two references."""
        return self.cache.get_or_compute(
            diff_key(ref, other), lambda: self.executor.run("git", self._diff_args(ref, other))
        )

    def stream_diff(
        self, ref: str, other: Optional[str] = None, cancel_token: Optional[CancelToken] = None
    ) -> Iterator[bytes]:
        return self.executor.stream("git", self._diff_args(ref, other), cancel_token=cancel_token)

    def categorize_commit(
        self, commit: Commit, stream: bool = False, cancel_token: Optional[CancelToken] = None
    ) -> ChangeSet:
        if stream:
            return parse_diff_stream(self.stream_diff(commit.hash, cancel_token=cancel_token), cancel_token)
        return parse_diff_text(self.get_diff(commit.hash))

    def batch_process(
        self,
        commits: Sequence[Commit],
        stream: bool = False,
        cancel_token: Optional[CancelToken] = None,
    ) -> Dict[str, ChangeSet]:
        """Change sets for every commit, keyed by hash in commit order."""
        results: Dict[str, ChangeSet] = {}
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(commits), self.batch_size):
                check_cancelled(cancel_token)
                batch = commits[start:start + self.batch_size]
                change_sets = pool.map(
                    lambda c: self.categorize_commit(c, stream=stream, cancel_token=cancel_token), batch
                )
                for commit, change_set in zip(batch, change_sets):
                    results[commit.hash] = change_set
        return results

    def should_stream(self, commits: Sequence[Commit], mode: str = "auto") -> bool:
        """Decide between streamed and buffered diff parsing.

        ``"true"``/``"false"`` force the choice. In auto mode the first
        commit's diff is sampled: stream when it alone exceeds the single
        limit or when size × commit count exceeds the total limit.
        """
        if mode == "true":
            return True
        if mode == "false" or not commits:
            return False

        try:
            sample = self.get_diff(commits[0].hash)
        except GitLogError as e:
            logger.warning(f"Could not determine diff size, using buffered mode: {e.message}")
            return False

        size_mb = len(sample.encode("utf-8")) / MB
        if size_mb > self.single_diff_limit_mb:
            return True
        return size_mb * len(commits) > self.total_diff_limit_mb
