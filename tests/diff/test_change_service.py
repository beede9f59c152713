"""Tests for commit diff retrieval and batch categorisation."""

from unittest.mock import Mock

import pytest

from gitlog_author.cache import LRUCache
from gitlog_author.cancellation import CancelToken
from gitlog_author.diff import ChangeSetService
from gitlog_author.exceptions import GitCommandError, OperationCancelled
from gitlog_author.git import Commit, GitExecutor

SMALL_DIFF = "diff --git a/a.py b/a.py\n@@ -1 +1 @@\n-x\n+y\n"


def make_commits(*hashes):
    return [Commit(hash=h, date="2024-02-01T10:00:00+00:00", subject=h) for h in hashes]


def make_service(executor, **kwargs):
    return ChangeSetService(executor, LRUCache(50), **kwargs)


class TestShouldStream:
    """Buffered vs streamed decision."""

    def test_forced_modes(self):
        service = make_service(Mock())
        commits = make_commits("a1")
        assert service.should_stream(commits, "true") is True
        assert service.should_stream(commits, "false") is False

    def test_auto_small_diff_buffers(self):
        executor = Mock()
        executor.run.return_value = SMALL_DIFF
        assert make_service(executor).should_stream(make_commits("a1", "b2"), "auto") is False

    def test_auto_large_single_diff_streams(self):
        executor = Mock()
        executor.run.return_value = "x" * 2048
        service = make_service(executor, single_diff_limit_mb=0.001)
        assert service.should_stream(make_commits("a1"), "auto") is True

    def test_auto_total_estimate_streams(self):
        executor = Mock()
        executor.run.return_value = "x" * 1024
        service = make_service(executor, single_diff_limit_mb=1.0, total_diff_limit_mb=0.005)
        assert service.should_stream(make_commits(*[f"c{i}" for i in range(10)]), "auto") is True

    def test_sampling_failure_falls_back_to_buffered(self):
        executor = Mock()
        executor.run.side_effect = GitCommandError("boom")
        assert make_service(executor).should_stream(make_commits("a1"), "auto") is False

    def test_no_commits(self):
        assert make_service(Mock()).should_stream([], "auto") is False


class TestBufferedDiffs:
    """Buffered diffs go through the cache."""

    def test_diff_cached(self):
        executor = Mock()
        executor.run.return_value = SMALL_DIFF
        service = make_service(executor)
        service.get_diff("a1")
        service.get_diff("a1")
        assert executor.run.call_count == 1

    def test_context_lines_passed(self):
        executor = Mock()
        executor.run.return_value = SMALL_DIFF
        make_service(executor, context_lines=2).get_diff("a1")
        args = executor.run.call_args.args[1]
        assert args[0] == "show"
        assert "--unified=2" in args
        assert args[-1] == "a1"

    def test_ref_to_ref_diff(self):
        executor = Mock()
        executor.run.return_value = SMALL_DIFF
        make_service(executor).get_diff("main", "feature")
        args = executor.run.call_args.args[1]
        assert args[0] == "diff"
        assert args[-2:] == ["main", "feature"]

    def test_batch_process_keeps_commit_order(self):
        executor = Mock()
        executor.run.return_value = SMALL_DIFF
        service = make_service(executor, batch_size=2)
        commits = make_commits("a1", "b2", "c3", "d4", "e5")

        results = service.batch_process(commits)

        assert list(results) == ["a1", "b2", "c3", "d4", "e5"]
        assert all(list(cs.modified) == ["a.py"] for cs in results.values())

    def test_batch_process_cancelled(self):
        token = CancelToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            make_service(Mock()).batch_process(make_commits("a1"), cancel_token=token)

    def test_streamed_categorisation(self):
        executor = Mock()
        executor.stream.return_value = iter([SMALL_DIFF[:10].encode(), SMALL_DIFF[10:].encode()])
        change_set = make_service(executor).categorize_commit(make_commits("a1")[0], stream=True)
        assert change_set.modified == {"a.py": [["@@ -1 +1 @@", "-x", "+y"]]}
        executor.run.assert_not_called()


@pytest.mark.git
class TestRealDiffs:
    """Against throwaway repositories."""

    def test_add_and_delete(self, sample_repo):
        head = sample_repo.git("rev-parse", "HEAD").strip()
        service = ChangeSetService(GitExecutor(str(sample_repo.path)), LRUCache(10))
        change_set = service.categorize_commit(Commit(hash=head, date="2024-02-05T09:00:00+00:00"))

        assert list(change_set.added) == ["lib/reader.py"]
        assert list(change_set.deleted) == ["src/parser.py"]
        assert change_set.renamed == {}

    def test_root_commit_lists_added_files(self, sample_repo):
        root = sample_repo.git("rev-list", "--max-parents=0", "HEAD").strip()
        service = ChangeSetService(GitExecutor(str(sample_repo.path)), LRUCache(10))
        change_set = service.categorize_commit(Commit(hash=root, date="2024-02-01T10:00:00+00:00"))
        assert sorted(change_set.added) == ["README.md", "src/parser.py"]

    def test_rename_detected(self, git_repo):
        content = "".join(f"line {i}\n" for i in range(20))
        git_repo.commit("add", files={"old.txt": content})
        head = git_repo.commit("move", files={"old.txt": None, "new.txt": content + "line 20\n"})

        service = ChangeSetService(GitExecutor(str(git_repo.path)), LRUCache(10))
        change_set = service.categorize_commit(Commit(hash=head, date="2024-02-05T10:00:00+00:00"))
        assert list(change_set.renamed) == ["old.txt → new.txt"]

    def test_streamed_matches_buffered(self, sample_repo):
        executor = GitExecutor(str(sample_repo.path))
        service = ChangeSetService(executor, LRUCache(10))
        hashes = sample_repo.git("rev-list", "HEAD").split()
        for commit_hash in hashes:
            commit = Commit(hash=commit_hash, date="2024-02-01T10:00:00+00:00")
            assert service.categorize_commit(commit, stream=True) == service.categorize_commit(commit)
