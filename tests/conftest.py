"""Shared test fixtures for gitlog-author tests."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow and git markers."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")
    config.addinivalue_line("markers", "git: test needs a git executable")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given; skip git tests without git."""
    skip_git = pytest.mark.skip(reason="git not found")
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    run_slow = config.getoption("--run-slow")
    for item in items:
        if item.get_closest_marker("git") and shutil.which("git") is None:
            item.add_marker(skip_git)
        if "slow" in item.keywords and not run_slow:
            item.add_marker(skip_slow)


class GitRepo:
    """A throwaway repository with helpers to write dated commits."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args, env=None) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout

    def init(self) -> "GitRepo":
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.email", "test@test.com")
        self.git("config", "user.name", "Test")
        self.git("config", "commit.gpgsign", "false")
        return self

    def write(self, relpath: str, content: str) -> None:
        target = self.path / relpath
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def commit(
        self,
        message: str,
        author: str = "Jane Doe <jane@example.com>",
        date: str = "2024-02-05T10:00:00+00:00",
        files=None,
        body: str = "",
    ) -> str:
        """Write ``files`` (path -> content, None deletes), commit, return the hash."""
        for relpath, content in (files or {}).items():
            if content is None:
                self.git("rm", "-q", relpath)
            else:
                self.write(relpath, content)
                self.git("add", relpath)

        env = dict(os.environ, GIT_AUTHOR_DATE=date, GIT_COMMITTER_DATE=date)
        args = ["commit", "-q", "--allow-empty", f"--author={author}", "-m", message]
        if body:
            args += ["-m", body]
        self.git(*args, env=env)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    """An initialized, empty repository."""
    return GitRepo(tmp_path / "repo").init()


@pytest.fixture
def sample_repo(git_repo):
    """Repository with a small, dated history by two authors.

    Jane Doe commits under two spellings of her name; John Smith makes
    one fix in between.
    """
    git_repo.commit(
        "feat: add parser",
        date="2024-02-01T10:00:00+00:00",
        files={
            "src/parser.py": "def parse(text):\n    return text.split()\n",
            "README.md": "# Sample\n",
        },
    )
    git_repo.commit(
        "fix: handle empty input",
        author="John Smith <john@example.com>",
        date="2024-02-02T14:00:00+00:00",
        files={"src/parser.py": "def parse(text):\n    return (text or '').split()\n"},
    )
    git_repo.commit(
        "docs: describe usage",
        author="Jane Q. Doe <jane@example.com>",
        date="2024-02-03T20:00:00+00:00",
        files={"README.md": "# Sample\n\nCall `parse` with a string.\n"},
        body="Explain the parser entry point.\nMention *empty* input.",
    )
    git_repo.commit(
        "refactor: move parser into lib",
        date="2024-02-05T09:00:00+00:00",
        files={
            "src/parser.py": None,
            "lib/reader.py": "import re\n\n\ndef read(stream):\n    return re.split(r'\\s+', stream.read())\n",
        },
    )
    return git_repo
