"""Tests for configuration loading and merging."""

import os

import pytest

from gitlog_author.config import GitLogConfig, load_config
from gitlog_author.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user config files and GITLOG_AUTHOR_* variables out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)

    for key in list(os.environ):
        if key.startswith("GITLOG_AUTHOR_"):
            monkeypatch.delenv(key)


class TestDefaults:
    """Default values."""

    def test_defaults(self):
        config = load_config()
        assert config.output_dir == "git-logs"
        assert config.cache_size == 1000
        assert config.batch_size == 50
        assert config.diff_batch_size == 3
        assert config.diff_context_lines == 5
        assert config.stream_mode == "auto"
        assert config.skip_fetch is False
        assert config.verbosity == "normal"

    def test_frozen(self):
        config = GitLogConfig()
        with pytest.raises(Exception):
            config.batch_size = 5  # type: ignore[misc]


class TestValidation:
    """__post_init__ rejects out-of-range values."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("cache_size", 0),
            ("batch_size", 0),
            ("diff_context_lines", -1),
            ("stream_mode", "sometimes"),
            ("verbosity", "loud"),
            ("output_dir", ""),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            GitLogConfig(**{field: value})

    def test_load_config_wraps_value_errors(self):
        with pytest.raises(ConfigurationError):
            load_config(batch_size=0)

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("no_such_field = 1\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)


class TestMerging:
    """Source priority: files < environment < overrides."""

    def test_project_config_discovered(self, tmp_path):
        (tmp_path / "gitlog-author.toml").write_text('output_dir = "reports"\n')
        assert load_config().output_dir == "reports"

    def test_explicit_file_beats_project_file(self, tmp_path):
        (tmp_path / "gitlog-author.toml").write_text("batch_size = 10\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("batch_size = 20\n")
        assert load_config(config_file=explicit).batch_size == 20

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "missing.toml")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "gitlog-author.toml").write_text("batch_size = 10\n")
        monkeypatch.setenv("GITLOG_AUTHOR_BATCH_SIZE", "30")
        monkeypatch.setenv("GITLOG_AUTHOR_SKIP_FETCH", "yes")
        config = load_config()
        assert config.batch_size == 30
        assert config.skip_fetch is True

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("GITLOG_AUTHOR_SKIP_FETCH", "maybe")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_none_overrides_are_ignored(self, tmp_path):
        (tmp_path / "gitlog-author.toml").write_text('output_dir = "reports"\n')
        assert load_config(output_dir=None).output_dir == "reports"

    def test_cli_overrides_win(self, monkeypatch):
        monkeypatch.setenv("GITLOG_AUTHOR_DIFF_CONTEXT_LINES", "2")
        assert load_config(diff_context_lines=9).diff_context_lines == 9

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
