"""Configuration loading and management for gitlog-author.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in GitLogConfig)
    2. Global config (~/.gitlog-author.toml)
    3. Project config (./gitlog-author.toml)
    4. Explicit config file (--config)
    5. Environment variables (GITLOG_AUTHOR_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(batch_size=20)
    >>> config.batch_size
    20
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError

Verbosity = Literal["quiet", "normal", "verbose"]
StreamMode = Literal["auto", "true", "false"]

ENV_PREFIX = "GITLOG_AUTHOR_"
GLOBAL_CONFIG_NAME = ".gitlog-author.toml"
PROJECT_CONFIG_NAME = "gitlog-author.toml"


@dataclass(frozen=True)
class GitLogConfig:
    """Runtime configuration for one gitlog-author invocation.

    Attributes:
        Output:
            output_dir: Directory (relative to cwd) receiving Markdown reports
            report_chunk_size: Commits rendered concurrently per report chunk

        Commit lookups:
            cache_size: Capacity of the in-memory commit detail cache
            batch_size: Commits per message/stat lookup batch
            batch_pause_seconds: Pause between lookup batches
            max_workers: Concurrent git processes within a batch
            git_timeout_seconds: Timeout for a single buffered git call

        Review diffs:
            diff_batch_size: Commits whose diffs are parsed concurrently
            diff_context_lines: Unified context lines requested from git
            stream_mode: auto | true | false
            stream_single_diff_mb: Auto mode streams when one diff exceeds this
            stream_total_diff_mb: Auto mode streams when the estimate exceeds this

        Behaviour:
            skip_fetch: Do not run `git fetch --all` before reporting
            verbosity: Logging verbosity level
    """

    # Output
    output_dir: str = "git-logs"
    report_chunk_size: int = 15

    # Commit lookups
    cache_size: int = 1000
    batch_size: int = 50
    batch_pause_seconds: float = 0.05
    max_workers: int = 8
    git_timeout_seconds: int = 120

    # Review diffs
    diff_batch_size: int = 3
    diff_context_lines: int = 5
    stream_mode: StreamMode = "auto"
    stream_single_diff_mb: float = 50.0
    stream_total_diff_mb: float = 200.0

    # Behaviour
    skip_fetch: bool = False
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.output_dir:
            raise ValueError("output_dir must not be empty")
        if self.report_chunk_size < 1:
            raise ValueError("report_chunk_size must be at least 1")

        if self.cache_size < 1:
            raise ValueError("cache_size must be at least 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.batch_pause_seconds < 0:
            raise ValueError("batch_pause_seconds must be non-negative")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.git_timeout_seconds < 1:
            raise ValueError("git_timeout_seconds must be at least 1")

        if self.diff_batch_size < 1:
            raise ValueError("diff_batch_size must be at least 1")
        if self.diff_context_lines < 0:
            raise ValueError("diff_context_lines must be non-negative")
        if self.stream_mode not in ("auto", "true", "false"):
            raise ValueError("stream_mode must be one of: auto, true, false")
        if self.stream_single_diff_mb <= 0 or self.stream_total_diff_mb <= 0:
            raise ValueError("stream size thresholds must be positive")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of: quiet, normal, verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> GitLogConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated GitLogConfig instance

    Raises:
        ConfigurationError: If a config source is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_source(global_config, "global config"))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_source(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_source(config_file, "config file"))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GitLogConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_toml_source(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}", details={"path": str(path)})


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GITLOG_AUTHOR_* environment variables.

    Every GitLogConfig field has a matching variable, e.g.
    GITLOG_AUTHOR_BATCH_SIZE=20 or GITLOG_AUTHOR_SKIP_FETCH=true.

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(GitLogConfig)

    result: dict[str, Any] = {}

    for field_name in GitLogConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}", details={"value": env_value})

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
