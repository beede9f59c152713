"""
Logging for gitlog-author.

Records go to stderr through rich so they never mix with report output on
stdout. With ``--log-file`` a plain-text trace of every git invocation and
cache decision is appended to a file as well, whatever the console level.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "gitlog_author"

# Lookups run on worker threads, so the file trace names the thread
FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """ERROR when quiet, DEBUG when verbose, WARNING otherwise."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Route gitlog_author logging to stderr and, optionally, a trace file.

    Args:
        verbose: Show git invocations and cache activity on the console
        quiet: Only show errors on the console
        log_file: File to append a DEBUG-level trace to

    Returns:
        The gitlog_author root logger
    """
    level = console_level(verbose, quiet)

    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    rich_handler.setLevel(level)
    handlers: list[logging.Handler] = [rich_handler]

    logger_level = level
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        handlers.append(file_handler)
        logger_level = logging.DEBUG

    # force=True so repeated CLI invocations in one process (tests) reconfigure
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logger_level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the gitlog_author namespace; ``name`` is usually ``__name__``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
