"""Reconstruct per-file change sets from unified diff text.

Unified diff has no end-of-hunk marker: a hunk ends only when the next
``@@`` or ``diff --git`` line arrives (or the input ends). The scanner
therefore always flushes the pending hunk before acting on a new marker.

    SCANNING_FOR_FILE --diff --git--> SCANNING_FOR_HUNK --@@--> IN_HUNK
          ^                               |    ^                    |
          +------------- diff --git ------+    +------- @@ ---------+

Header lines between ``diff --git`` and the first ``@@`` decide whether the
file was added, deleted, renamed or modified.
"""

import codecs
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from ..cancellation import CancelToken, check_cancelled
from ..exceptions import DiffStreamError, GitCommandError
from ..logging_config import get_logger
from .models import RENAME_ARROW, ChangeSet, ChangeType, Hunk

logger = get_logger(__name__)

MAX_HUNK_LINES = 1000

_DIFF_HEADER_RE = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')
_HUNK_LINE_PREFIXES = ("+", "-", " ")


class ScanState(Enum):
    SCANNING_FOR_FILE = "scanning_for_file"
    SCANNING_FOR_HUNK = "scanning_for_hunk"
    IN_HUNK = "in_hunk"


@dataclass
class _PendingFile:
    old_path: str
    new_path: str
    explicit_type: Optional[ChangeType] = None

    @property
    def change_type(self) -> ChangeType:
        # renames are only trusted from "rename from/to" lines
        return self.explicit_type or ChangeType.MODIFIED

    @property
    def key(self) -> str:
        change_type = self.change_type
        if change_type is ChangeType.RENAMED:
            return f"{self.old_path}{RENAME_ARROW}{self.new_path}"
        if change_type is ChangeType.DELETED:
            return self.old_path
        return self.new_path


def _unquote(path: str) -> str:
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        return path[1:-1]
    return path


def parse_diff_header(line: str) -> tuple[str, str]:
    """Extract ``(old_path, new_path)`` from a ``diff --git`` line.

    A path containing `` b/`` makes the line ambiguous; when both halves
    name the same path that split wins, and the ``---``/``+++`` lines that
    follow settle the rest.
    """
    rest = line.rstrip("\r")[len("diff --git "):]
    half = (len(rest) - 1) // 2
    old, new = _unquote(rest[:half]), _unquote(rest[half + 1:])
    symmetric = rest[half:half + 1] == " " and old.startswith("a/") and new.startswith("b/")
    if symmetric and old[2:] == new[2:]:
        return old[2:], new[2:]

    match = _DIFF_HEADER_RE.match(line.rstrip("\r"))
    if match:
        return match.group(1), match.group(2)
    # Unusual prefixes: fall back to splitting on the last " b/"
    old, sep, new = rest.rpartition(" b/")
    if sep:
        return old[2:] if old.startswith("a/") else old, new
    return rest, rest


def header_path(line: str) -> Optional[str]:
    """Path named by a ``--- a/...`` or ``+++ b/...`` line, None for /dev/null."""
    path = _unquote(line[4:].split("\t", 1)[0])
    if path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


class DiffScanner:
    """Single-pass line scanner building a :class:`ChangeSet`.

    Feed lines (without trailing newline) with :meth:`feed`, then call
    :meth:`finish`. A hunk reaching ``max_hunk_lines`` lines is flushed and
    continued in a new hunk that repeats its ``@@`` marker.
    """

    def __init__(self, max_hunk_lines: int = MAX_HUNK_LINES):
        if max_hunk_lines < 2:
            raise ValueError("max_hunk_lines must be at least 2")
        self.max_hunk_lines = max_hunk_lines
        self.change_set = ChangeSet()
        self.state = ScanState.SCANNING_FOR_FILE
        self._file: Optional[_PendingFile] = None
        self._hunk: Optional[Hunk] = None
        self._marker = ""
        self._continuation = False

    def feed(self, line: str) -> None:
        if line.startswith("diff --git "):
            self._flush_file()
            old_path, new_path = parse_diff_header(line)
            self._file = _PendingFile(old_path, new_path)
            self.state = ScanState.SCANNING_FOR_HUNK
            return

        if self.state is ScanState.SCANNING_FOR_FILE:
            return

        if line.startswith("@@"):
            self._flush_hunk()
            self._open_hunk(line)
            return

        if self.state is ScanState.SCANNING_FOR_HUNK:
            self._read_header(line)
            return

        # IN_HUNK
        if line.startswith(_HUNK_LINE_PREFIXES):
            assert self._hunk is not None
            self._hunk.append(line)
            if len(self._hunk) >= self.max_hunk_lines:
                self._flush_hunk()
                self._open_hunk(self._marker, continuation=True)

    def finish(self) -> ChangeSet:
        """Flush whatever is pending and return the change set."""
        self._flush_file()
        self.state = ScanState.SCANNING_FOR_FILE
        return self.change_set

    # ── internals ─────────────────────────────────────────────────────

    def _read_header(self, line: str) -> None:
        assert self._file is not None
        if line.startswith("new file mode"):
            self._file.explicit_type = ChangeType.ADDED
        elif line.startswith("deleted file mode"):
            self._file.explicit_type = ChangeType.DELETED
        elif line.startswith("rename from "):
            self._file.explicit_type = ChangeType.RENAMED
            self._file.old_path = _unquote(line[len("rename from "):])
        elif line.startswith("rename to "):
            self._file.explicit_type = ChangeType.RENAMED
            self._file.new_path = _unquote(line[len("rename to "):])
        elif line.startswith("--- "):
            path = header_path(line)
            if path is not None:
                self._file.old_path = path
        elif line.startswith("+++ "):
            path = header_path(line)
            if path is not None:
                self._file.new_path = path

    def _open_hunk(self, marker: str, continuation: bool = False) -> None:
        self._hunk = [marker]
        self._marker = marker
        self._continuation = continuation
        self.state = ScanState.IN_HUNK

    def _flush_hunk(self) -> None:
        hunk, self._hunk = self._hunk, None
        if hunk is None or self._file is None:
            return
        if self._continuation and len(hunk) == 1:
            return
        self.change_set.add_hunk(self._file.change_type, self._file.key, hunk)

    def _flush_file(self) -> None:
        self._flush_hunk()
        if self._file is not None:
            self.change_set.add_file(self._file.change_type, self._file.key)
        self._file = None


def parse_diff_text(text: str, max_hunk_lines: int = MAX_HUNK_LINES) -> ChangeSet:
    """Parse a fully buffered unified diff."""
    scanner = DiffScanner(max_hunk_lines)
    for line in text.split("\n"):
        scanner.feed(line)
    return scanner.finish()


def parse_diff_stream(
    chunks: Iterable[bytes],
    cancel_token: Optional[CancelToken] = None,
    max_hunk_lines: int = MAX_HUNK_LINES,
) -> ChangeSet:
    """Parse a diff delivered as byte chunks, holding at most one partial line.

    Raises:
        DiffStreamError: If the chunk source fails mid-stream.
        OperationCancelled: If the token is cancelled between chunks.
    """
    scanner = DiffScanner(max_hunk_lines)
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    partial = ""
    received = 0

    try:
        for chunk in chunks:
            check_cancelled(cancel_token)
            received += len(chunk)
            lines = (partial + decoder.decode(chunk)).split("\n")
            partial = lines.pop()
            for line in lines:
                scanner.feed(line)
        partial += decoder.decode(b"", final=True)
    except (GitCommandError, OSError) as e:
        raise DiffStreamError(
            f"Failed to process diff stream: {e}",
            details={"bytes_received": received},
        ) from e

    if partial:
        scanner.feed(partial)
    logger.debug(f"Parsed {received} streamed diff bytes")
    return scanner.finish()


def categorize(
    diff: Union[str, bytes, Iterable[bytes]],
    cancel_token: Optional[CancelToken] = None,
) -> ChangeSet:
    """Build a ChangeSet from diff text, raw bytes or a byte-chunk stream."""
    if isinstance(diff, str):
        return parse_diff_text(diff)
    if isinstance(diff, (bytes, bytearray)):
        return parse_diff_text(bytes(diff).decode("utf-8", errors="replace"))
    return parse_diff_stream(diff, cancel_token)
