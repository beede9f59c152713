"""Tests for unified diff reconstruction."""

import pytest

from gitlog_author.cancellation import CancelToken
from gitlog_author.diff import (
    ChangeType,
    DiffScanner,
    ScanState,
    categorize,
    flatten_hunks,
    parse_diff_stream,
    parse_diff_text,
)
from gitlog_author.exceptions import DiffStreamError, GitCommandError, OperationCancelled

ADD_AND_MODIFY = """\
diff --git a/new.js b/new.js
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/new.js
@@ -0,0 +1,2 @@
+const a = 1;
+export default a;
diff --git a/app.py b/app.py
index 1111111..2222222 100644
--- a/app.py
+++ b/app.py
@@ -1,3 +1,3 @@
 import os
-x = 1
+x = 2
 print(x)
@@ -10,2 +10,3 @@ def main():
     run()
+    stop()
"""

RENAME = """\
diff --git a/old/name.py b/new/name.py
similarity index 90%
rename from old/name.py
rename to new/name.py
index 3333333..4444444 100644
--- a/old/name.py
+++ b/new/name.py
@@ -1 +1 @@
-value = 1
+value = 2
"""

DELETE = """\
diff --git a/gone.txt b/gone.txt
deleted file mode 100644
index 5555555..0000000
--- a/gone.txt
+++ /dev/null
@@ -1,2 +0,0 @@
-first
-second
"""

PURE_RENAME = """\
diff --git a/a.txt b/b.txt
similarity index 100%
rename from a.txt
rename to b.txt
"""


class TestParseDiffText:
    """Buffered parsing."""

    def test_added_and_modified(self):
        change_set = parse_diff_text(ADD_AND_MODIFY)

        assert list(change_set.added) == ["new.js"]
        assert change_set.added["new.js"] == [
            ["@@ -0,0 +1,2 @@", "+const a = 1;", "+export default a;"]
        ]
        assert list(change_set.modified) == ["app.py"]
        hunks = change_set.modified["app.py"]
        assert len(hunks) == 2
        assert hunks[0][0] == "@@ -1,3 +1,3 @@"
        assert hunks[0][1:] == [" import os", "-x = 1", "+x = 2", " print(x)"]
        assert hunks[1] == ["@@ -10,2 +10,3 @@ def main():", "     run()", "+    stop()"]
        assert change_set.deleted == {}
        assert change_set.renamed == {}

    def test_rename_keyed_with_arrow(self):
        change_set = parse_diff_text(RENAME)
        assert list(change_set.renamed) == ["old/name.py → new/name.py"]
        assert flatten_hunks(change_set.renamed["old/name.py → new/name.py"]) == [
            "@@ -1 +1 @@",
            "-value = 1",
            "+value = 2",
        ]

    def test_deleted(self):
        change_set = parse_diff_text(DELETE)
        assert change_set.deleted == {"gone.txt": [["@@ -1,2 +0,0 @@", "-first", "-second"]]}

    def test_hunkless_file_is_recorded(self):
        change_set = parse_diff_text(PURE_RENAME)
        assert change_set.renamed == {"a.txt → b.txt": []}

    def test_path_containing_b_slash_is_modified(self):
        diff = (
            "diff --git a/x b/y.py b/x b/y.py\n"
            "index 1111111..2222222 100644\n"
            "--- a/x b/y.py\n"
            "+++ b/x b/y.py\n"
            "@@ -1 +1 @@\n"
            "-old\n"
            "+new\n"
        )
        change_set = parse_diff_text(diff)
        assert change_set.modified == {"x b/y.py": [["@@ -1 +1 @@", "-old", "+new"]]}
        assert change_set.renamed == {}

    def test_hunkless_path_containing_b_slash(self):
        diff = "diff --git a/x b/y.sh b/x b/y.sh\nold mode 100644\nnew mode 100755\n"
        change_set = parse_diff_text(diff)
        assert change_set.modified == {"x b/y.sh": []}

    def test_different_paths_without_rename_lines_are_not_a_rename(self):
        diff = "diff --git a/one.py b/two.py\n--- a/one.py\n+++ b/two.py\n@@ -1 +1 @@\n-a\n+b\n"
        change_set = parse_diff_text(diff)
        assert change_set.renamed == {}
        assert list(change_set.modified) == ["two.py"]

    def test_hunk_never_contains_header_lines(self):
        change_set = parse_diff_text(ADD_AND_MODIFY + RENAME + DELETE)
        for _, _, hunks in change_set.files():
            for hunk in hunks:
                assert hunk[0].startswith("@@")
                for line in hunk[1:]:
                    assert not line.startswith(("diff --git", "index ", "--- ", "+++ "))

    def test_counts_and_order(self):
        change_set = parse_diff_text(ADD_AND_MODIFY + RENAME + DELETE)
        assert change_set.counts() == {
            ChangeType.ADDED: 1,
            ChangeType.MODIFIED: 1,
            ChangeType.DELETED: 1,
            ChangeType.RENAMED: 1,
        }
        assert [change_type for change_type, _, _ in change_set.files()] == list(ChangeType)

    def test_empty_input(self):
        change_set = parse_diff_text("")
        assert change_set.is_empty

    def test_leading_noise_ignored(self):
        change_set = parse_diff_text("commit abc\nAuthor: x\n\n" + DELETE)
        assert list(change_set.deleted) == ["gone.txt"]

    def test_no_newline_marker_not_in_hunk(self):
        diff = RENAME.rstrip("\n") + "\n\\ No newline at end of file\n"
        change_set = parse_diff_text(diff)
        assert "\\ No newline at end of file" not in flatten_hunks(
            change_set.renamed["old/name.py → new/name.py"]
        )

    def test_bytes_input(self):
        change_set = categorize(DELETE.encode("utf-8"))
        assert list(change_set.deleted) == ["gone.txt"]


class TestSafetyValve:
    """Oversized hunks are split and continued."""

    def test_split_repeats_marker(self):
        lines = ["diff --git a/big.txt b/big.txt", "--- a/big.txt", "+++ b/big.txt", "@@ -1,5 +1,5 @@"]
        lines += [f"+line {i}" for i in range(5)]
        change_set = parse_diff_text("\n".join(lines), max_hunk_lines=3)

        hunks = change_set.modified["big.txt"]
        assert hunks == [
            ["@@ -1,5 +1,5 @@", "+line 0", "+line 1"],
            ["@@ -1,5 +1,5 @@", "+line 2", "+line 3"],
            ["@@ -1,5 +1,5 @@", "+line 4"],
        ]
        assert all(len(h) <= 3 for h in hunks)

    def test_no_empty_continuation(self):
        lines = ["diff --git a/x b/x", "@@ -1 +1,2 @@", "+a", "+b"]
        change_set = parse_diff_text("\n".join(lines), max_hunk_lines=3)
        assert change_set.modified["x"] == [["@@ -1 +1,2 @@", "+a", "+b"]]

    def test_rejects_tiny_limit(self):
        with pytest.raises(ValueError):
            DiffScanner(max_hunk_lines=1)


class TestScannerStates:
    """State transitions."""

    def test_transitions(self):
        scanner = DiffScanner()
        assert scanner.state is ScanState.SCANNING_FOR_FILE
        scanner.feed("diff --git a/x b/x")
        assert scanner.state is ScanState.SCANNING_FOR_HUNK
        scanner.feed("@@ -1 +1 @@")
        assert scanner.state is ScanState.IN_HUNK
        scanner.feed("diff --git a/y b/y")
        assert scanner.state is ScanState.SCANNING_FOR_HUNK
        scanner.finish()
        assert scanner.state is ScanState.SCANNING_FOR_FILE


def _chunked(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start:start + size]


class TestParseDiffStream:
    """Streamed parsing matches buffered parsing."""

    @pytest.mark.parametrize("chunk_size", [1, 7, 64, 100000])
    def test_chunk_boundaries_do_not_matter(self, chunk_size):
        text = ADD_AND_MODIFY + RENAME + DELETE
        streamed = parse_diff_stream(_chunked(text.encode("utf-8"), chunk_size))
        assert streamed == parse_diff_text(text)

    def test_multibyte_characters_split_across_chunks(self):
        text = 'diff --git a/i18n.txt b/i18n.txt\n@@ -1 +1 @@\n-héllo\n+wörld ✓\n'
        change_set = parse_diff_stream(_chunked(text.encode("utf-8"), 1))
        assert change_set.modified["i18n.txt"] == [["@@ -1 +1 @@", "-héllo", "+wörld ✓"]]

    def test_source_failure_becomes_stream_error(self):
        def failing():
            yield DELETE.encode("utf-8")
            raise GitCommandError("git died")

        with pytest.raises(DiffStreamError) as exc_info:
            parse_diff_stream(failing())
        assert exc_info.value.details["bytes_received"] == len(DELETE.encode("utf-8"))

    def test_cancellation_between_chunks(self):
        token = CancelToken()

        def chunks():
            yield b"diff --git a/x b/x\n"
            token.cancel()
            yield b"@@ -1 +1 @@\n"

        with pytest.raises(OperationCancelled):
            parse_diff_stream(chunks(), cancel_token=token)

    def test_categorize_accepts_iterables(self):
        change_set = categorize(iter([RENAME.encode("utf-8")]))
        assert "old/name.py → new/name.py" in change_set.renamed
