"""File path patterns shared by the resolver, metrics and commit typing."""

import re

# Generated, vendored and lock files never count towards a contributor's impact
EXCLUDED_PATTERNS = [
    re.compile(r"package-lock\.json$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"\.min\.(js|css)$"),
    re.compile(r"\.(map|d\.ts)$"),
    re.compile(r"^node_modules/"),
    re.compile(r"^dist/"),
    re.compile(r"^build/"),
    re.compile(r"^\.nx/"),
    re.compile(r"^coverage/"),
    re.compile(r"^\.next/"),
    re.compile(r"^\.cache/"),
]

SOURCE_EXTENSIONS = (
    "js|jsx|ts|tsx|mjs|cjs|vue|svelte"
    "|py|rb|go|rs|java|kt|scala|swift|c|h|cc|cpp|hpp|cs|php|sh"
)

SOURCE_PATTERNS = [
    re.compile(rf"\.({SOURCE_EXTENSIONS})$"),
    re.compile(r"\.(css|scss|sass|less|styl)$"),
    re.compile(r"\.html?$"),
    re.compile(r"\.(test|spec)\.(js|jsx|ts|tsx)$"),
    re.compile(r"\.(md|mdx)$"),
]

TEST_FILE_PATTERN = re.compile(r"test|spec\.(js|ts)$")


def is_excluded(path: str) -> bool:
    return any(p.search(path) for p in EXCLUDED_PATTERNS)


def should_include_file(path: str) -> bool:
    """True for source-like files that are not generated or vendored."""
    if is_excluded(path):
        return False
    return any(p.search(path) for p in SOURCE_PATTERNS)


def is_under(path: str, directory: str) -> bool:
    """True when ``path`` is ``directory`` or lives below it."""
    directory = directory.strip("/")
    if not directory or directory == ".":
        return True
    return path == directory or path.startswith(directory + "/")


def in_scope(path: str, include_dirs=(), exclude_dirs=()) -> bool:
    """Apply ``--include-dirs`` / ``--exclude-dirs`` to a repository path."""
    if include_dirs and not any(is_under(path, d) for d in include_dirs):
        return False
    if exclude_dirs and any(is_under(path, d) for d in exclude_dirs):
        return False
    return True
