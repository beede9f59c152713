"""Git access: the command executor, repository checks and author resolution."""

from .authors import AuthorResolver, build_author_patterns, find_matching_authors
from .executor import GitExecutor
from .models import Author, Commit
from .repository import ensure_repository, fetch_latest_changes, is_git_repository

__all__ = [
    "AuthorResolver",
    "GitExecutor",
    "Author",
    "Commit",
    "build_author_patterns",
    "find_matching_authors",
    "ensure_repository",
    "fetch_latest_changes",
    "is_git_repository",
]
