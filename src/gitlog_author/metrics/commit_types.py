"""Classify commits into contribution types with a regex rule table.

The table is iterated in declaration order, which matters: when no message
prefix matches, the first category whose file pattern matches wins.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence, Set, Tuple

from ..patterns import SOURCE_EXTENSIONS, TEST_FILE_PATTERN
from .models import CommitType, CommitTypeMetrics, TypeShare
from .rounding import round_half_up


@dataclass(frozen=True)
class CommitTypeRule:
    message_patterns: Tuple["re.Pattern[str]", ...]
    file_patterns: Tuple["re.Pattern[str]", ...]


def _prefixes(*words: str) -> Tuple["re.Pattern[str]", ...]:
    # "fix:", "fix(api):" and "fix!:" all count
    return tuple(re.compile(rf"^{word}(\([^)]*\))?!?:", re.IGNORECASE) for word in words)


_NON_TEST_SOURCE = re.compile(rf"^(?!.*test).+\.({SOURCE_EXTENSIONS})$", re.IGNORECASE)

COMMIT_TYPE_RULES = {
    CommitType.FEATURE: CommitTypeRule(
        _prefixes("feat", "add", "new"),
        (_NON_TEST_SOURCE,),
    ),
    CommitType.BUG_FIX: CommitTypeRule(
        _prefixes("fix", "bug", "issue", "hotfix"),
        (_NON_TEST_SOURCE,),
    ),
    CommitType.REFACTOR: CommitTypeRule(
        _prefixes("refactor", "clean", "restructure", "improve"),
        (_NON_TEST_SOURCE,),
    ),
    CommitType.DOCS: CommitTypeRule(
        _prefixes("docs", "documentation"),
        (re.compile(r"\.md$"), re.compile(r"docs/"), re.compile(r"README")),
    ),
    CommitType.TEST: CommitTypeRule(
        _prefixes("test", "testing"),
        (re.compile(r"test"), re.compile(r"spec\.(js|ts)$")),
    ),
    CommitType.CONFIG: CommitTypeRule(
        _prefixes("config", "chore", "build"),
        (re.compile(r"\.(json|yml|yaml|config\.js)$"),),
    ),
}


def is_test_file(path: str) -> bool:
    return bool(TEST_FILE_PATTERN.search(path))


def categorize_commit(message: str, files: Sequence[str] = ()) -> Set[CommitType]:
    """Tag a commit with zero or more contribution types.

    Message prefixes tag every matching category. A touched test file always
    adds TEST. Without any message match, the first category (in table
    order) whose file pattern matches contributes one fallback tag. An
    untagged commit yields an empty set; UNKNOWN only exists in aggregates.
    """
    normalized = (message or "").strip().lower()
    types: Set[CommitType] = set()

    for commit_type, rule in COMMIT_TYPE_RULES.items():
        if any(p.search(normalized) for p in rule.message_patterns):
            types.add(commit_type)
    matched_message = bool(types)

    if any(is_test_file(f) for f in files):
        types.add(CommitType.TEST)

    if not matched_message:
        for commit_type, rule in COMMIT_TYPE_RULES.items():
            if any(p.search(f) for p in rule.file_patterns for f in files):
                types.add(commit_type)
                break

    return types


def calculate_type_metrics(commits: Iterable[Tuple[str, Sequence[str]]]) -> CommitTypeMetrics:
    """Aggregate ``(message, files)`` pairs into a type breakdown.

    Percentages are relative to the sum of all tag occurrences, where each
    untagged commit counts once as UNKNOWN. The primary type is the top of
    the breakdown; ties go to the alphabetically first type.
    """
    counts: Counter = Counter()
    for message, files in commits:
        types = categorize_commit(message, files)
        if types:
            counts.update(types)
        else:
            counts[CommitType.UNKNOWN] += 1

    total = sum(counts.values())
    if total == 0:
        return CommitTypeMetrics()

    breakdown = sorted(
        (TypeShare(t, c, round_half_up(c / total * 100, 2)) for t, c in counts.items()),
        key=lambda share: (-share.count, share.type.value),
    )

    # UNKNOWN sorts after every real type, so it only leads when it outnumbers them
    return CommitTypeMetrics(type_breakdown=breakdown, primary_contribution_type=breakdown[0].type)
