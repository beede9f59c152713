"""Risk-annotated code review packet."""

import re
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..diff.models import ChangeSet, ChangeType, Hunk, flatten_hunks
from ..git.models import Commit
from ..review.risk import RiskAssessor, RiskLevel
from .base import BaseReport, ReportScope, format_local_datetime

RISK_EMOJI = {RiskLevel.HIGH: "🔴", RiskLevel.MEDIUM: "🟡", RiskLevel.LOW: "🟢"}

CHANGE_TYPE_EMOJI = {
    ChangeType.ADDED: "➕",
    ChangeType.MODIFIED: "📝",
    ChangeType.DELETED: "🗑️",
    ChangeType.RENAMED: "📋",
}

_DIFF_MARKDOWN_SPECIAL = re.compile(r"([*_`\[\]()#|{}~>])")

FINAL_CHECKLIST: List[Tuple[str, List[str]]] = [
    ("🔐 Security & Authorization", [
        "Authentication checks are properly implemented",
        "Authorization rules are correctly applied",
        "No security vulnerabilities introduced",
        "Sensitive data is properly handled",
        "Input validation is thorough",
        "Security best practices followed",
    ]),
    ("📊 Code Quality", [
        "Code follows project standards",
        "No unnecessary complexity",
        "Error handling is comprehensive",
        "Logging is appropriate",
        "No debug code committed",
        "Code is maintainable",
    ]),
    ("🧪 Testing", [
        "All changes are tested",
        "Test coverage is adequate",
        "Edge cases are covered",
        "Error scenarios tested",
        "Performance testing done (if applicable)",
    ]),
    ("📚 Documentation", [
        "Code is self-documenting",
        "Comments are clear and necessary",
        "API documentation updated",
        "README updated if needed",
        "Change log updated",
    ]),
    ("⚡ Performance", [
        "No performance regressions",
        "Resource usage is optimized",
        "Database queries are efficient",
        "Caching strategy is appropriate",
        "Network calls are optimized",
    ]),
    ("📦 Dependencies", [
        "No unnecessary dependencies added",
        "Dependencies are up to date",
        "No conflicting dependencies",
        "Security vulnerabilities checked",
    ]),
]


def format_diff_for_markdown(lines: Sequence[str]) -> str:
    """Escape Markdown in diff lines, keeping a readable ``+ ``/``- `` gutter."""
    formatted = []
    for line in lines:
        marker = line[:1]
        content = line[1:] if marker in ("+", "-", " ") else line
        content = _DIFF_MARKDOWN_SPECIAL.sub(r"\\\1", content)
        if marker == "+":
            formatted.append("+ " + content)
        elif marker == "-":
            formatted.append("- " + content)
        else:
            formatted.append("  " + content)
    return "\n".join(formatted)


class ReviewReport(BaseReport):
    """Review packet for a set of commits and their reconstructed change sets.

    Risk is assessed once per (commit, file) and reused by the summary, the
    high-risk index and the per-file sections.
    """

    report_type = "review"

    def __init__(
        self,
        author: str,
        commits: Sequence[Commit],
        change_sets: Mapping[str, ChangeSet],
        assessor: Optional[RiskAssessor] = None,
        scope: Optional[ReportScope] = None,
        reviewed_at: Optional[datetime] = None,
    ):
        super().__init__(author, scope)
        self.commits = commits
        self.change_sets = change_sets
        self.assessor = assessor or RiskAssessor()
        self.reviewed_at = reviewed_at or datetime.now(timezone.utc)
        self._risk: Dict[Tuple[str, ChangeType, str], RiskLevel] = {}
        for commit in commits:
            for change_type, path, hunks in self._changes(commit).files():
                self._risk[(commit.hash, change_type, path)] = self.assessor.identify_risk_level(
                    path, flatten_hunks(hunks)
                )

    def _changes(self, commit: Commit) -> ChangeSet:
        return self.change_sets.get(commit.hash) or ChangeSet()

    def title(self) -> str:
        return f"Code Review Report for {self.author}"

    def body_lines(self) -> List[str]:
        lines = [
            "# Summary",
            "",
            f"- Total Commits: {len(self.commits)}",
            f"- Review Date: {format_local_datetime(self.reviewed_at)}",
        ]
        lines.extend(self.statistics_lines())
        lines.extend(self.high_risk_lines())
        lines.extend(self.guideline_lines())
        lines.extend(["---", "", "# Detailed Changes", ""])
        for commit in self.commits:
            lines.extend(self.commit_lines(commit))
        lines.extend(self.final_checklist_lines())
        return lines

    # ── Summary ─────────────────────────────────────────────────────

    def statistics_lines(self) -> List[str]:
        type_totals = {change_type: 0 for change_type in ChangeType}
        for commit in self.commits:
            for change_type, count in self._changes(commit).counts().items():
                type_totals[change_type] += count

        risk_totals = {level: 0 for level in RiskLevel}
        for level in self._risk.values():
            risk_totals[level] += 1

        return [
            "",
            "## Change Statistics",
            "",
            "### File Changes",
            f"- ➕ Added: {type_totals[ChangeType.ADDED]}",
            f"- 📝 Modified: {type_totals[ChangeType.MODIFIED]}",
            f"- 🗑️ Deleted: {type_totals[ChangeType.DELETED]}",
            f"- 📋 Renamed: {type_totals[ChangeType.RENAMED]}",
            "",
            "### Risk Distribution",
            f"- 🔴 High Risk: {risk_totals[RiskLevel.HIGH]}",
            f"- 🟡 Medium Risk: {risk_totals[RiskLevel.MEDIUM]}",
            f"- 🟢 Low Risk: {risk_totals[RiskLevel.LOW]}",
        ]

    def high_risk_lines(self) -> List[str]:
        entries = [
            f"- {path} ({change_type.value}) in commit {commit_hash[:7]}"
            for (commit_hash, change_type, path), level in self._risk.items()
            if level is RiskLevel.HIGH
        ]
        if not entries:
            return []
        return ["", "## ⚠️ High Risk Changes Quick Access", "", *entries]

    @staticmethod
    def guideline_lines() -> List[str]:
        return [
            "",
            "## Review Guidelines",
            "",
            "### Risk Levels",
            "- 🔴 **HIGH**: Security, data, or infrastructure critical changes",
            "- 🟡 **MEDIUM**: Business logic or significant feature changes",
            "- 🟢 **LOW**: Documentation, styling, or minor changes",
            "",
            "### Review Priorities",
            "1. Security and data safety",
            "2. Functionality and business logic",
            "3. Code quality and maintainability",
            "4. Performance and scalability",
            "5. Documentation and comments",
            "",
        ]

    # ── Per-commit detail ───────────────────────────────────────────

    def commit_lines(self, commit: Commit) -> List[str]:
        lines = [
            "",
            f"## Commit: {commit.subject}",
            f"Hash: `{commit.hash}`",
            f"Date: {format_local_datetime(commit.timestamp)}",
            "",
        ]
        if commit.body:
            lines.extend(["### Description", commit.body, ""])

        changes = self._changes(commit)
        for change_type in ChangeType:
            files = changes.bucket(change_type)
            if files:
                lines.extend(self.change_type_lines(commit, change_type, files))

        lines.append("---")
        return lines

    def change_type_lines(
        self, commit: Commit, change_type: ChangeType, files: Mapping[str, List[Hunk]]
    ) -> List[str]:
        emoji = CHANGE_TYPE_EMOJI[change_type]
        lines = [f"### {emoji} {change_type.value.capitalize()} Files", ""]
        for path, hunks in files.items():
            level = self._risk[(commit.hash, change_type, path)]
            lines.extend([
                f"#### {path} {RISK_EMOJI[level]}",
                "**Review Checklist**",
                self.assessor.generate_checklist(path, change_type, level),
                "",
                "```diff",
            ])
            lines.extend(format_diff_for_markdown(hunk) for hunk in hunks)
            lines.extend(["```", ""])
        return lines

    @staticmethod
    def final_checklist_lines() -> List[str]:
        lines = ["", "## Final Review Checklist", ""]
        for heading, items in FINAL_CHECKLIST:
            lines.append(f"### {heading}")
            lines.extend(f"- [ ] {item}" for item in items)
            lines.append("")
        lines.extend([
            "### 📝 Review Notes",
            "Add any additional notes, concerns, or follow-up items here:",
            "",
            "```",
            "",
            "```",
        ])
        return lines
