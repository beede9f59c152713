"""Productivity metrics report."""

from typing import Dict, List, Optional

from ..metrics.models import DirectoryNode, VelocityMetrics
from .base import BaseReport, ReportScope


def directory_tree_lines(nodes: Dict[str, DirectoryNode], depth: int = 0) -> List[str]:
    """Render the grouped directory tree as a nested list, busiest first."""
    lines = []
    for node in sorted(nodes.values(), key=lambda n: -n.changes):
        indent = "  " * depth
        lines.append(f"{indent}- `{node.name}/`: {node.changes:,} changes ({node.percentage}%)")
        lines.extend(directory_tree_lines(node.children, depth + 1))
    return lines


class MetricsReport(BaseReport):
    report_type = "metrics"

    def __init__(self, author: str, metrics: VelocityMetrics, scope: Optional[ReportScope] = None):
        super().__init__(author, scope)
        self.metrics = metrics

    def title(self) -> str:
        return f"Productivity Metrics for {self.author}"

    def body_lines(self) -> List[str]:
        m = self.metrics
        td = m.time_distribution
        lines = [
            "## Code Velocity",
            "",
            f"- **Total Lines Changed:** {m.total_lines_changed:,}",
            f"- **Average Changes per Commit:** {m.average_commit_size:,} lines",
            f"- **Commit Frequency:** {m.commits_per_day} commits per day",
            "",
            "**Time Distribution:**",
            f"- Morning (5:00-11:59): {td.morning}%",
            f"- Afternoon (12:00-16:59): {td.afternoon}%",
            f"- Evening (17:00-4:59): {td.evening}%",
            "",
            "## Impact Analysis",
            "",
            "**Most Modified Source Files:**",
        ]

        if m.impact.top_files:
            lines.extend(f"- `{f.path}`: {f.changes:,} changes" for f in m.impact.top_files)
        else:
            lines.append("No source code changes found")

        lines.extend(["", "**Directory Impact:**"])
        if m.impact.grouped_directories:
            lines.extend(directory_tree_lines(m.impact.grouped_directories))
        else:
            lines.append("No directory impact data available")

        lines.extend([
            "",
            "## Commit Type Analysis",
            "",
            f"**Primary Contribution Type:** {m.type_metrics.primary_contribution_type.value}",
            "",
            "**Type Breakdown:**",
        ])
        lines.extend(
            f"- {share.type.value}: {share.percentage}%" for share in m.type_metrics.type_breakdown
        )
        return lines
