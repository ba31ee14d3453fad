"""Markdown report export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jobswap.ai.hr_assist import HRAnalysis
    from jobswap.ai.recommender import Recommendation

logger = logging.getLogger(__name__)


def _cell(text: object) -> str:
    return str(text).replace("|", "\\|")


class MarkdownExporter:
    """Renders ranked recommendations and HR analyses as Markdown."""

    def render_recommendations(
        self, recommendations: Sequence[Recommendation], *, user_name: str = ""
    ) -> str:
        lines: list[str] = []
        heading = "# Swap Recommendations"
        if user_name:
            heading += f" for {user_name}"
        lines.append(heading + "\n")

        if not recommendations:
            lines.append("No candidate matches.\n")
            return "\n".join(lines)

        degraded = sum(1 for r in recommendations if r.compatibility.degraded)
        lines.append(f"- **Candidates:** {len(recommendations)}")
        lines.append(f"- **Recommended:** {sum(r.is_recommended for r in recommendations)}")
        if degraded:
            lines.append(f"- **Scored with local fallback:** {degraded}")
        lines.append("")

        lines.append(
            "| # | Name | Title | Location | Score "
            "| Skill | Role | Commute | Salary | Overlap | Why |"
        )
        lines.append(
            "|---|------|-------|----------|-------"
            "|-------|------|---------|--------|---------|-----|"
        )
        for rank, rec in enumerate(recommendations, start=1):
            b = rec.breakdown
            marker = " ★" if rec.is_recommended else ""
            lines.append(
                f"| {rank}{marker} "
                f"| {_cell(rec.match.name)} "
                f"| {_cell(rec.match.job_title)} "
                f"| {_cell(rec.match.location)} "
                f"| {rec.score} "
                f"| {b.skill_similarity} "
                f"| {b.role_similarity} "
                f"| {b.commute_gain} "
                f"| {b.salary_match} "
                f"| {rec.skill_overlap}% "
                f"| {_cell(rec.reasoning)} |"
            )
        lines.append("")
        return "\n".join(lines)

    def render_hr_analyses(self, analyses: Sequence[HRAnalysis]) -> str:
        lines: list[str] = ["# HR Review\n"]
        if not analyses:
            lines.append("No pending requests.\n")
            return "\n".join(lines)

        for analysis in analyses:
            lines.append(f"## {analysis.request_id} — {analysis.recommendation.value.upper()}\n")
            lines.append(f"- **Score:** {analysis.score}")
            lines.append(f"- **Confidence:** {analysis.confidence}%")
            lines.append(f"- **Compatibility:** {analysis.compatibility.score}%")
            lines.append(f"- **Provenance:** {analysis.provenance.value}")
            lines.append(f"- **Reasoning:** {analysis.reasoning}")
            if analysis.benefits:
                lines.append("- **Benefits:**")
                lines.extend(f"  - {b}" for b in analysis.benefits)
            if analysis.risk_factors:
                lines.append("- **Risk factors:**")
                lines.extend(f"  - {r}" for r in analysis.risk_factors)
            lines.append("")
        return "\n".join(lines)

    def export(self, content: str, output_path: str | Path) -> Path:
        """Write rendered *content* to *output_path*, creating parent dirs."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info("Wrote Markdown report to %s", path)
        return path
