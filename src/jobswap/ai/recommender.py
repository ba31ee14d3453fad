"""Swap-partner recommendation ranking.

The ranker scores every candidate match against the requesting employee,
sorts the results descending by score and flags the top three as
recommended.  Candidates are scored sequentially in list order (four
embedding calls each) and the sort is stable, so equal scores keep the
order in which the matches were supplied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from jobswap.ai.compatibility import CompatibilityInput, ProfileFragment
from jobswap.ai.vectors import skill_overlap
from jobswap.errors import ActionableError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from jobswap.ai.compatibility import (
        CompatibilityBreakdown,
        CompatibilityResult,
        CompatibilityScorer,
    )
    from jobswap.ai.embedder import Provenance
    from jobswap.models import Match

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


@dataclass
class Recommendation:
    """A scored candidate with its explanation."""

    match: Match
    compatibility: CompatibilityResult
    reasoning: str
    is_recommended: bool = False
    skill_overlap: int = 0

    @property
    def score(self) -> int:
        return self.compatibility.score

    @property
    def breakdown(self) -> CompatibilityBreakdown:
        return self.compatibility.breakdown

    @property
    def provenance(self) -> Provenance:
        return self.compatibility.provenance

    def to_dict(self) -> dict[str, object]:
        return {
            "match_id": self.match.id,
            "name": self.match.name,
            "job_title": self.match.job_title,
            "location": self.match.location,
            "score": self.score,
            "breakdown": self.breakdown.to_dict(),
            "skill_overlap": self.skill_overlap,
            "reasoning": self.reasoning,
            "is_recommended": self.is_recommended,
            "provenance": self.provenance.value,
        }


def recommendation_reasoning(breakdown: CompatibilityBreakdown, match: Match) -> str:
    """Human-readable reasons behind a recommendation."""
    reasons: list[str] = []

    if breakdown.skill_similarity >= 80:
        reasons.append("Excellent skill match")
    elif breakdown.skill_similarity >= 60:
        reasons.append("Strong skill alignment")

    if breakdown.role_similarity >= 80:
        reasons.append("Similar role level")

    savings = match.commute_savings_minutes
    if savings >= 40:
        reasons.append(f"Saves {savings:g} min/day")
    elif savings >= 20:
        reasons.append("Moderate commute reduction")

    if breakdown.salary_match == 100:
        reasons.append("Salary band compatible")

    return " • ".join(reasons) if reasons else "Good overall compatibility"


class RecommendationRanker:
    """Ranks candidate matches for one employee."""

    def __init__(self, scorer: CompatibilityScorer, *, top_n: int = DEFAULT_TOP_N) -> None:
        if top_n < 0:
            raise ActionableError.validation("top_n", f"must be >= 0, got {top_n}")
        self._scorer = scorer
        self.top_n = top_n

    async def rank(
        self,
        user_skills: Iterable[str],
        user_job_title: str,
        matches: Sequence[Match],
    ) -> list[Recommendation]:
        """Score, sort and flag *matches*; one recommendation per match."""
        user = ProfileFragment.of(user_job_title, user_skills)

        recommendations: list[Recommendation] = []
        for match in matches:
            compatibility = await self._scorer.score(
                CompatibilityInput(
                    user=user,
                    match=ProfileFragment.of(match.job_title, match.skills),
                    commute_before_minutes=match.commute_before_minutes,
                    commute_after_minutes=match.commute_after_minutes,
                    salary_compatible=match.salary_compatible,
                )
            )
            recommendations.append(
                Recommendation(
                    match=match,
                    compatibility=compatibility,
                    reasoning=recommendation_reasoning(compatibility.breakdown, match),
                    skill_overlap=skill_overlap(user.skills, match.skills),
                )
            )

        # list.sort is stable, including with reverse=True
        recommendations.sort(key=lambda r: r.score, reverse=True)
        for rec in recommendations[: self.top_n]:
            rec.is_recommended = True

        logger.info(
            "Ranked %d matches for %r; top score %s",
            len(recommendations),
            user_job_title,
            recommendations[0].score if recommendations else "n/a",
        )
        return recommendations
