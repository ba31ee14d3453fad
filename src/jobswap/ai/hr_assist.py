"""HR approval guidance for pending swap requests.

The advisor combines the compatibility score with the commute impact and
the request's estimated cost savings into one 0–100 score:

    score = 0.6 × compatibility
          + 0.2 × (productivity gain / 30) × 100
          + 0.2 × (estimated cost savings / 5000) × 100

and maps it, together with a list of risk factors, to a recommendation:

- **approve** — score ≥ 80 and no risk factors
  (confidence 85 + min(score − 80, 15))
- **reject**  — score < 50 or three or more risk factors (confidence 70)
- **review**  — everything else (confidence 60)

A swap request only carries a single "commute savings" figure.  The
before/after pair the estimators need is reconstructed by
:func:`implied_commute_pair`, an approximation kept in one place so it can
be replaced once the front end sends both values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from jobswap.ai.commute import estimate_commute_impact
from jobswap.ai.compatibility import CompatibilityInput, ProfileFragment
from jobswap.config import CommuteConfig, HRConfig
from jobswap.numeric import clamp, round_half_up

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jobswap.ai.commute import CommuteImpact
    from jobswap.ai.compatibility import CompatibilityResult, CompatibilityScorer
    from jobswap.ai.embedder import Provenance
    from jobswap.models import HRRequest

logger = logging.getLogger(__name__)


class HRRecommendation(StrEnum):
    APPROVE = "approve"
    REVIEW = "review"
    REJECT = "reject"


@dataclass
class HRAnalysis:
    """Advice for one HR request."""

    recommendation: HRRecommendation
    confidence: int
    reasoning: str
    risk_factors: list[str]
    benefits: list[str]
    score: int
    compatibility: CompatibilityResult
    commute_impact: CommuteImpact
    request_id: str = field(default="")

    @property
    def provenance(self) -> Provenance:
        return self.compatibility.provenance

    def to_dict(self) -> dict[str, object]:
        return {
            "request_id": self.request_id,
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "risk_factors": list(self.risk_factors),
            "benefits": list(self.benefits),
            "score": self.score,
            "compatibility": self.compatibility.to_dict(),
            "commute_impact": self.commute_impact.to_dict(),
            "provenance": self.provenance.value,
        }


def implied_commute_pair(savings_minutes: float) -> tuple[float, float]:
    """Reconstruct a one-way (before, after) pair from a savings figure.

    Assumes the new commute is half the saving and the old one is the
    saving plus that remainder: ``(savings × 1.5, savings × 0.5)``.  The
    difference equals *savings*, but the absolute values are a guess, and
    every ratio derived from them (stress level, productivity gain) is
    fixed at a 66.7 % reduction regardless of the real commutes.
    """
    return savings_minutes * 1.5, savings_minutes * 0.5


def decide_recommendation(
    score: float,
    risk_factors: Sequence[str],
    config: HRConfig | None = None,
) -> tuple[HRRecommendation, int]:
    """Map an overall score and risk list to ``(recommendation, confidence)``."""
    cfg = config or HRConfig()
    if score >= cfg.approve_score and not risk_factors:
        return HRRecommendation.APPROVE, int(85 + min(score - cfg.approve_score, 15))
    if score < cfg.reject_score or len(risk_factors) >= cfg.reject_risk_count:
        return HRRecommendation.REJECT, 70
    return HRRecommendation.REVIEW, 60


def hr_reasoning(
    recommendation: HRRecommendation,
    compatibility_score: int,
    risk_factors: Sequence[str],
    benefits: Sequence[str],
) -> str:
    """Templated explanation; empty lists are skipped rather than printed blank."""
    if recommendation is HRRecommendation.APPROVE:
        sentences = [
            f"Strong match ({compatibility_score}% compatibility)",
            ", ".join(benefits),
            "Low risk factors",
        ]
    elif recommendation is HRRecommendation.REJECT:
        sentences = [
            f"Weak match ({compatibility_score}% compatibility)",
            ", ".join(risk_factors),
            "Limited benefits",
        ]
    else:
        concern = ", ".join(risk_factors[:1]) or "overall score below the approval threshold"
        sentences = [
            f"Moderate match ({compatibility_score}% compatibility)",
            ", ".join(benefits[:2]),
            f"Review required due to: {concern}",
        ]
    return ". ".join(s for s in sentences if s) + "."


class HRAdvisor:
    """Scores pending swap requests and recommends an HR decision."""

    def __init__(
        self,
        scorer: CompatibilityScorer,
        *,
        commute_config: CommuteConfig | None = None,
        config: HRConfig | None = None,
    ) -> None:
        self._scorer = scorer
        self.commute_config = commute_config or CommuteConfig()
        self.config = config or HRConfig()

    async def analyze(self, request: HRRequest) -> HRAnalysis:
        """Produce an :class:`HRAnalysis` for *request*.

        The counterpart's skills are used when the request carries them.
        Requests from the current front end do not, in which case the
        requester's own skills stand in (skill similarity is then 100).
        HR requests are pre-filtered on salary band, so salary is treated
        as compatible.
        """
        cfg = self.config
        savings = request.commute_savings_minutes
        before, after = implied_commute_pair(savings)

        match_skills = (
            request.to_user_skills
            if request.to_user_skills is not None
            else request.from_user_skills
        )
        compatibility = await self._scorer.score(
            CompatibilityInput(
                user=ProfileFragment.of(request.from_user_job_title, request.from_user_skills),
                match=ProfileFragment.of(request.to_user_job_title, match_skills),
                commute_before_minutes=before,
                commute_after_minutes=after,
                salary_compatible=True,
            )
        )
        impact = estimate_commute_impact(before, after, config=self.commute_config)
        breakdown = compatibility.breakdown

        risk_factors: list[str] = []
        if breakdown.skill_similarity < cfg.low_skill_similarity:
            risk_factors.append("Low skill overlap")
        if breakdown.role_similarity < cfg.low_role_similarity:
            risk_factors.append("Role level mismatch")
        if savings < cfg.min_commute_savings:
            risk_factors.append("Minimal commute improvement")

        benefits: list[str] = []
        if breakdown.skill_similarity >= cfg.strong_skill_similarity:
            benefits.append("Strong skill alignment")
        if impact.monthly_hours_saved >= cfg.min_monthly_hours:
            benefits.append(f"Saves {impact.monthly_hours_saved:g} hours/month")
        if impact.co2_saved_kg >= cfg.min_co2_kg:
            benefits.append(f"Reduces {impact.co2_saved_kg:g}kg CO₂/month")
        if request.estimated_cost_savings >= cfg.min_cost_savings:
            benefits.append(f"Estimated ${request.estimated_cost_savings:g}/month savings")

        raw_score = round_half_up(
            compatibility.score * cfg.compatibility_weight
            + (impact.productivity_gain / self.commute_config.productivity_cap)
            * 100
            * cfg.productivity_weight
            + (request.estimated_cost_savings / cfg.cost_savings_reference)
            * 100
            * cfg.savings_weight
        )
        recommendation, confidence = decide_recommendation(raw_score, risk_factors, cfg)

        analysis = HRAnalysis(
            recommendation=recommendation,
            confidence=confidence,
            reasoning=hr_reasoning(
                recommendation, compatibility.score, risk_factors, benefits
            ),
            risk_factors=risk_factors,
            benefits=benefits,
            score=int(clamp(raw_score, 0, 100)),
            compatibility=compatibility,
            commute_impact=impact,
            request_id=request.id,
        )
        logger.info(
            "HR request %s: %s (score %d, confidence %d%%, %d risk factor(s))",
            request.id,
            recommendation,
            analysis.score,
            confidence,
            len(risk_factors),
        )
        return analysis
