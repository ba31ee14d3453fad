"""Compatibility scoring between two swap candidates.

The score blends four signals, each first expressed as a fraction in
[0.0, 1.0]:

==================  ======  ===============================================
signal              weight  source
==================  ======  ===============================================
skill similarity    0.5     cosine of the two joined-skills embeddings
role similarity     0.2     cosine of the two job-title embeddings
commute gain        0.2     one-way minutes saved / 60, capped at 1
salary match        0.1     1 when the salary bands are compatible
==================  ======  ===============================================

``score = round(weighted_sum * 100)`` clamped to [0, 100].  With
``legacy_rounding`` the weighted fraction is rounded *before* scaling
(``round(weighted_sum) * 100``), which reproduces the historical demo
figures but collapses every score to 0 or 100.

Each call performs four embedding requests (no batching, no cache).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jobswap.ai.embedder import Provenance
from jobswap.ai.vectors import cosine_similarity
from jobswap.config import ScoringConfig
from jobswap.numeric import clamp, round_half_up

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jobswap.ai.embedder import EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileFragment:
    """The part of a profile the scorer looks at."""

    job_title: str
    skills: tuple[str, ...] = ()

    @classmethod
    def of(cls, job_title: str, skills: Iterable[str]) -> ProfileFragment:
        return cls(job_title=job_title, skills=tuple(skills))

    @property
    def skills_text(self) -> str:
        return ", ".join(self.skills)


@dataclass(frozen=True)
class CompatibilityInput:
    """Everything needed to score one pair of candidates."""

    user: ProfileFragment
    match: ProfileFragment
    commute_before_minutes: float
    commute_after_minutes: float
    salary_compatible: bool

    @property
    def commute_savings_minutes(self) -> float:
        return self.commute_before_minutes - self.commute_after_minutes


@dataclass(frozen=True)
class CompatibilityBreakdown:
    """Sub-scores, each an integer percentage in [0, 100]."""

    skill_similarity: int
    role_similarity: int
    commute_gain: int
    salary_match: int

    def to_dict(self) -> dict[str, int]:
        return {
            "skill_similarity": self.skill_similarity,
            "role_similarity": self.role_similarity,
            "commute_gain": self.commute_gain,
            "salary_match": self.salary_match,
        }


@dataclass(frozen=True)
class CompatibilityResult:
    """Overall 0–100 score plus its breakdown."""

    score: int
    breakdown: CompatibilityBreakdown
    provenance: Provenance = field(default=Provenance.FALLBACK)

    @property
    def degraded(self) -> bool:
        """True when any embedding behind this score came from the fallback."""
        return self.provenance is Provenance.FALLBACK

    @property
    def is_valid(self) -> bool:
        """Score and all sub-scores are within [0, 100]."""
        return all(0 <= s <= 100 for s in (self.score, *self.breakdown.to_dict().values()))

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "breakdown": self.breakdown.to_dict(),
            "provenance": self.provenance.value,
        }


def _percent(fraction: float) -> int:
    return int(round_half_up(fraction * 100))


class CompatibilityScorer:
    """Scores candidate pairs with weighted embedding similarity.

    Usage::

        scorer = CompatibilityScorer(EmbeddingProvider(client))
        result = await scorer.score(CompatibilityInput(...))
        result.score, result.breakdown.skill_similarity
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        config: ScoringConfig | None = None,
    ) -> None:
        self._embedder = embedder
        self.config = config or ScoringConfig()

    async def score(self, params: CompatibilityInput) -> CompatibilityResult:
        """Compute the compatibility of ``params.user`` with ``params.match``."""
        cfg = self.config

        user_skills, match_skills = await self._embedder.embed_pair(
            params.user.skills_text, params.match.skills_text
        )
        user_role, match_role = await self._embedder.embed_pair(
            params.user.job_title, params.match.job_title
        )

        skill = clamp(cosine_similarity(user_skills.vector, match_skills.vector), 0.0, 1.0)
        role = clamp(cosine_similarity(user_role.vector, match_role.vector), 0.0, 1.0)
        commute = clamp(params.commute_savings_minutes / cfg.commute_cap_minutes, 0.0, 1.0)
        salary = 1.0 if params.salary_compatible else 0.0

        weighted = (
            cfg.skill_weight * skill
            + cfg.role_weight * role
            + cfg.commute_weight * commute
            + cfg.salary_weight * salary
        )
        if cfg.legacy_rounding:
            raw_score = round_half_up(weighted) * 100
        else:
            raw_score = round_half_up(weighted * 100)

        provenance = Provenance.combine(
            e.provenance for e in (user_skills, match_skills, user_role, match_role)
        )
        result = CompatibilityResult(
            score=int(clamp(raw_score, 0, 100)),
            breakdown=CompatibilityBreakdown(
                skill_similarity=_percent(skill),
                role_similarity=_percent(role),
                commute_gain=_percent(commute),
                salary_match=_percent(salary),
            ),
            provenance=provenance,
        )
        logger.debug(
            "Compatibility %r vs %r: %d (%s, %s)",
            params.user.job_title,
            params.match.job_title,
            result.score,
            result.breakdown,
            provenance,
        )
        return result
