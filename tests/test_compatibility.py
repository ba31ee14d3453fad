"""Compatibility scorer tests — weights, bounds, rounding and provenance.

Most tests use the real fallback embedder: identical texts then produce
identical vectors, which pins the similarity terms to exactly 1.0.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from jobswap.ai.compatibility import (
    CompatibilityInput,
    CompatibilityScorer,
    ProfileFragment,
)
from jobswap.ai.embedder import EmbeddingProvider, Provenance
from jobswap.config import ScoringConfig

from conftest import make_result

ENGINEER = ProfileFragment.of("Senior Software Engineer", ["React", "Node.js"])


def _params(
    user: ProfileFragment = ENGINEER,
    match: ProfileFragment = ENGINEER,
    *,
    before: float = 60,
    after: float = 30,
    salary: bool = True,
) -> CompatibilityInput:
    return CompatibilityInput(
        user=user,
        match=match,
        commute_before_minutes=before,
        commute_after_minutes=after,
        salary_compatible=salary,
    )


class TestWeightedScore:
    """REQUIREMENT: The score is the weighted blend of four signals.

    WHO: The ranker and the HR advisor
    WHAT: 0.5 skill + 0.2 role + 0.2 commute + 0.1 salary, scaled to 0–100;
          identical profiles contribute 100 for skill and role; commute gain
          is one-way savings / 60 capped at 100; salary is 100 or 0
    WHY: The published demo figures depend on these exact weights
    """

    async def test_identical_profiles_with_max_commute_score_100(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        """Same skills, same title, 60 min saved, compatible salary → 100."""
        result = await fallback_scorer.score(_params(before=75, after=15))
        assert result.score == 100
        assert result.breakdown.skill_similarity == 100
        assert result.breakdown.role_similarity == 100
        assert result.breakdown.commute_gain == 100
        assert result.breakdown.salary_match == 100

    async def test_half_commute_gain(self, fallback_scorer: CompatibilityScorer) -> None:
        """30 minutes saved → commute gain 50 and score 0.5+0.2+0.1+0.1 = 90."""
        result = await fallback_scorer.score(_params(before=60, after=30))
        assert result.breakdown.commute_gain == 50
        assert result.score == 90

    async def test_commute_gain_is_capped(self, fallback_scorer: CompatibilityScorer) -> None:
        """Savings beyond 60 minutes do not push commute gain past 100."""
        result = await fallback_scorer.score(_params(before=150, after=10))
        assert result.breakdown.commute_gain == 100

    async def test_longer_commute_gives_zero_gain(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        """A swap that lengthens the commute contributes nothing, never a negative."""
        result = await fallback_scorer.score(_params(before=20, after=50))
        assert result.breakdown.commute_gain == 0
        assert result.is_valid

    async def test_incompatible_salary_costs_ten_points(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        compatible = await fallback_scorer.score(_params(salary=True))
        incompatible = await fallback_scorer.score(_params(salary=False))
        assert incompatible.breakdown.salary_match == 0
        assert compatible.score - incompatible.score == 10

    async def test_scores_stay_in_bounds_for_unrelated_profiles(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        """Arbitrary dissimilar inputs still yield 0–100 everywhere."""
        result = await fallback_scorer.score(
            _params(
                ProfileFragment.of("Nurse", ["Triage"]),
                ProfileFragment.of("Data Scientist", ["PyTorch", "SQL"]),
                before=10,
                after=10,
                salary=False,
            )
        )
        assert result.is_valid
        assert 0 <= result.score <= 100

    async def test_empty_skill_lists_are_scored(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        """Two empty skill lists embed the same empty text and match fully."""
        empty = ProfileFragment.of("Engineer", [])
        result = await fallback_scorer.score(_params(empty, empty))
        assert result.breakdown.skill_similarity == 100


class TestScoringConfig:
    """REQUIREMENT: Weights and rounding come from [scoring].

    WHO: Operators tuning the ranking
    WHAT: Custom weights change the blend; legacy rounding rounds before
          scaling, collapsing scores to 0 or 100
    WHY: The historical figures must stay reproducible on demand, while the
         default rounding keeps scores meaningful
    """

    async def test_custom_weights(self, fallback_embedder: EmbeddingProvider) -> None:
        """With all weight on salary, the score is just the salary signal."""
        config = ScoringConfig(
            skill_weight=0.0, role_weight=0.0, commute_weight=0.0, salary_weight=1.0
        )
        scorer = CompatibilityScorer(fallback_embedder, config)
        assert (await scorer.score(_params(salary=True))).score == 100
        assert (await scorer.score(_params(salary=False))).score == 0

    async def test_legacy_rounding_collapses_to_extremes(
        self, fallback_embedder: EmbeddingProvider
    ) -> None:
        """0.9 rounds to 1 before scaling → 100; default rounding keeps 90."""
        legacy = CompatibilityScorer(fallback_embedder, ScoringConfig(legacy_rounding=True))
        default = CompatibilityScorer(fallback_embedder)
        assert (await legacy.score(_params())).score == 100
        assert (await default.score(_params())).score == 90

    async def test_legacy_rounding_low_score_is_zero(
        self, fallback_embedder: EmbeddingProvider
    ) -> None:
        config = ScoringConfig(
            skill_weight=0.0,
            role_weight=0.0,
            commute_weight=0.4,
            salary_weight=0.0,
            legacy_rounding=True,
        )
        scorer = CompatibilityScorer(fallback_embedder, config)
        assert (await scorer.score(_params(before=90, after=10))).score == 0


class TestScorerProvenance:
    """REQUIREMENT: A score says whether it used the remote model.

    WHO: Callers deciding whether to show a "degraded" badge
    WHAT: REMOTE only when all four embeddings were remote; four embed
          calls per score
    WHY: A fallback score looks plausible; without the flag nobody would
         notice the model was down
    """

    async def test_fallback_scores_are_degraded(
        self, fallback_scorer: CompatibilityScorer
    ) -> None:
        result = await fallback_scorer.score(_params())
        assert result.provenance is Provenance.FALLBACK
        assert result.degraded

    async def test_remote_scores_are_not_degraded(self, mock_client: MagicMock) -> None:
        scorer = CompatibilityScorer(EmbeddingProvider(mock_client))
        result = await scorer.score(_params())
        assert result.provenance is Provenance.REMOTE
        assert not result.degraded
        assert mock_client.embed.await_count == 4

    async def test_remote_identical_vectors_score_full_similarity(
        self, mock_client: MagicMock
    ) -> None:
        """The mock returns one fixed vector, so every cosine is 1."""
        scorer = CompatibilityScorer(EmbeddingProvider(mock_client))
        result = await scorer.score(_params(before=60, after=0))
        assert result.score == 100

    async def test_orthogonal_remote_vectors(self, mock_client: MagicMock) -> None:
        """User vs match vectors at right angles give 0 similarity."""
        mock_client.embed = AsyncMock(
            side_effect=[[1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [0.0, 1.0]]
        )
        scorer = CompatibilityScorer(EmbeddingProvider(mock_client))
        result = await scorer.score(_params(before=60, after=30))
        assert result.breakdown.skill_similarity == 0
        assert result.breakdown.role_similarity == 0
        # 0.2 * 0.5 + 0.1 * 1.0 = 0.2
        assert result.score == 20

    def test_to_dict_shape(self) -> None:
        data = make_result(77).to_dict()
        assert data["score"] == 77
        assert data["provenance"] == "fallback"
        assert set(data["breakdown"]) == {
            "skill_similarity",
            "role_similarity",
            "commute_gain",
            "salary_match",
        }


@pytest.mark.parametrize(("before", "after"), [(60, 60), (0, 0)])
async def test_no_commute_change_gives_zero_gain(
    fallback_scorer: CompatibilityScorer, before: float, after: float
) -> None:
    result = await fallback_scorer.score(_params(before=before, after=after))
    assert result.breakdown.commute_gain == 0
