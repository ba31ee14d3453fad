"""Global test configuration — shared fixtures.

This conftest provides:

1. **I/O-boundary fixtures** — ``mock_client`` (a RemoteModelClient stand-in
   whose async methods are ``AsyncMock`` stubs) and ``fallback_embedder``
   (a real EmbeddingProvider with no remote client, so every vector comes
   from the deterministic hash fallback).

2. **Record factories** — ``make_match`` and ``make_hr_request`` build
   domain records with sensible defaults.

3. **Settings files** — ``write_settings`` writes a settings.toml (and the
   seed data it points at) under ``tmp_path`` for config and CLI tests.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from jobswap.ai.compatibility import (
    CompatibilityBreakdown,
    CompatibilityResult,
    CompatibilityScorer,
)
from jobswap.ai.embedder import EmbeddingProvider, Provenance
from jobswap.models import HRRequest, Match

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
SEED_DATA_PATH = _PROJECT_ROOT / "config" / "seed_data.toml"

# Canonical fake remote embedding used across test files.
EMBED_FAKE: list[float] = [0.1, 0.2, 0.3, 0.4, 0.5]


# ---------------------------------------------------------------------------
# I/O-boundary fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> MagicMock:
    """Remote model client with stubbed async methods — no network needed."""
    client = MagicMock()
    client.service = "OpenAI"
    client.embed_model = "text-embedding-3-small"
    client.llm_model = "gpt-4o-mini"
    client.embed = AsyncMock(return_value=EMBED_FAKE)
    client.complete_json = AsyncMock(return_value='{"job_title": "Data Engineer"}')
    return client


@pytest.fixture
def fallback_embedder() -> EmbeddingProvider:
    """EmbeddingProvider without a remote client."""
    return EmbeddingProvider(None)


@pytest.fixture
def fallback_scorer(fallback_embedder: EmbeddingProvider) -> CompatibilityScorer:
    return CompatibilityScorer(fallback_embedder)


def make_result(
    score: int,
    *,
    skill: int = 90,
    role: int = 90,
    commute: int = 50,
    salary: int = 100,
    provenance: Provenance = Provenance.FALLBACK,
) -> CompatibilityResult:
    """A CompatibilityResult with a hand-picked score and breakdown."""
    return CompatibilityResult(
        score=score,
        breakdown=CompatibilityBreakdown(
            skill_similarity=skill,
            role_similarity=role,
            commute_gain=commute,
            salary_match=salary,
        ),
        provenance=provenance,
    )


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_match():
    """Factory fixture — returns a callable that produces a Match.

    Usage::

        def test_something(make_match):
            match = make_match()
            match = make_match(id="m-2", commute_before_minutes=90)
    """

    def _factory(
        id: str = "match-001",
        name: str = "Priya Sharma",
        job_title: str = "Senior Software Engineer",
        skills: tuple[str, ...] = ("React", "JavaScript", "Node.js"),
        commute_before_minutes: float = 75,
        commute_after_minutes: float = 25,
        salary_compatible: bool = True,
    ) -> Match:
        return Match(
            id=id,
            user_id=f"user-{id}",
            name=name,
            company="TechCorp Solutions",
            job_title=job_title,
            skills=skills,
            sector="Technology",
            location="San Francisco, CA",
            commute_before_minutes=commute_before_minutes,
            commute_after_minutes=commute_after_minutes,
            salary_compatible=salary_compatible,
        )

    return _factory


@pytest.fixture
def make_hr_request():
    """Factory fixture — returns a callable that produces an HRRequest."""

    def _factory(
        id: str = "hr-req-001",
        from_user_job_title: str = "Senior Software Engineer",
        from_user_skills: tuple[str, ...] = ("React", "Angular", "Node.js"),
        to_user_job_title: str = "Senior Software Engineer",
        to_user_skills: tuple[str, ...] | None = None,
        commute_savings_minutes: float = 45,
        estimated_cost_savings: float = 2400,
    ) -> HRRequest:
        return HRRequest(
            id=id,
            match_id="match-005",
            from_user_id="user-007",
            from_user_name="Alex Thompson",
            from_user_job_title=from_user_job_title,
            from_user_skills=from_user_skills,
            to_user_id="user-008",
            to_user_name="Jessica Martinez",
            to_user_job_title=to_user_job_title,
            to_user_skills=to_user_skills,
            commute_savings_minutes=commute_savings_minutes,
            estimated_cost_savings=estimated_cost_savings,
        )

    return _factory


# ---------------------------------------------------------------------------
# Settings files
# ---------------------------------------------------------------------------


@pytest.fixture
def write_settings(tmp_path: Path):
    """Factory fixture — writes settings.toml under ``tmp_path``.

    ``[store].seed_path`` points at the repository's seed data unless the
    caller's TOML sets its own ``[store]`` section.  ``[ai].provider``
    defaults to ``none`` so no test ever reaches the network.
    """

    def _factory(body: str = "") -> Path:
        content = body
        if "[ai]" not in body:
            content += '\n[ai]\nprovider = "none"\n'
        if "[store]" not in body:
            content += f'\n[store]\nseed_path = "{SEED_DATA_PATH.as_posix()}"\n'
        path = tmp_path / "settings.toml"
        path.write_text(content, encoding="utf-8")
        return path

    return _factory
