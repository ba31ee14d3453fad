"""CLI command handlers for the JobSwap scoring engine.

Each public ``handle_*`` function corresponds to a CLI subcommand and
encapsulates the wiring (settings → model client → components), the
pipeline call and the output for that command.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path

from jobswap.ai.commute import describe_impact, estimate_commute_impact
from jobswap.ai.compatibility import CompatibilityScorer
from jobswap.ai.embedder import EmbeddingProvider
from jobswap.ai.hr_assist import HRAdvisor
from jobswap.ai.recommender import RecommendationRanker
from jobswap.ai.remote import RemoteModelClient, build_remote_client
from jobswap.ai.resume_parser import ResumeParser
from jobswap.config import DEFAULT_SETTINGS_PATH, Settings, load_settings
from jobswap.errors import ActionableError
from jobswap.export import MarkdownExporter
from jobswap.logging import configure_file_logging, set_verbosity
from jobswap.store import InMemoryProfileStore


@dataclass
class Pipeline:
    """The components one CLI invocation needs, built from settings."""

    settings: Settings
    client: RemoteModelClient | None
    embedder: EmbeddingProvider
    scorer: CompatibilityScorer

    @classmethod
    def from_settings(cls, settings: Settings) -> Pipeline:
        client = build_remote_client(settings.ai)
        embedder = EmbeddingProvider(client, dimensions=settings.ai.embedding_dimensions)
        return cls(
            settings=settings,
            client=client,
            embedder=embedder,
            scorer=CompatibilityScorer(embedder, settings.scoring),
        )


def configure_logging(args: argparse.Namespace) -> None:
    set_verbosity(getattr(args, "verbose", False))
    log_dir = getattr(args, "log_dir", None)
    if log_dir:
        configure_file_logging(log_dir)


def _load(args: argparse.Namespace) -> Settings:
    return load_settings(args.config or DEFAULT_SETTINGS_PATH)


def _emit(args: argparse.Namespace, markdown: str) -> None:
    output = getattr(args, "output", None)
    if output:
        path = MarkdownExporter().export(markdown, output)
        print(f"Exported Markdown → {path}")
    else:
        print(markdown)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def handle_recommend(args: argparse.Namespace) -> None:
    """Rank the seeded matches for the seeded current user."""
    settings = _load(args)
    pipeline = Pipeline.from_settings(settings)
    store = InMemoryProfileStore.from_toml(settings.store.seed_path)
    user = store.current_user()
    top_n = args.top if args.top is not None else settings.scoring.top_n
    ranker = RecommendationRanker(pipeline.scorer, top_n=top_n)

    recommendations = asyncio.run(
        ranker.rank(user.skills, user.job_title, store.list_matches())
    )

    if args.format == "json":
        _print_json([r.to_dict() for r in recommendations])
        return
    if args.format == "markdown":
        _emit(args, MarkdownExporter().render_recommendations(recommendations, user_name=user.name))
        return

    print(f"\n{'=' * 60}")
    print(f" Swap recommendations for {user.name} ({user.job_title})")
    print(f"{'=' * 60}")
    for i, rec in enumerate(recommendations, 1):
        marker = "★" if rec.is_recommended else " "
        print(f"{marker} {i}. [{rec.score:3d}] {rec.match.name} — {rec.match.job_title}")
        print(f"     {rec.match.location} | {rec.reasoning}")
        if rec.compatibility.degraded:
            print("     (scored with local fallback embeddings)")
    print()


def handle_hr_review(args: argparse.Namespace) -> None:
    """Analyse one or all seeded HR requests."""
    settings = _load(args)
    pipeline = Pipeline.from_settings(settings)
    store = InMemoryProfileStore.from_toml(settings.store.seed_path)
    advisor = HRAdvisor(pipeline.scorer, commute_config=settings.commute, config=settings.hr)

    if args.request_id:
        requests = [store.get_hr_request(args.request_id)]
    else:
        requests = store.list_hr_requests()

    async def _run() -> list:
        return [await advisor.analyze(request) for request in requests]

    analyses = asyncio.run(_run())

    if args.format == "json":
        _print_json([a.to_dict() for a in analyses])
        return
    if args.format == "markdown":
        _emit(args, MarkdownExporter().render_hr_analyses(analyses))
        return

    for request, analysis in zip(requests, analyses, strict=True):
        print(f"\n{request.id}: {request.from_user_name} ⇄ {request.to_user_name}")
        print(
            f"  {analysis.recommendation.value.upper()} "
            f"(score {analysis.score}, confidence {analysis.confidence}%)"
        )
        print(f"  {analysis.reasoning}")
        for benefit in analysis.benefits:
            print(f"  + {benefit}")
        for risk in analysis.risk_factors:
            print(f"  - {risk}")
    print()


def handle_commute(args: argparse.Namespace) -> None:
    """Print the commute impact for a before/after pair."""
    if args.before < 0 or args.after < 0:
        raise ActionableError.validation(
            field_name="commute minutes",
            reason=f"before={args.before}, after={args.after} — must be >= 0",
        )
    settings = _load(args)
    impact = estimate_commute_impact(args.before, args.after, args.days, config=settings.commute)

    if args.format == "json":
        _print_json(impact.to_dict())
        return

    print(f"Daily savings:      {impact.daily_savings_minutes:g} min (round trip)")
    print(f"Hours saved:        {impact.monthly_hours_saved:g}/month, {impact.yearly_hours_saved:g}/year")
    print(f"CO₂ saved:          {impact.co2_saved_kg:g} kg/month")
    print(f"Stress reduction:   {impact.stress_reduction_level.value}")
    print(f"Cost savings:       ${impact.cost_savings_monthly}/month, ${impact.cost_savings_yearly}/year")
    print(f"Productivity gain:  {impact.productivity_gain}%")
    print(describe_impact(impact))


def handle_parse_resume(args: argparse.Namespace) -> None:
    """Parse a plain-text resume file."""
    path = Path(args.path)
    if not path.exists():
        print(f"Error: resume file not found: {path}", file=sys.stderr)
        sys.exit(1)

    settings = _load(args)
    client = build_remote_client(settings.ai)
    parsed = asyncio.run(ResumeParser(client).parse(path.read_text(encoding="utf-8")))

    if args.format == "json":
        _print_json(parsed.to_dict())
        return

    print(f"Job title:       {parsed.job_title}")
    print(f"Experience:      {parsed.years_experience:g} years")
    print(f"Skills:          {', '.join(parsed.skills) or '—'}")
    print(f"Tools:           {', '.join(parsed.tools) or '—'}")
    print(f"Certifications:  {', '.join(parsed.certifications) or '—'}")
    print(f"Education:       {', '.join(parsed.education) or '—'}")
    print(f"Languages:       {', '.join(parsed.languages) or '—'}")
    print(f"Source:          {parsed.provenance.value}")
