"""Embedding, scoring and advice components of the JobSwap pipeline."""

from jobswap.ai.commute import CommuteImpact, StressLevel, describe_impact, estimate_commute_impact
from jobswap.ai.compatibility import (
    CompatibilityBreakdown,
    CompatibilityInput,
    CompatibilityResult,
    CompatibilityScorer,
    ProfileFragment,
)
from jobswap.ai.embedder import Embedding, EmbeddingProvider, Provenance, fallback_embedding
from jobswap.ai.hr_assist import HRAdvisor, HRAnalysis, HRRecommendation
from jobswap.ai.recommender import Recommendation, RecommendationRanker
from jobswap.ai.remote import OllamaClient, OpenAIClient, RemoteModelClient, build_remote_client
from jobswap.ai.resume_parser import ParsedResume, ResumeParser
from jobswap.ai.vectors import cosine_similarity

__all__ = [
    "CommuteImpact",
    "CompatibilityBreakdown",
    "CompatibilityInput",
    "CompatibilityResult",
    "CompatibilityScorer",
    "Embedding",
    "EmbeddingProvider",
    "HRAdvisor",
    "HRAnalysis",
    "HRRecommendation",
    "OllamaClient",
    "OpenAIClient",
    "ParsedResume",
    "ProfileFragment",
    "Provenance",
    "Recommendation",
    "RecommendationRanker",
    "RemoteModelClient",
    "ResumeParser",
    "StressLevel",
    "build_remote_client",
    "cosine_similarity",
    "describe_impact",
    "estimate_commute_impact",
    "fallback_embedding",
]
