"""Profile storage behind a small interface.

Scoring code never talks to storage directly; the CLI (or any other
caller) fetches records from a :class:`ProfileStore` and hands them to
the pipeline.  The only implementation is :class:`InMemoryProfileStore`,
seeded from ``config/seed_data.toml`` — a real database can replace it by
implementing the same protocol.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from jobswap.ai.vectors import cosine_similarity
from jobswap.errors import ActionableError
from jobswap.models import HRRequest, Match, ResumeDocument, UserProfile

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    """Read/write access to profiles and the records built on them."""

    def current_user(self) -> UserProfile: ...

    def get_user_profile(self, user_id: str) -> UserProfile: ...

    def save_user_profile(self, profile: UserProfile) -> UserProfile: ...

    def save_resume(self, resume: ResumeDocument) -> ResumeDocument: ...

    def find_similar_profiles(
        self, embedding: Sequence[float], limit: int = 10
    ) -> list[UserProfile]: ...

    def list_matches(self) -> list[Match]: ...

    def list_hr_requests(self) -> list[HRRequest]: ...

    def get_hr_request(self, request_id: str) -> HRRequest: ...


class InMemoryProfileStore:
    """Dict-backed :class:`ProfileStore`; nothing survives the process."""

    def __init__(
        self,
        user: UserProfile,
        *,
        matches: Sequence[Match] = (),
        hr_requests: Sequence[HRRequest] = (),
        profiles: Sequence[UserProfile] = (),
    ) -> None:
        self._current_user_id = user.id
        self._profiles: dict[str, UserProfile] = {p.id: p for p in profiles}
        self._profiles[user.id] = user
        self._resumes: dict[str, ResumeDocument] = {}
        self._matches = list(matches)
        self._hr_requests = {r.id: r for r in hr_requests}

    # -- construction --------------------------------------------------------

    @classmethod
    def from_toml(cls, path: str | Path) -> InMemoryProfileStore:
        """Build a store from a seed file with ``[user]``, ``[[matches]]``,
        ``[[hr_requests]]`` and optional ``[[profiles]]`` tables."""
        filepath = Path(path)
        if not filepath.exists():
            raise ActionableError.config(
                field_name="store.seed_path",
                reason=f"Seed file not found: {filepath}",
                suggestion="Point [store].seed_path at a seed_data.toml file",
            )
        try:
            data = tomllib.loads(filepath.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ActionableError.parse(
                source=str(filepath),
                raw_error=str(exc),
                suggestion=f"Fix TOML syntax in {filepath}",
            ) from None

        user_data = data.get("user")
        if not isinstance(user_data, dict):
            raise ActionableError.config(
                field_name="user",
                reason=f"Required table [user] is missing from {filepath}",
                suggestion=f"Add a [user] table to {filepath}",
            )

        try:
            store = cls(
                UserProfile.from_dict(user_data),
                matches=[Match.from_dict(m) for m in _tables(data, "matches")],
                hr_requests=[HRRequest.from_dict(r) for r in _tables(data, "hr_requests")],
                profiles=[UserProfile.from_dict(p) for p in _tables(data, "profiles")],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ActionableError.parse(
                source=str(filepath),
                raw_error=f"invalid record: {type(exc).__name__}: {exc}",
                suggestion="Every record needs an 'id'; check numeric and status fields",
            ) from None

        logger.info(
            "Loaded seed data from %s: %d matches, %d HR requests",
            filepath,
            len(store._matches),
            len(store._hr_requests),
        )
        return store

    # -- profiles ------------------------------------------------------------

    def current_user(self) -> UserProfile:
        return self._profiles[self._current_user_id]

    def get_user_profile(self, user_id: str) -> UserProfile:
        try:
            return self._profiles[user_id]
        except KeyError:
            raise ActionableError.lookup("user profile", user_id) from None

    def save_user_profile(self, profile: UserProfile) -> UserProfile:
        self._profiles[profile.id] = profile
        logger.debug("Saved profile %s", profile.id)
        return profile

    def save_resume(self, resume: ResumeDocument) -> ResumeDocument:
        """Store *resume* and attach its embedding to the owner's profile."""
        self._resumes[resume.id] = resume
        owner = self._profiles.get(resume.user_id)
        if owner is not None and resume.embedding:
            owner.resume_embedding = list(resume.embedding)
        logger.debug("Saved resume %s for %s", resume.id, resume.user_id)
        return resume

    def find_similar_profiles(
        self, embedding: Sequence[float], limit: int = 10
    ) -> list[UserProfile]:
        """Profiles ordered by cosine similarity of their resume embedding.

        Profiles without an embedding, or embedded by a different model
        (different length), are skipped.
        """
        scored: list[tuple[float, UserProfile]] = []
        for profile in self._profiles.values():
            vector = profile.resume_embedding
            if not vector or len(vector) != len(embedding):
                continue
            scored.append((cosine_similarity(embedding, vector), profile))
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [profile for _, profile in scored[:limit]]

    # -- matches and requests ------------------------------------------------

    def list_matches(self) -> list[Match]:
        return list(self._matches)

    def list_hr_requests(self) -> list[HRRequest]:
        return list(self._hr_requests.values())

    def get_hr_request(self, request_id: str) -> HRRequest:
        try:
            return self._hr_requests[request_id]
        except KeyError:
            raise ActionableError.lookup("HR request", request_id) from None


def _tables(data: dict[str, Any], name: str) -> list[dict[str, Any]]:
    tables = data.get(name, [])
    if not isinstance(tables, list):
        raise ActionableError.config(
            field_name=name,
            reason=f"'{name}' must be an array of tables ([[{name}]])",
        )
    return tables
