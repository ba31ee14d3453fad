"""Domain records exchanged with the JobSwap front end.

These are plain data: the scoring pipeline reads them and returns new
result objects; it never mutates them.  Field names follow Python
conventions; :meth:`from_dict` helpers accept the snake_case keys used
in ``seed_data.toml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SwapStatus(StrEnum):
    """Lifecycle of a swap request, from proposal to HR decision."""

    PENDING = "pending"
    PEER_ACCEPTED = "peer_accepted"
    HR_REVIEW = "hr_review"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Location:
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Location:
        data = data or {}
        return cls(
            address=str(data.get("address", "")),
            lat=float(data.get("lat", 0.0)),
            lng=float(data.get("lng", 0.0)),
        )


@dataclass
class UserProfile:
    """An employee profile as stored by the profile store."""

    id: str
    name: str
    email: str = ""
    company: str = ""
    job_title: str = ""
    salary_band: str = ""
    skills: list[str] = field(default_factory=list)
    home_location: Location = field(default_factory=Location)
    work_location: Location = field(default_factory=Location)
    resume_embedding: list[float] | None = None
    profile_complete: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            company=str(data.get("company", "")),
            job_title=str(data.get("job_title", "")),
            salary_band=str(data.get("salary_band", "")),
            skills=[str(s) for s in data.get("skills", [])],
            home_location=Location.from_dict(data.get("home_location")),
            work_location=Location.from_dict(data.get("work_location")),
            profile_complete=bool(data.get("profile_complete", False)),
        )


@dataclass(frozen=True)
class ResumeDocument:
    id: str
    user_id: str
    text: str
    embedding: list[float] = field(default_factory=list)
    parsed_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Match:
    """A potential swap partner surfaced to an employee."""

    id: str
    user_id: str
    name: str
    company: str
    job_title: str
    skills: tuple[str, ...]
    sector: str
    location: str
    commute_before_minutes: float
    commute_after_minutes: float
    salary_compatible: bool

    @property
    def commute_savings_minutes(self) -> float:
        """One-way minutes saved by the swap."""
        return self.commute_before_minutes - self.commute_after_minutes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Match:
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("user_id", "")),
            name=str(data.get("name", "")),
            company=str(data.get("company", "")),
            job_title=str(data.get("job_title", "")),
            skills=tuple(str(s) for s in data.get("skills", [])),
            sector=str(data.get("sector", "")),
            location=str(data.get("location", "")),
            commute_before_minutes=float(data.get("commute_before_minutes", 0)),
            commute_after_minutes=float(data.get("commute_after_minutes", 0)),
            salary_compatible=bool(data.get("salary_compatible", False)),
        )


@dataclass(frozen=True)
class SwapRequest:
    """A proposal from one employee to swap with another."""

    id: str
    match_id: str
    from_user_id: str
    from_user_name: str
    from_user_job_title: str
    from_user_skills: tuple[str, ...]
    to_user_id: str
    to_user_name: str
    to_user_job_title: str
    commute_savings_minutes: float
    status: SwapStatus = SwapStatus.PENDING
    from_user_company: str = ""
    to_user_company: str = ""
    message: str = ""
    # Not supplied by the current front end; see HRAdvisor for the fallback.
    to_user_skills: tuple[str, ...] | None = None


@dataclass(frozen=True)
class HRRequest(SwapRequest):
    """A swap request awaiting HR approval."""

    estimated_cost_savings: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HRRequest:
        to_skills = data.get("to_user_skills")
        return cls(
            id=str(data["id"]),
            match_id=str(data.get("match_id", "")),
            from_user_id=str(data.get("from_user_id", "")),
            from_user_name=str(data.get("from_user_name", "")),
            from_user_job_title=str(data.get("from_user_job_title", "")),
            from_user_skills=tuple(str(s) for s in data.get("from_user_skills", [])),
            to_user_id=str(data.get("to_user_id", "")),
            to_user_name=str(data.get("to_user_name", "")),
            to_user_job_title=str(data.get("to_user_job_title", "")),
            commute_savings_minutes=float(data.get("commute_savings_minutes", 0)),
            status=SwapStatus(data.get("status", SwapStatus.PENDING.value)),
            from_user_company=str(data.get("from_user_company", "")),
            to_user_company=str(data.get("to_user_company", "")),
            message=str(data.get("message", "")),
            to_user_skills=tuple(str(s) for s in to_skills) if to_skills is not None else None,
            estimated_cost_savings=float(data.get("estimated_cost_savings", 0)),
        )
