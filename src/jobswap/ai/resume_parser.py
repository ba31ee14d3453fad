"""Resume text → structured profile.

With a remote model configured, the resume is sent to a chat model
instructed to answer with one JSON object; every field of the answer is
validated and defaulted individually, so a partially wrong answer still
yields a usable profile.  Without a model, or when the call fails, a
keyword/regex extractor is used instead.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from jobswap.ai.embedder import Provenance
from jobswap.errors import ActionableError

if TYPE_CHECKING:
    from jobswap.ai.remote import RemoteModelClient

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """\
You are an expert resume parser. Extract structured information from resume \
text and return ONLY valid JSON in this exact format:
{
  "job_title": "string",
  "skills": ["string"],
  "tools": ["string"],
  "years_experience": number,
  "certifications": ["string"],
  "education": ["string"],
  "languages": ["string"]
}"""

# First pattern that matches wins; the text is lower-cased beforehand.
_JOB_TITLE_PATTERNS = [
    re.compile(
        r"(?:senior|junior|lead|principal)?\s*"
        r"(?:software|full.?stack|front.?end|back.?end|devops|data|machine learning|ml|ai)?\s*"
        r"(?:engineer|developer|architect|scientist|analyst)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:product|project|engineering|technical)?\s*(?:manager|lead|director)",
        re.IGNORECASE,
    ),
]

COMMON_SKILLS = [
    "React", "TypeScript", "JavaScript", "Node.js", "Python", "Java",
    "AWS", "Docker", "Kubernetes", "PostgreSQL", "MongoDB", "GraphQL",
    "Vue.js", "Angular", "Next.js", "Express", "Django", "Flask",
    "Git", "CI/CD", "Microservices", "REST API", "Agile", "Scrum",
]  # fmt: skip

COMMON_TOOLS = [
    "VS Code", "GitHub", "Jira", "Confluence", "Slack", "Figma",
    "Postman", "Jenkins", "Terraform", "Ansible", "Elasticsearch",
    "Redis", "Kafka", "RabbitMQ", "Splunk", "Datadog",
]  # fmt: skip

_EXPERIENCE_PATTERN = re.compile(
    r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s*)?experience", re.IGNORECASE
)

_CERTIFICATION_PATTERNS = [
    re.compile(r"aws\s*(?:certified|certification)", re.IGNORECASE),
    re.compile(r"google\s*cloud\s*(?:certified|certification)", re.IGNORECASE),
    re.compile(r"azure\s*(?:certified|certification)", re.IGNORECASE),
    re.compile(r"pmp|cissp|scrum\s*master", re.IGNORECASE),
]

DEFAULT_JOB_TITLE = "Software Engineer"
DEFAULT_SKILLS = ("React", "TypeScript", "Node.js")
DEFAULT_TOOLS = ("Git", "VS Code")
DEFAULT_YEARS_EXPERIENCE = 3
DEFAULT_EDUCATION = ("Bachelor's Degree",)
DEFAULT_LANGUAGES = ("English",)


@dataclass
class ParsedResume:
    """Structured profile extracted from a resume."""

    job_title: str
    skills: list[str] = field(default_factory=list)
    tools: list[str] = field(default_factory=list)
    years_experience: float = 0
    certifications: list[str] = field(default_factory=list)
    education: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    provenance: Provenance = Provenance.FALLBACK

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["provenance"] = self.provenance.value
        return data


def parse_resume_fallback(resume_text: str) -> ParsedResume:
    """Keyword/regex extraction used when no model is available.

    Skill and tool detection is plain substring matching, so "Java" is
    also found inside "JavaScript".
    """
    text = resume_text.lower()

    job_title = DEFAULT_JOB_TITLE
    for pattern in _JOB_TITLE_PATTERNS:
        found = pattern.search(text)
        if found:
            job_title = found.group(0).strip()
            break

    skills = [s for s in COMMON_SKILLS if s.lower() in text]
    tools = [t for t in COMMON_TOOLS if t.lower() in text]

    experience = _EXPERIENCE_PATTERN.search(text)
    years = int(experience.group(1)) if experience else DEFAULT_YEARS_EXPERIENCE

    certifications: list[str] = []
    for pattern in _CERTIFICATION_PATTERNS:
        found = pattern.search(text)
        if found:
            certifications.append(found.group(0).strip())

    return ParsedResume(
        job_title=job_title,
        skills=skills or list(DEFAULT_SKILLS),
        tools=tools or list(DEFAULT_TOOLS),
        years_experience=years,
        certifications=certifications,
        education=list(DEFAULT_EDUCATION),
        languages=list(DEFAULT_LANGUAGES),
        provenance=Provenance.FALLBACK,
    )


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _number(value: object) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0


def parse_llm_response(raw: str) -> ParsedResume:
    """Parse the model's JSON answer, defaulting each field independently.

    Raises :class:`~jobswap.errors.ActionableError` (PARSE) when *raw* is
    not a JSON object at all.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ActionableError.parse(
            source="resume parser response",
            raw_error=str(exc),
        ) from None
    if not isinstance(data, dict):
        raise ActionableError.parse(
            source="resume parser response",
            raw_error=f"expected a JSON object, got {type(data).__name__}",
        )

    return ParsedResume(
        job_title=str(data.get("job_title") or ""),
        skills=_string_list(data.get("skills")),
        tools=_string_list(data.get("tools")),
        years_experience=_number(data.get("years_experience")),
        certifications=_string_list(data.get("certifications")),
        education=_string_list(data.get("education")),
        languages=_string_list(data.get("languages")),
        provenance=Provenance.REMOTE,
    )


class ResumeParser:
    """Extracts a :class:`ParsedResume`, remote when possible."""

    def __init__(self, client: RemoteModelClient | None = None) -> None:
        self._client = client

    async def parse(self, resume_text: str) -> ParsedResume:
        """Parse *resume_text*; never fails because of the remote service."""
        if self._client is None:
            return parse_resume_fallback(resume_text)

        try:
            raw = await self._client.complete_json(
                _SYSTEM_PROMPT, f"Parse this resume:\n\n{resume_text}"
            )
            return parse_llm_response(raw)
        except ActionableError as exc:
            logger.warning(
                "Resume parsing via %s failed (%s) — falling back to keyword parser",
                self._client.service,
                exc.error,
            )
            return parse_resume_fallback(resume_text)
