"""Actionable error hierarchy for the JobSwap scoring engine.

Errors are classified by **recovery path**, not by origin.
Each error type carries structured guidance for three audiences:
  - The calling code (typed ``error_type`` for routing)
  - The human operator (``suggestion`` + ``troubleshooting`` steps)
  - An AI agent (``ai_guidance`` with concrete next actions)

Remote AI failures are raised as ``ActionableError`` inside the model
clients and recovered by the embedder / resume parser fallback; they never
reach the scoring callers.  Validation errors (e.g. mismatched vector
lengths) propagate — those are the caller's bug to fix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------


class ErrorType(StrEnum):
    """Recovery-path categories — what to *do*, not where it came from."""

    AUTHENTICATION = "authentication"
    CONFIG = "config"
    CONNECTION = "connection"
    EMBEDDING = "embedding"
    LOOKUP = "lookup"
    PARSE = "parse"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"


# ---------------------------------------------------------------------------
# Guidance dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AIGuidance:
    """Machine-readable guidance for an AI agent consuming this error."""

    action_required: str
    command: str | None = None
    discovery_tool: str | None = None
    checks: list[str] | None = None
    steps: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"action_required": self.action_required}
        if self.command is not None:
            result["command"] = self.command
        if self.discovery_tool is not None:
            result["discovery_tool"] = self.discovery_tool
        if self.checks is not None:
            result["checks"] = self.checks
        if self.steps is not None:
            result["steps"] = self.steps
        return result


@dataclass(frozen=True)
class Troubleshooting:
    """Sequential, human-readable recovery steps for the operator."""

    steps: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"steps": self.steps}


# ---------------------------------------------------------------------------
# Base actionable error
# ---------------------------------------------------------------------------


@dataclass
class ActionableError(Exception):
    """Structured error with embedded recovery guidance.

    Use the factory classmethods rather than constructing directly —
    they encode domain knowledge so callers don't have to.
    """

    error: str
    error_type: ErrorType
    service: str

    success: bool = field(default=False, init=False)
    suggestion: str | None = None
    ai_guidance: AIGuidance | None = None
    troubleshooting: Troubleshooting | None = None
    context: dict[str, Any] | None = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def __post_init__(self) -> None:
        super().__init__(self.error)

    # -- serialisation -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Compact JSON-ready dict — ``None`` values are excluded."""
        result: dict[str, Any] = {
            "success": self.success,
            "error": self.error,
            "error_type": self.error_type.value,
            "service": self.service,
            "timestamp": self.timestamp,
        }
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        if self.ai_guidance is not None:
            result["ai_guidance"] = self.ai_guidance.to_dict()
        if self.troubleshooting is not None:
            result["troubleshooting"] = self.troubleshooting.to_dict()
        if self.context is not None:
            result["context"] = self.context
        return result

    # -- factory methods -----------------------------------------------------

    @classmethod
    def authentication(
        cls,
        service: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Rejected or expired API credential."""
        return cls(
            error=f"Authentication failed for {service}: {raw_error}",
            error_type=ErrorType.AUTHENTICATION,
            service=service,
            suggestion=suggestion or f"Check the API key configured for {service}",
            ai_guidance=AIGuidance(
                action_required=f"Operator must supply a valid {service} API key",
                checks=[
                    "Is the environment variable named by [ai].api_key_env set?",
                    "Has the key been revoked or rotated?",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    "1. Open config/settings.toml and note [ai].api_key_env",
                    "2. Export a valid key under that variable name",
                    "3. Re-run the command (or unset the key to use local scoring)",
                ]
            ),
        )

    @classmethod
    def config(
        cls,
        field_name: str,
        reason: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Missing or invalid configuration in settings.toml."""
        return cls(
            error=f"Configuration error — {field_name}: {reason}",
            error_type=ErrorType.CONFIG,
            service="settings.toml",
            suggestion=suggestion or f"Fix '{field_name}' in config/settings.toml",
            ai_guidance=AIGuidance(
                action_required=f"Correct the '{field_name}' value in config/settings.toml",
                checks=[
                    "Verify config/settings.toml exists",
                    f"Verify '{field_name}' is present and valid",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    "1. Open config/settings.toml",
                    f"2. Locate the '{field_name}' setting",
                    f"3. Fix the issue: {reason}",
                    "4. Save and re-run",
                ]
            ),
        )

    @classmethod
    def connection(
        cls,
        service: str,
        url: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Model service unreachable or timed out."""
        return cls(
            error=f"Cannot connect to {service} at {url}: {raw_error}",
            error_type=ErrorType.CONNECTION,
            service=service,
            suggestion=suggestion or f"Verify {service} is reachable at {url}",
            ai_guidance=AIGuidance(
                action_required=f"Verify {service} is reachable",
                command=f"curl -s {url}",
                checks=[
                    f"Is {service} up?",
                    f"Is the URL {url} correct in settings.toml?",
                    "Is [ai].timeout_seconds long enough for this network?",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    f"1. Verify {service} is running",
                    f"2. Test connectivity: curl -s {url}",
                    "3. Check [ai].base_url in config/settings.toml",
                    "4. Re-run the command",
                ]
            ),
        )

    @classmethod
    def embedding(
        cls,
        model: str,
        raw_error: str,
        *,
        service: str = "model-api",
        suggestion: str | None = None,
    ) -> ActionableError:
        """Embedding or chat-completion call failure after retries."""
        return cls(
            error=f"Embedding/LLM call failed for model '{model}': {raw_error}",
            error_type=ErrorType.EMBEDDING,
            service=service,
            suggestion=suggestion or f"Verify model '{model}' is available on {service}",
            ai_guidance=AIGuidance(
                action_required="Verify model availability",
                checks=[
                    f"Is {service} responsive?",
                    f"Is model '{model}' spelled correctly in [ai]?",
                    "Is the account rate limited?",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    f"1. Check {service} status",
                    f"2. Confirm '{model}' exists for your account or server",
                    "3. Re-run the command — local scoring is used meanwhile",
                ]
            ),
        )

    @classmethod
    def lookup(
        cls,
        kind: str,
        identifier: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """A record id that the profile store does not know."""
        return cls(
            error=f"No {kind} found with id '{identifier}'",
            error_type=ErrorType.LOOKUP,
            service="profile_store",
            suggestion=suggestion or f"Verify the {kind} id against the seed data",
            ai_guidance=AIGuidance(
                action_required=f"Use a valid {kind} id",
                discovery_tool="python -m jobswap hr-review --format json",
                checks=[
                    "Is the id copied correctly?",
                    "Does [store].seed_path point at the expected seed file?",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    "1. List the known records with: python -m jobswap hr-review",
                    f"2. Verify '{identifier}' appears in that output",
                    "3. Re-run with the correct id",
                ]
            ),
        )

    @classmethod
    def parse(
        cls,
        source: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Malformed TOML, JSON or model response."""
        return cls(
            error=f"Parse failure in {source}: {raw_error}",
            error_type=ErrorType.PARSE,
            service=source,
            suggestion=suggestion or f"Inspect the content of {source}",
            ai_guidance=AIGuidance(
                action_required=f"Inspect and correct the content of {source}",
                checks=[
                    f"Is {source} well-formed?",
                    "Did the model ignore the JSON-only instruction?",
                ],
            ),
        )

    @classmethod
    def validation(
        cls,
        field_name: str,
        reason: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Input validation failure (TOML values, vectors, CLI args)."""
        return cls(
            error=f"Validation error — {field_name}: {reason}",
            error_type=ErrorType.VALIDATION,
            service="validation",
            suggestion=suggestion or f"Fix '{field_name}': {reason}",
            ai_guidance=AIGuidance(
                action_required=f"Correct the value for '{field_name}'",
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    f"1. Check the value of '{field_name}'",
                    f"2. Issue: {reason}",
                    "3. Correct and retry",
                ]
            ),
        )

    @classmethod
    def unexpected(
        cls,
        service: str,
        operation: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Catch-all for truly unexpected failures."""
        return cls(
            error=f"Unexpected error in {service} during {operation}: {raw_error}",
            error_type=ErrorType.UNEXPECTED,
            service=service,
            suggestion=suggestion or "This is an unexpected error — check logs for details",
            ai_guidance=AIGuidance(
                action_required="Analyze the error and escalate if needed",
                checks=[
                    "Check the full traceback in logs",
                    f"Is {service} in a known-good state?",
                ],
            ),
        )

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        service: str,
        operation: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Auto-classify an exception by keyword patterns.

        A caller-supplied ``suggestion`` is always preserved — it carries
        context the generic classifier cannot infer.
        """
        error_str = str(error).lower()
        raw_error = str(error)

        if any(kw in error_str for kw in ("unauthorized", "401", "api key", "credential")):
            return cls.authentication(service, raw_error, suggestion=suggestion)

        if any(kw in error_str for kw in ("timeout", "timed out")):
            return cls.connection(service, "", raw_error, suggestion=suggestion)

        if any(kw in error_str for kw in ("connection refused", "unreachable", "resolve")):
            return cls.connection(service, "", raw_error, suggestion=suggestion)

        return cls.unexpected(service, operation, raw_error, suggestion=suggestion)
