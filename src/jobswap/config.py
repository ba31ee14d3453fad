"""Configuration loading and validation.

Loads ``settings.toml`` and validates every field up front, before any
model client is built or a single embedding is requested.

The validated config is exposed as a :class:`Settings` dataclass with
typed fields for each section: ``ai``, ``scoring``, ``commute``, ``hr``
and ``store``.  Every section is optional; omitted keys take the
defaults below, which reproduce the published JobSwap figures.

The API credential itself never lives in the file — ``[ai].api_key_env``
names the environment variable that holds it.  An unset variable is a
normal condition that selects local (fallback) scoring.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from jobswap.errors import ActionableError

# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------

PROVIDERS = ("openai", "ollama", "none")


@dataclass
class AIConfig:
    """Remote model settings from ``[ai]``."""

    provider: str = "openai"
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str | None = None
    embed_model: str = "text-embedding-3-small"
    llm_model: str = "gpt-4o-mini"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    base_delay: float = 1.0
    embedding_dimensions: int = 384

    def api_key(self) -> str | None:
        """The credential from the environment, or ``None`` when unset/blank."""
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


@dataclass
class ScoringConfig:
    """Compatibility weights from ``[scoring]``."""

    skill_weight: float = 0.5
    role_weight: float = 0.2
    commute_weight: float = 0.2
    salary_weight: float = 0.1
    commute_cap_minutes: float = 60.0
    legacy_rounding: bool = False
    top_n: int = 3


@dataclass
class CommuteConfig:
    """Commute impact constants from ``[commute]``."""

    working_days_per_month: int = 22
    hourly_value: float = 25.0
    fuel_cost_per_minute: float = 0.15
    co2_kg_per_interval: float = 0.5
    co2_interval_minutes: float = 30.0
    productivity_factor: float = 0.8
    productivity_cap: float = 30.0
    high_stress_threshold: float = 50.0
    medium_stress_threshold: float = 25.0


@dataclass
class HRConfig:
    """HR decision thresholds from ``[hr]``."""

    approve_score: float = 80.0
    reject_score: float = 50.0
    reject_risk_count: int = 3
    low_skill_similarity: float = 60.0
    low_role_similarity: float = 70.0
    min_commute_savings: float = 20.0
    strong_skill_similarity: float = 80.0
    min_monthly_hours: float = 10.0
    min_co2_kg: float = 5.0
    min_cost_savings: float = 2000.0
    cost_savings_reference: float = 5000.0
    compatibility_weight: float = 0.6
    productivity_weight: float = 0.2
    savings_weight: float = 0.2


@dataclass
class StoreConfig:
    """Profile store settings from ``[store]``."""

    seed_path: str = "config/seed_data.toml"


@dataclass
class Settings:
    """Top-level validated configuration."""

    ai: AIConfig = field(default_factory=AIConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    commute: CommuteConfig = field(default_factory=CommuteConfig)
    hr: HRConfig = field(default_factory=HRConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


# ---------------------------------------------------------------------------
# Default settings path
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")


# ---------------------------------------------------------------------------
# Loading and validation
# ---------------------------------------------------------------------------


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Load and validate settings from a TOML file.

    Raises :class:`~jobswap.errors.ActionableError`:
      - CONFIG if the file is missing or a section is not a table
      - VALIDATION if field values are out of range
      - PARSE if the TOML is malformed

    Returns a fully validated :class:`Settings` instance.
    """
    filepath = Path(path)
    if not filepath.exists():
        raise ActionableError.config(
            field_name="settings_path",
            reason=f"Settings file not found: {filepath}",
            suggestion=f"Create {filepath} or pass --config with the right path",
        )

    raw_text = filepath.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(raw_text)
    except tomllib.TOMLDecodeError as exc:
        raise ActionableError.parse(
            source=str(filepath),
            raw_error=str(exc),
            suggestion=f"Fix TOML syntax in {filepath}",
        ) from None

    return _validate(data)


def _validate(data: dict[str, object]) -> Settings:
    """Validate raw TOML data and return a Settings instance."""

    # -- ai section ----------------------------------------------------------
    ai_data = _optional_section(data, "ai")
    ai_defaults = AIConfig()

    provider = str(ai_data.get("provider", ai_defaults.provider)).lower()
    if provider not in PROVIDERS:
        raise ActionableError.validation(
            field_name="ai.provider",
            reason=f"'{provider}' is not one of {', '.join(PROVIDERS)}",
            suggestion="Set [ai].provider to openai, ollama or none",
        )

    base_url = ai_data.get("base_url") or None
    if base_url is not None:
        base_url = str(base_url)
        if not base_url.startswith(("http://", "https://")):
            raise ActionableError.validation(
                field_name="ai.base_url",
                reason=f"'{base_url}' is missing a scheme (http:// or https://)",
                suggestion="Set [ai].base_url to a URL starting with http:// or https://",
            )

    ai = AIConfig(
        provider=provider,
        api_key_env=str(ai_data.get("api_key_env", ai_defaults.api_key_env)),
        base_url=base_url,
        embed_model=str(ai_data.get("embed_model", ai_defaults.embed_model)),
        llm_model=str(ai_data.get("llm_model", ai_defaults.llm_model)),
        timeout_seconds=_float(
            ai_data, "ai", "timeout_seconds", ai_defaults.timeout_seconds
        ),
        max_retries=_int(ai_data, "ai", "max_retries", ai_defaults.max_retries),
        base_delay=_float(ai_data, "ai", "base_delay", ai_defaults.base_delay),
        embedding_dimensions=_int(
            ai_data, "ai", "embedding_dimensions", ai_defaults.embedding_dimensions
        ),
    )
    _require_positive("ai.timeout_seconds", ai.timeout_seconds)
    _require_positive("ai.max_retries", ai.max_retries)
    _require_positive("ai.embedding_dimensions", ai.embedding_dimensions)
    if ai.base_delay < 0:
        raise ActionableError.validation(
            field_name="ai.base_delay",
            reason=f"is {ai.base_delay} — must be >= 0",
        )

    # -- scoring section -----------------------------------------------------
    scoring_data = _optional_section(data, "scoring")
    scoring_defaults = ScoringConfig()
    scoring = ScoringConfig(
        skill_weight=_float(
            scoring_data, "scoring", "skill_weight", scoring_defaults.skill_weight
        ),
        role_weight=_float(
            scoring_data, "scoring", "role_weight", scoring_defaults.role_weight
        ),
        commute_weight=_float(
            scoring_data, "scoring", "commute_weight", scoring_defaults.commute_weight
        ),
        salary_weight=_float(
            scoring_data, "scoring", "salary_weight", scoring_defaults.salary_weight
        ),
        commute_cap_minutes=_float(
            scoring_data, "scoring", "commute_cap_minutes",
            scoring_defaults.commute_cap_minutes,
        ),
        legacy_rounding=_bool(
            scoring_data, "scoring", "legacy_rounding", scoring_defaults.legacy_rounding
        ),
        top_n=_int(scoring_data, "scoring", "top_n", scoring_defaults.top_n),
    )

    for weight_name in ("skill_weight", "role_weight", "commute_weight", "salary_weight"):
        _require_unit_interval(f"scoring.{weight_name}", getattr(scoring, weight_name))
    _require_positive("scoring.commute_cap_minutes", scoring.commute_cap_minutes)
    if scoring.top_n < 0:
        raise ActionableError.validation(
            field_name="scoring.top_n",
            reason=f"is {scoring.top_n} — must be >= 0",
        )

    # -- commute section -----------------------------------------------------
    commute_data = _optional_section(data, "commute")
    commute_defaults = CommuteConfig()
    commute = CommuteConfig(
        **_numeric_fields(commute_data, "commute", commute_defaults)  # type: ignore[arg-type]
    )
    _require_positive("commute.working_days_per_month", commute.working_days_per_month)
    _require_positive("commute.co2_interval_minutes", commute.co2_interval_minutes)
    _require_positive("commute.productivity_cap", commute.productivity_cap)
    if commute.medium_stress_threshold > commute.high_stress_threshold:
        raise ActionableError.validation(
            field_name="commute.medium_stress_threshold",
            reason=(
                f"is {commute.medium_stress_threshold} — must not exceed "
                f"high_stress_threshold ({commute.high_stress_threshold})"
            ),
        )

    # -- hr section ----------------------------------------------------------
    hr_data = _optional_section(data, "hr")
    hr_defaults = HRConfig()
    hr = HRConfig(**_numeric_fields(hr_data, "hr", hr_defaults))  # type: ignore[arg-type]
    for weight_name in ("compatibility_weight", "productivity_weight", "savings_weight"):
        _require_unit_interval(f"hr.{weight_name}", getattr(hr, weight_name))
    _require_positive("hr.cost_savings_reference", hr.cost_savings_reference)

    # -- store section -------------------------------------------------------
    store_data = _optional_section(data, "store")
    store = StoreConfig(
        seed_path=str(store_data.get("seed_path", StoreConfig().seed_path)),
    )

    return Settings(ai=ai, scoring=scoring, commute=commute, hr=hr, store=store)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _optional_section(data: dict[str, object], name: str) -> dict[str, object]:
    """Return a top-level section (empty when absent), or raise CONFIG error."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ActionableError.config(
            field_name=name,
            reason=f"[{name}] must be a table, not {type(section).__name__}",
            suggestion=f"Define [{name}] as a TOML table",
        )
    return section


def _require_unit_interval(field_name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ActionableError.validation(
            field_name=field_name,
            reason=f"is {value} — must be between 0.0 and 1.0",
            suggestion=f"Set {field_name} to a value between 0.0 and 1.0",
        )


def _require_positive(field_name: str, value: float) -> None:
    if value <= 0:
        raise ActionableError.validation(
            field_name=field_name,
            reason=f"is {value} — must be > 0",
            suggestion=f"Set {field_name} to a positive number",
        )


def _float(data: dict[str, object], section: str, key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ActionableError.validation(
            field_name=f"{section}.{key}",
            reason=f"{value!r} is not a number",
            suggestion=f"Set {section}.{key} to a number without quotes",
        )
    return float(value)


def _int(data: dict[str, object], section: str, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ActionableError.validation(
            field_name=f"{section}.{key}",
            reason=f"{value!r} is not a whole number",
            suggestion=f"Set {section}.{key} to an integer without quotes",
        )
    return value


def _bool(data: dict[str, object], section: str, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ActionableError.validation(
            field_name=f"{section}.{key}",
            reason=f"{value!r} is not a boolean",
            suggestion=f"Set {section}.{key} to true or false without quotes",
        )
    return value


def _numeric_fields(
    data: dict[str, object], section: str, defaults: object
) -> dict[str, float | int]:
    """Read every field of *defaults* from *data*, keeping each default's type."""
    values: dict[str, float | int] = {}
    for name, default in vars(defaults).items():
        if isinstance(default, int):
            values[name] = _int(data, section, name, default)
        else:
            values[name] = _float(data, section, name, default)
    return values
