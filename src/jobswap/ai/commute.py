"""Commute impact estimation.

Turns a one-way before/after commute pair into monthly and yearly figures
an employee or HR reviewer can reason about.  All formulas are fixed
ratios over minutes saved, not distance-based:

- daily savings      = (before − after) × 2           (round trip)
- monthly hours      = daily × working days / 60
- CO₂ (kg/month)     = monthly minutes / 30 × 0.5
- reduction %        = daily / (before × 2) × 100
- cost (USD/month)   = monthly hours × 25 + monthly minutes × 0.15
- productivity gain  = min(reduction % × 0.8, 30)

The constants live in :class:`~jobswap.config.CommuteConfig`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum

from jobswap.config import CommuteConfig
from jobswap.numeric import round_half_up


class StressLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CommuteImpact:
    """Derived commute metrics.

    Hours and CO₂ are rounded to one decimal; costs and productivity to
    whole numbers.
    """

    daily_savings_minutes: float
    monthly_hours_saved: float
    yearly_hours_saved: float
    co2_saved_kg: float
    reduction_percentage: float
    stress_reduction_level: StressLevel
    cost_savings_monthly: int
    cost_savings_yearly: int
    productivity_gain: int

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["stress_reduction_level"] = self.stress_reduction_level.value
        return data


def stress_level(reduction_percentage: float, config: CommuteConfig) -> StressLevel:
    if reduction_percentage >= config.high_stress_threshold:
        return StressLevel.HIGH
    if reduction_percentage >= config.medium_stress_threshold:
        return StressLevel.MEDIUM
    return StressLevel.LOW


def estimate_commute_impact(
    before_minutes: float,
    after_minutes: float,
    working_days_per_month: int | None = None,
    *,
    config: CommuteConfig | None = None,
) -> CommuteImpact:
    """Compute :class:`CommuteImpact` for a one-way commute change.

    ``working_days_per_month`` overrides ``config.working_days_per_month``
    (22 by default).  A zero ``before_minutes`` has no meaningful
    reduction percentage and is treated as 0 %.
    """
    cfg = config or CommuteConfig()
    working_days = (
        cfg.working_days_per_month if working_days_per_month is None else working_days_per_month
    )

    daily_minutes = (before_minutes - after_minutes) * 2
    monthly_minutes = daily_minutes * working_days
    monthly_hours = monthly_minutes / 60
    yearly_hours = monthly_hours * 12

    co2 = (monthly_minutes / cfg.co2_interval_minutes) * cfg.co2_kg_per_interval

    if before_minutes > 0:
        reduction = daily_minutes / (before_minutes * 2) * 100
    else:
        reduction = 0.0

    cost_monthly = monthly_hours * cfg.hourly_value + monthly_minutes * cfg.fuel_cost_per_minute
    productivity = min(reduction * cfg.productivity_factor, cfg.productivity_cap)

    return CommuteImpact(
        daily_savings_minutes=daily_minutes,
        monthly_hours_saved=round_half_up(monthly_hours, 1),
        yearly_hours_saved=round_half_up(yearly_hours, 1),
        co2_saved_kg=round_half_up(co2, 1),
        reduction_percentage=round_half_up(reduction, 1),
        stress_reduction_level=stress_level(reduction, cfg),
        cost_savings_monthly=int(round_half_up(cost_monthly)),
        cost_savings_yearly=int(round_half_up(cost_monthly * 12)),
        productivity_gain=int(round_half_up(productivity)),
    )


def _format_number(value: float) -> str:
    return f"{value:g}"


def describe_impact(impact: CommuteImpact) -> str:
    """One-line summary of the noteworthy parts of *impact*."""
    parts: list[str] = []
    if impact.monthly_hours_saved >= 10:
        parts.append(f"Save {_format_number(impact.monthly_hours_saved)} hours/month")
    if impact.co2_saved_kg >= 5:
        parts.append(f"Reduce {_format_number(impact.co2_saved_kg)}kg CO₂/month")
    if impact.stress_reduction_level is StressLevel.HIGH:
        parts.append("Significant stress reduction")
    return " • ".join(parts) or "Moderate commute improvement"
