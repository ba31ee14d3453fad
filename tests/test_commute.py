"""Commute impact tests — the published figures and edge cases."""

from __future__ import annotations

import pytest

from jobswap.ai.commute import (
    CommuteImpact,
    StressLevel,
    describe_impact,
    estimate_commute_impact,
)
from jobswap.config import CommuteConfig


class TestPublishedFigures:
    """REQUIREMENT: Commute impact reproduces the published figures.

    WHO: Employees comparing swap offers; HR reviewers
    WHAT: 75 → 25 min over 22 days saves 100 min/day, 36.7 h/month,
          440 h/year, 36.7 kg CO₂, 66.7 % reduction (high stress relief),
          $1247/month, $14960/year and a capped 30 % productivity gain
    WHY: These numbers appear in the product; any formula drift would be
         visible to users
    """

    def test_large_reduction(self) -> None:
        impact = estimate_commute_impact(75, 25, 22)
        assert impact.daily_savings_minutes == 100
        assert impact.monthly_hours_saved == pytest.approx(36.7)
        assert impact.yearly_hours_saved == pytest.approx(440.0)
        assert impact.co2_saved_kg == pytest.approx(36.7)
        assert impact.reduction_percentage == pytest.approx(66.7)
        assert impact.stress_reduction_level is StressLevel.HIGH
        assert impact.cost_savings_monthly == 1247
        assert impact.cost_savings_yearly == 14960
        assert impact.productivity_gain == 30

    def test_small_reduction(self) -> None:
        """50 → 45 min: 10 min/day, 3.7 h/month, low stress relief, 8 % gain."""
        impact = estimate_commute_impact(50, 45)
        assert impact.daily_savings_minutes == 10
        assert impact.monthly_hours_saved == pytest.approx(3.7)
        assert impact.reduction_percentage == pytest.approx(10.0)
        assert impact.stress_reduction_level is StressLevel.LOW
        assert impact.cost_savings_monthly == 125
        assert impact.productivity_gain == 8

    def test_default_working_days_is_22(self) -> None:
        assert estimate_commute_impact(75, 25) == estimate_commute_impact(75, 25, 22)


class TestStressLevels:
    """REQUIREMENT: Stress relief is banded by reduction percentage.

    WHO: The commute summary and HR benefits
    WHAT: ≥ 50 % high, ≥ 25 % medium, otherwise low
    WHY: Band edges decide which message users see
    """

    @pytest.mark.parametrize(
        ("before", "after", "expected"),
        [
            (60, 30, StressLevel.HIGH),  # exactly 50 %
            (60, 45, StressLevel.MEDIUM),  # exactly 25 %
            (60, 50, StressLevel.LOW),
        ],
    )
    def test_band_edges(self, before: float, after: float, expected: StressLevel) -> None:
        assert estimate_commute_impact(before, after).stress_reduction_level is expected


class TestEdgeCases:
    """REQUIREMENT: Degenerate commutes never raise.

    WHO: Callers passing raw user input
    WHAT: A zero "before" commute gives 0 % reduction; a longer new commute
          gives negative savings rather than an error
    WHY: Division by zero in a dashboard request would be a crash
    """

    def test_zero_before_commute(self) -> None:
        impact = estimate_commute_impact(0, 0)
        assert impact.reduction_percentage == 0
        assert impact.productivity_gain == 0
        assert impact.stress_reduction_level is StressLevel.LOW

    def test_longer_commute_is_negative(self) -> None:
        impact = estimate_commute_impact(30, 40)
        assert impact.daily_savings_minutes == -20
        assert impact.monthly_hours_saved < 0
        assert impact.stress_reduction_level is StressLevel.LOW

    def test_custom_constants(self) -> None:
        """Constants come from CommuteConfig, not from literals."""
        config = CommuteConfig(working_days_per_month=20, hourly_value=60.0)
        impact = estimate_commute_impact(45, 15, config=config)
        # 60 min/day * 20 days = 1200 min = 20 h → 20*60 + 1200*0.15
        assert impact.monthly_hours_saved == pytest.approx(20.0)
        assert impact.cost_savings_monthly == 1380

    def test_to_dict_serialises_stress_level(self) -> None:
        data = estimate_commute_impact(75, 25).to_dict()
        assert data["stress_reduction_level"] == "high"
        assert data["cost_savings_monthly"] == 1247


class TestDescribeImpact:
    """REQUIREMENT: The one-line summary lists only noteworthy effects."""

    def test_large_reduction_summary(self) -> None:
        text = describe_impact(estimate_commute_impact(75, 25))
        assert text == (
            "Save 36.7 hours/month • Reduce 36.7kg CO₂/month • Significant stress reduction"
        )

    def test_small_reduction_summary(self) -> None:
        assert describe_impact(estimate_commute_impact(50, 45)) == "Moderate commute improvement"

    def test_whole_numbers_print_without_decimals(self) -> None:
        impact = CommuteImpact(
            daily_savings_minutes=60,
            monthly_hours_saved=22.0,
            yearly_hours_saved=264.0,
            co2_saved_kg=2.0,
            reduction_percentage=40.0,
            stress_reduction_level=StressLevel.MEDIUM,
            cost_savings_monthly=748,
            cost_savings_yearly=8976,
            productivity_gain=30,
        )
        assert describe_impact(impact) == "Save 22 hours/month"
