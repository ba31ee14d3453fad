"""Numeric helper tests — half-up rounding and clamping."""

from __future__ import annotations

import pytest

from jobswap.numeric import clamp, round_half_up


class TestRoundHalfUp:
    """REQUIREMENT: Halves round toward positive infinity.

    WHO: Every score, percentage and currency figure
    WHAT: 22.5 → 23 (not 22 as banker's rounding gives); one-decimal
          rounding for hours and CO₂; negative halves round up toward zero
    WHY: Published figures were computed with this rule
    """

    @pytest.mark.parametrize(
        ("value", "ndigits", "expected"),
        [
            (22.5, 0, 23.0),
            (0.5, 0, 1.0),
            (2.5, 0, 3.0),
            (-2.5, 0, -2.0),
            (36.666, 1, 36.7),
            (3.666, 1, 3.7),
            (1246.67, 0, 1247.0),
        ],
    )
    def test_values(self, value: float, ndigits: int, expected: float) -> None:
        assert round_half_up(value, ndigits) == pytest.approx(expected)


class TestClamp:
    @pytest.mark.parametrize(
        ("value", "expected"), [(-0.2, 0.0), (0.4, 0.4), (1.7, 1.0)]
    )
    def test_clamp(self, value: float, expected: float) -> None:
        assert clamp(value, 0.0, 1.0) == expected
