"""Shared numeric helpers.

Pure functions with no domain dependencies — safe to import from any
layer.
"""

from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round *value* with halves going toward positive infinity.

    The published scoring figures were produced with this rule
    (``floor(x + 0.5)``).  Python's :func:`round` rounds halves to even,
    which would turn e.g. a 22.5 % productivity gain into 22 instead of 23.

    >>> round_half_up(22.5)
    23.0
    >>> round_half_up(36.666, 1)
    36.7
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float, high: float) -> float:
    """Restrict *value* to the closed interval ``[low, high]``."""
    return max(low, min(high, value))
