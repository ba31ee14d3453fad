"""Vector math used by the compatibility pipeline."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from jobswap.errors import ActionableError
from jobswap.numeric import round_half_up

if TYPE_CHECKING:
    from collections.abc import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between *a* and *b*.

    Returns a value in [-1.0, 1.0].  When either vector has zero norm the
    cosine is undefined; ``0.0`` is returned instead so scoring never
    divides by zero.

    Raises :class:`~jobswap.errors.ActionableError` (VALIDATION) when the
    vectors differ in length — embeddings from different models must never
    be compared.
    """
    if len(a) != len(b):
        raise ActionableError.validation(
            field_name="vector",
            reason=f"Vectors must have the same length (got {len(a)} and {len(b)})",
            suggestion="Embed both texts with the same model before comparing them",
        )

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b, strict=True):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0.0:
        return 0.0
    return dot / denominator


def skill_overlap(a: Sequence[str], b: Sequence[str]) -> int:
    """Jaccard overlap of two skill lists as a 0–100 integer.

    An embedding-free similarity shown next to the model-based score.
    Skill names are compared exactly and duplicates count once.
    """
    union = set(a) | set(b)
    if not union:
        return 0
    shared = set(a) & set(b)
    return int(round_half_up(len(shared) / len(union) * 100))
