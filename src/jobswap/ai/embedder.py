"""Text-to-vector embedding with a deterministic local fallback.

:class:`EmbeddingProvider` asks the configured remote model for a vector
and, when there is no remote client or the call fails, substitutes a
**hash-based pseudo-embedding**:

1. A polynomial rolling hash over the UTF-16 code units of the text
   (``h = int32(h << 5) - h + code``).
2. Component *i* of a 384-dimensional vector is
   ``sin(h + i * 1000) * 0.5 + 0.5``.
3. The vector is L2-normalised.

The fallback is stable (same text → same vector, bit for bit, matching the
vectors behind the published demo scores) but it is *not* semantic: two
texts with similar meaning are not guaranteed to land close together.

Every :class:`Embedding` carries its :class:`Provenance` so callers can
tell a model-backed result from a degraded one without reading logs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from jobswap.errors import ActionableError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jobswap.ai.remote import RemoteModelClient

logger = logging.getLogger(__name__)

FALLBACK_DIMENSIONS = 384
FALLBACK_MODEL = "hash-sine-384"

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


class Provenance(StrEnum):
    """Where a computed value came from."""

    REMOTE = "remote"
    FALLBACK = "fallback"

    @classmethod
    def combine(cls, parts: Iterable[Provenance]) -> Provenance:
        """``REMOTE`` only when every contributing part was remote."""
        return cls.REMOTE if all(p is cls.REMOTE for p in parts) else cls.FALLBACK


@dataclass(frozen=True)
class Embedding:
    """A vector plus the model (or fallback) that produced it."""

    vector: list[float]
    provenance: Provenance
    model: str

    @property
    def degraded(self) -> bool:
        return self.provenance is Provenance.FALLBACK


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - (1 << 32) if value & _INT32_SIGN else value


def text_hash(text: str) -> int:
    """Rolling hash of *text* over UTF-16 code units.

    Only the shift wraps to 32 bits.  The running value itself is never
    wrapped and leaves the int32 range on long inputs; the demo vectors
    depend on that.
    """
    data = text.encode("utf-16-le")
    acc = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        acc = _to_int32(_to_int32(acc) << 5) - acc + code
    return acc


def fallback_embedding(text: str, dimensions: int = FALLBACK_DIMENSIONS) -> list[float]:
    """Deterministic, L2-normalised pseudo-embedding for *text*."""
    seed = text_hash(text)
    vector = [math.sin(seed + i * 1000) * 0.5 + 0.5 for i in range(dimensions)]
    magnitude = math.sqrt(sum(v * v for v in vector))
    if magnitude == 0.0:
        return vector
    return [v / magnitude for v in vector]


def profile_text(skills: Iterable[str], job_title: str) -> str:
    """The text embedded for a whole profile: ``"<title>. Skills: a, b"``."""
    return f"{job_title}. Skills: {', '.join(skills)}"


class EmbeddingProvider:
    """Produces embeddings, remote when possible, local otherwise.

    Parameters
    ----------
    client:
        A remote model client, or ``None`` to always use the fallback.
    dimensions:
        Length of fallback vectors.  Remote vectors keep whatever length
        the model returns.
    """

    def __init__(
        self,
        client: RemoteModelClient | None = None,
        *,
        dimensions: int = FALLBACK_DIMENSIONS,
    ) -> None:
        self._client = client
        self.dimensions = dimensions

    @property
    def remote_enabled(self) -> bool:
        return self._client is not None

    async def embed(self, text: str) -> Embedding:
        """Return an :class:`Embedding` for *text*.

        Never raises because of the remote service: failures are logged
        and answered with the fallback vector.
        """
        if self._client is None:
            return self._fallback(text)

        try:
            vector = await self._client.embed(text)
        except ActionableError as exc:
            logger.warning(
                "Remote embedding via %s failed (%s) — falling back to local embedding",
                self._client.service,
                exc.error,
            )
            return self._fallback(text)

        return Embedding(
            vector=vector,
            provenance=Provenance.REMOTE,
            model=self._client.embed_model,
        )

    async def embed_pair(self, first: str, second: str) -> tuple[Embedding, Embedding]:
        """Embed two texts so that the results can be compared.

        When only one of the two remote calls failed, the vectors come from
        different models and differ in length; both are then recomputed
        with the fallback so similarity stays defined.
        """
        a = await self.embed(first)
        b = await self.embed(second)
        if len(a.vector) != len(b.vector):
            logger.warning(
                "Mixed remote/fallback embeddings (%d vs %d dims) — using fallback for both",
                len(a.vector),
                len(b.vector),
            )
            return self._fallback(first), self._fallback(second)
        return a, b

    async def embed_profile(self, skills: Iterable[str], job_title: str) -> Embedding:
        """Embed a profile (job title plus skills) as a single text."""
        return await self.embed(profile_text(skills, job_title))

    def _fallback(self, text: str) -> Embedding:
        logger.debug("Using fallback embedding for %d chars", len(text))
        return Embedding(
            vector=fallback_embedding(text, self.dimensions),
            provenance=Provenance.FALLBACK,
            model=FALLBACK_MODEL,
        )
