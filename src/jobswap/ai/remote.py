"""Remote model clients with retry, deadline and error conversion.

Two backends implement the :class:`RemoteModelClient` protocol:

- :class:`OpenAIClient` — wraps ``openai.AsyncOpenAI`` (bearer API key):
  ``/v1/embeddings`` for vectors and ``/v1/chat/completions`` in JSON mode
  for structured extraction.
- :class:`OllamaClient` — wraps ``ollama.AsyncClient`` for a self-hosted
  model server.

Both share the same behaviour:

- **Deadline per attempt** — every call runs under ``asyncio.wait_for``
  with ``timeout_seconds`` so a hanging server cannot stall scoring.
- **Retry with backoff** — timeouts, connection errors and transient
  statuses (408, 429, 5xx) are retried up to ``max_retries`` times with
  exponential backoff.
- **Actionable errors** — anything that still fails is raised as
  :class:`~jobswap.errors.ActionableError`.  Callers (the embedder and the
  resume parser) catch it and switch to their local fallback.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from jobswap.config import AIConfig

import httpx
import ollama as ollama_sdk
import openai

from jobswap.errors import ActionableError

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Status codes that warrant a retry (server overloaded / temporary failure)
_RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}
_AUTH_STATUS_CODES = {401, 403}

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OPENAI_URL = "https://api.openai.com/v1"

# Extraction is meant to be repeatable, not creative.
_JSON_TEMPERATURE = 0.3


class RemoteModelClient(Protocol):
    """What the embedder and resume parser need from a model backend."""

    service: str
    embed_model: str
    llm_model: str

    async def embed(self, text: str) -> list[float]: ...

    async def complete_json(self, system: str, user: str) -> str: ...


class _RetryingClient:
    """Shared deadline + backoff loop for the concrete backends."""

    service: ClassVar[str] = "model-api"
    # Exceptions raised by the SDK that are worth classifying for retry
    _transport_errors: ClassVar[tuple[type[BaseException], ...]] = ()

    def __init__(
        self,
        *,
        url: str,
        embed_model: str,
        llm_model: str,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        self.url = url
        self.embed_model = embed_model
        self.llm_model = llm_model
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay = base_delay

    def _fatal_error(self, exc: BaseException, model: str) -> ActionableError | None:
        """Return an error to raise immediately, or ``None`` to retry *exc*."""
        return None

    def _malformed(self, operation: str, model: str, exc: Exception) -> ActionableError:
        return ActionableError.parse(
            source=f"{self.service} {operation} response",
            raw_error=f"{type(exc).__name__}: {exc}",
            suggestion=f"Check that '{model}' is served by {self.service} at {self.url}",
        )

    async def _with_retry(
        self,
        fn: Callable[[], Awaitable[_T]],
        *,
        operation: str,
        model: str,
    ) -> _T:
        """Call *fn* under a deadline, backing off on retryable failures.

        Non-retryable errors (bad credential, unknown model) fail
        immediately.  After ``max_retries`` attempts, raises an EMBEDDING
        error.  Any other SDK exception is classified by
        :meth:`ActionableError.from_exception` so callers only ever see
        :class:`ActionableError`.
        """
        last_error: BaseException | None = None

        for attempt in range(1, self.max_retries + 1):
            delay = self.base_delay * (2 ** (attempt - 1))
            try:
                return await asyncio.wait_for(fn(), timeout=self.timeout_seconds)
            except TimeoutError as exc:
                last_error = exc
                logger.warning(
                    "%s %s attempt %d/%d timed out after %.1fs, retrying in %.1fs",
                    self.service,
                    operation,
                    attempt,
                    self.max_retries,
                    self.timeout_seconds,
                    delay,
                )
            except self._transport_errors as exc:
                fatal = self._fatal_error(exc, model)
                if fatal is not None:
                    raise fatal from None
                last_error = exc
                logger.warning(
                    "%s %s attempt %d/%d failed, retrying in %.1fs: %s",
                    self.service,
                    operation,
                    attempt,
                    self.max_retries,
                    delay,
                    exc,
                )
            except ActionableError:
                raise
            except Exception as exc:
                raise ActionableError.from_exception(exc, self.service, operation) from None
            if attempt < self.max_retries:
                await asyncio.sleep(delay)

        if isinstance(last_error, TimeoutError):
            raise ActionableError.connection(
                service=self.service,
                url=self.url,
                raw_error=f"No response within {self.timeout_seconds}s "
                f"after {self.max_retries} attempts",
                suggestion="Raise [ai].timeout_seconds or check the service status",
            )
        raise ActionableError.embedding(
            model=model,
            raw_error=f"Failed after {self.max_retries} attempts: {last_error}",
            service=self.service,
            suggestion=f"{self.service} may be overloaded — retry later",
        )


class OpenAIClient(_RetryingClient):
    """OpenAI embeddings + JSON-mode chat completions.

    Usage::

        client = OpenAIClient(api_key, embed_model="text-embedding-3-small",
                              llm_model="gpt-4o-mini")
        vec = await client.embed("React, TypeScript")
        raw = await client.complete_json(system_prompt, resume_text)
    """

    service = "OpenAI"
    _transport_errors = (openai.APIError,)

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        embed_model: str = "text-embedding-3-small",
        llm_model: str = "gpt-4o-mini",
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        super().__init__(
            url=base_url or DEFAULT_OPENAI_URL,
            embed_model=embed_model,
            llm_model=llm_model,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            base_delay=base_delay,
        )
        # Retries and deadlines are handled here, not by the SDK
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            timeout=timeout_seconds,
        )

    def _fatal_error(self, exc: BaseException, model: str) -> ActionableError | None:
        if isinstance(exc, openai.APIResponseValidationError):
            return ActionableError.parse(
                source=f"{self.service} response",
                raw_error=str(exc),
                suggestion=f"Check that '{model}' is served by {self.service} at {self.url}",
            )
        if isinstance(exc, openai.APIStatusError):
            if exc.status_code in _AUTH_STATUS_CODES:
                return ActionableError.authentication(self.service, str(exc))
            if exc.status_code not in _RETRYABLE_STATUS_CODES:
                return ActionableError.embedding(
                    model=model, raw_error=str(exc), service=self.service
                )
        return None

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for *text* from ``/v1/embeddings``."""

        async def _call() -> Any:
            return await self._client.embeddings.create(model=self.embed_model, input=text)

        response = await self._with_retry(_call, operation="embed", model=self.embed_model)
        try:
            return [float(v) for v in response.data[0].embedding]
        except (IndexError, AttributeError, TypeError, ValueError) as exc:
            raise self._malformed("embed", self.embed_model, exc) from None

    async def complete_json(self, system: str, user: str) -> str:
        """Run a JSON-mode chat completion and return the raw message content."""

        async def _call() -> Any:
            return await self._client.chat.completions.create(
                model=self.llm_model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=_JSON_TEMPERATURE,
                response_format={"type": "json_object"},
            )

        response = await self._with_retry(_call, operation="complete", model=self.llm_model)
        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as exc:
            raise self._malformed("complete", self.llm_model, exc) from None
        if not content:
            raise self._malformed("complete", self.llm_model, ValueError("empty message content"))
        return str(content)


class OllamaClient(_RetryingClient):
    """Ollama embeddings + JSON-format chat for self-hosted models."""

    service = "Ollama"
    _transport_errors = (
        ollama_sdk.ResponseError,
        httpx.TransportError,
        ConnectionError,
        OSError,
    )

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_OLLAMA_URL,
        embed_model: str = "nomic-embed-text",
        llm_model: str = "mistral:7b",
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        super().__init__(
            url=base_url,
            embed_model=embed_model,
            llm_model=llm_model,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            base_delay=base_delay,
        )
        self._client = ollama_sdk.AsyncClient(host=base_url)

    def _fatal_error(self, exc: BaseException, model: str) -> ActionableError | None:
        if (
            isinstance(exc, ollama_sdk.ResponseError)
            and exc.status_code not in _RETRYABLE_STATUS_CODES
        ):
            return ActionableError.embedding(
                model=model,
                raw_error=str(exc),
                service=self.service,
                suggestion=f"Run: ollama pull {model}",
            )
        return None

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for *text* from ``/api/embed``."""

        async def _call() -> Any:
            return await self._client.embed(model=self.embed_model, input=text)

        response = await self._with_retry(_call, operation="embed", model=self.embed_model)
        try:
            return [float(v) for v in response.embeddings[0]]
        except (IndexError, AttributeError, TypeError, ValueError) as exc:
            raise self._malformed("embed", self.embed_model, exc) from None

    async def complete_json(self, system: str, user: str) -> str:
        """Run a JSON-format chat and return the raw message content."""

        async def _call() -> Any:
            return await self._client.chat(
                model=self.llm_model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                format="json",
                options={"temperature": _JSON_TEMPERATURE},
            )

        response = await self._with_retry(_call, operation="complete", model=self.llm_model)
        try:
            content = response.message.content
        except AttributeError as exc:
            raise self._malformed("complete", self.llm_model, exc) from None
        if not content:
            raise self._malformed("complete", self.llm_model, ValueError("empty message content"))
        return str(content)


def build_remote_client(ai: AIConfig) -> RemoteModelClient | None:
    """Build the configured backend, or ``None`` to use local scoring.

    A missing OpenAI credential is an expected condition, not an error:
    it is logged at INFO and the local fallback is used everywhere.
    """
    if ai.provider == "none":
        logger.info("Remote AI disabled ([ai].provider = none) — using local scoring")
        return None

    if ai.provider == "ollama":
        return OllamaClient(
            base_url=ai.base_url or DEFAULT_OLLAMA_URL,
            embed_model=ai.embed_model,
            llm_model=ai.llm_model,
            timeout_seconds=ai.timeout_seconds,
            max_retries=ai.max_retries,
            base_delay=ai.base_delay,
        )

    api_key = ai.api_key()
    if api_key is None:
        logger.info("%s is not set — using local fallback scoring", ai.api_key_env)
        return None

    return OpenAIClient(
        api_key,
        base_url=ai.base_url,
        embed_model=ai.embed_model,
        llm_model=ai.llm_model,
        timeout_seconds=ai.timeout_seconds,
        max_retries=ai.max_retries,
        base_delay=ai.base_delay,
    )
