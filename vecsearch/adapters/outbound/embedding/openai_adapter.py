"""OpenAI embedding adapter.

Defaults to ``text-embedding-ada-002`` (1536 dimensions). The SDK's own
retry loop is switched off: one ``embed`` call is one HTTP request.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openai import OpenAI

from ....common.rate_limiter import RateLimiter
from ....core.domain.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from ....core.domain.utils import require_query, validate_embedding
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-ada-002"
DEFAULT_DIMENSION = 1536


class OpenAIEmbeddingAdapter(EmbeddingPort):
    """Embeds text with the OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        dimension: int = DEFAULT_DIMENSION,
        timeout: float | None = 30.0,
        rate_limiter: RateLimiter | None = None,
        client: "OpenAI | None" = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: OpenAI API key.
            model: Embedding model name.
            dimension: Expected vector length; responses of any other length
                are rejected.
            timeout: Per-request timeout in seconds, ``None`` for the SDK default.
            rate_limiter: Optional client-side limiter.
            client: Pre-built client (tests, custom base URLs).
        """
        self.api_key = api_key
        self.model = model
        self._dimension = dimension
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(None)
        self._client = client

    @property
    def dimension(self) -> int:
        return self._dimension

    def _get_client(self) -> "OpenAI":
        """Get or create the OpenAI client."""
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def _request_kwargs(self, text: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self.model, "input": text}
        # Only the text-embedding-3 family accepts a target dimension
        if self.model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self._dimension
        return kwargs

    def embed(self, text: str) -> list[float]:
        """Generate one embedding for ``text``."""
        text = require_query(text)
        client = self._get_client()
        self.rate_limiter.acquire()

        import openai

        context = {"model": self.model, "chars": len(text)}
        try:
            response = client.embeddings.create(**self._request_kwargs(text))
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                "Embedding request timed out", cause=e, context=context
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderConnectionError(
                "Could not reach the OpenAI embeddings endpoint", cause=e, context=context
            ) from e
        except openai.RateLimitError as e:
            raise ProviderRateLimitError(
                "OpenAI rate limit exceeded", cause=e, context=context
            ) from e
        except openai.APIStatusError as e:
            raise ProviderAPIError(
                f"OpenAI embeddings returned HTTP {e.status_code}",
                cause=e,
                context={**context, "status_code": e.status_code},
            ) from e
        except openai.OpenAIError as e:
            raise ProviderError("OpenAI embedding request failed", cause=e, context=context) from e

        data = getattr(response, "data", None)
        if not data:
            raise ProviderResponseError("Embedding response contained no data", context=context)

        try:
            vector = validate_embedding(getattr(data[0], "embedding", None), self._dimension)
        except ValueError as e:
            raise ProviderResponseError(
                f"Malformed embedding from {self.model}: {e}", cause=e, context=context
            ) from e

        logger.debug("Embedded %d chars with %s", len(text), self.model)
        return vector
