"""Google Gemini embedding adapter (google-genai SDK).

Documents and queries are both embedded with the ``SEMANTIC_SIMILARITY``
task type so a chunk queried with its own text comes back as an exact
match.
"""

import logging
from typing import Any

import httpx

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

DEFAULT_MODEL = "gemini-embedding-001"
DEFAULT_DIMENSION = 1536
TASK_TYPE = "SEMANTIC_SIMILARITY"


class GeminiEmbeddingAdapter(EmbeddingPort):
    """Embeds text with the Gemini ``embed_content`` API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        dimension: int = DEFAULT_DIMENSION,
        timeout: float | None = 30.0,
        rate_limiter: RateLimiter | None = None,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._dimension = dimension
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(None)
        self._client = client

    @property
    def dimension(self) -> int:
        return self._dimension

    def _get_client(self) -> Any:
        """Get or create the genai client."""
        if self._client is None:
            from google import genai
            from google.genai import types

            http_options = None
            if self.timeout:
                # genai expects milliseconds
                http_options = types.HttpOptions(timeout=int(self.timeout * 1000))
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    def embed(self, text: str) -> list[float]:
        """Generate one embedding for ``text``."""
        text = require_query(text)
        client = self._get_client()
        self.rate_limiter.acquire()

        from google.genai import errors

        context = {"model": self.model, "chars": len(text)}
        try:
            result = client.models.embed_content(
                model=self.model,
                contents=[text],
                config={"task_type": TASK_TYPE, "output_dimensionality": self._dimension},
            )
        except errors.APIError as e:
            if e.code == 429:
                raise ProviderRateLimitError(
                    "Gemini rate limit exceeded", cause=e, context=context
                ) from e
            raise ProviderAPIError(
                f"Gemini embed_content returned HTTP {e.code}",
                cause=e,
                context={**context, "status_code": e.code},
            ) from e
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                "Embedding request timed out", cause=e, context=context
            ) from e
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                "Could not reach the Gemini API", cause=e, context=context
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError("Gemini embedding request failed", cause=e, context=context) from e

        embeddings = getattr(result, "embeddings", None)
        if not embeddings:
            raise ProviderResponseError("Embedding response contained no data", context=context)

        try:
            vector = validate_embedding(getattr(embeddings[0], "values", None), self._dimension)
        except ValueError as e:
            raise ProviderResponseError(
                f"Malformed embedding from {self.model}: {e}", cause=e, context=context
            ) from e

        logger.debug("Embedded %d chars with %s", len(text), self.model)
        return vector
