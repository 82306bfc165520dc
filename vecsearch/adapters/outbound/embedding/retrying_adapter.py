"""Retry wrapper for embedding providers.

Provider adapters make a single attempt per call. Deployments that want
resilience wrap them here: only transient failures (connection, timeout,
rate limit) are retried, with exponential back-off. Malformed responses
and API errors are returned to the caller on the first failure.
"""

import logging

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ....core.domain.exceptions import (
    ProviderConnectionError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (ProviderConnectionError, ProviderTimeoutError, ProviderRateLimitError)


class RetryingEmbeddingAdapter(EmbeddingPort):
    """Retries transient provider errors around another ``EmbeddingPort``."""

    def __init__(
        self,
        inner: EmbeddingPort,
        max_retries: int = 3,
        min_wait: float = 1.0,
        max_wait: float = 30.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self.inner = inner
        self.max_retries = max_retries
        self.min_wait = min_wait
        self.max_wait = max_wait

    @property
    def dimension(self) -> int:
        return self.inner.dimension

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.min_wait, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                "Embedding retry %d after error: %s",
                retry_state.attempt_number,
                retry_state.outcome.exception() if retry_state.outcome else "unknown",
            ),
        )

    def embed(self, text: str) -> list[float]:
        return self._retrying()(self.inner.embed, text)
