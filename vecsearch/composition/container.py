"""Composition root wiring adapters to the search service.

The vector store is the one resource with a lifecycle. ``open_search_service``
opens it, makes sure the extension and table exist, hands out a wired
service and closes the store again whether the caller succeeds or fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from ..adapters.outbound.document_source import FileDocumentSource
from ..adapters.outbound.embedding import (
    GeminiEmbeddingAdapter,
    OpenAIEmbeddingAdapter,
    RetryingEmbeddingAdapter,
)
from ..adapters.outbound.vector_store import InMemoryVectorStore, PgVectorStore
from ..common.rate_limiter import RateLimiter
from ..config.settings import Settings, settings as default_settings
from ..core.domain.exceptions import InvalidConfigurationError, MissingAPIKeyError
from ..core.ports import EmbeddingPort, VectorStorePort
from ..core.services import MarkdownChunker, SimilaritySearchService

logger = logging.getLogger(__name__)


def build_embedder(config: Settings | None = None) -> EmbeddingPort:
    """Create the configured embedding provider."""
    config = config or default_settings
    if config.embedding_dimension <= 0:
        raise InvalidConfigurationError(
            "EMBEDDING_DIMENSION must be positive",
            context={"embedding_dimension": config.embedding_dimension},
        )

    rate_limiter = RateLimiter(config.embedding_requests_per_minute)
    if rate_limiter.enabled:
        logger.info("Limiting embedding calls to %d per minute", rate_limiter.capacity)
    embedder: EmbeddingPort
    if config.embedding_provider == "openai":
        if not config.openai_api_key:
            raise MissingAPIKeyError(
                "OpenAI API key not set (set OPENAI_API_KEY in .env)",
                context={"provider": "openai"},
            )
        embedder = OpenAIEmbeddingAdapter(
            api_key=config.openai_api_key,
            model=config.embedding_model,
            dimension=config.embedding_dimension,
            timeout=config.embedding_timeout_seconds,
            rate_limiter=rate_limiter,
        )
    else:
        if not config.google_api_key:
            raise MissingAPIKeyError(
                "Google API key not set (set GOOGLE_API_KEY in .env)",
                context={"provider": "gemini"},
            )
        embedder = GeminiEmbeddingAdapter(
            api_key=config.google_api_key,
            model=config.embedding_model,
            dimension=config.embedding_dimension,
            timeout=config.embedding_timeout_seconds,
            rate_limiter=rate_limiter,
        )

    if config.embedding_max_retries > 0:
        logger.info(
            "Retrying transient embedding errors up to %d times", config.embedding_max_retries
        )
        embedder = RetryingEmbeddingAdapter(embedder, max_retries=config.embedding_max_retries)
    return embedder


def build_vector_store(config: Settings | None = None) -> VectorStorePort:
    """Create the configured vector store (not yet opened)."""
    config = config or default_settings
    if config.vector_backend == "memory":
        return InMemoryVectorStore(dimension=config.embedding_dimension)

    if not config.database_url:
        raise InvalidConfigurationError(
            "DATABASE_URL must be set for the pgvector backend",
            context={"vector_backend": config.vector_backend},
        )
    return PgVectorStore(
        database_url=config.database_url,
        table_name=config.vector_table,
        dimension=config.embedding_dimension,
    )


def build_search_service(
    store: VectorStorePort,
    config: Settings | None = None,
    embedder: EmbeddingPort | None = None,
) -> SimilaritySearchService:
    """Wire a service around an already-built store."""
    config = config or default_settings
    return SimilaritySearchService(
        embedder=embedder or build_embedder(config),
        store=store,
        chunker=MarkdownChunker(config.heading_marker),
        document_source=FileDocumentSource(),
    )


@contextmanager
def open_vector_store(config: Settings | None = None) -> Iterator[VectorStorePort]:
    """Open the configured store, ensure it is ready, and always close it."""
    store = build_vector_store(config)
    store.open()
    try:
        store.ensure_ready()
        yield store
    finally:
        store.close()


@contextmanager
def open_search_service(
    config: Settings | None = None,
    embedder: EmbeddingPort | None = None,
) -> Iterator[SimilaritySearchService]:
    """Scoped search service for one run.

    The embedder is built before the store is opened, so configuration
    errors surface without touching the database.
    """
    config = config or default_settings
    embedder = embedder or build_embedder(config)
    with open_vector_store(config) as store:
        yield build_search_service(store, config, embedder=embedder)
