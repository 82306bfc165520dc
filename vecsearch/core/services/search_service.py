"""Ingest and similarity-search orchestration.

``SimilaritySearchService`` is stateless between calls: everything it
knows lives in the vector store. Ingest embeds and stores chunks one at a
time in document order and keeps going past per-chunk failures; search
embeds the prompt once and returns the store's ranking unchanged.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ..domain import Chunk, ChunkFailure, Document, IngestReport, SimilarityResult
from ..domain.exceptions import ProviderError, StoreError, VecSearchError
from ..domain.requests import DEFAULT_LIMIT
from ..domain.utils import require_query, validate_limit
from ..ports import DocumentSourcePort, EmbeddingPort, VectorStorePort
from .chunker import MarkdownChunker

logger = logging.getLogger(__name__)

# Called after each chunk with (chunk, stored id or None on failure)
ProgressCallback = Callable[[Chunk, int | None], None]


class SimilaritySearchService:
    """Chunk → embed → store, and query → embed → rank."""

    def __init__(
        self,
        embedder: EmbeddingPort,
        store: VectorStorePort,
        chunker: MarkdownChunker | None = None,
        document_source: DocumentSourcePort | None = None,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.chunker = chunker or MarkdownChunker()
        self.document_source = document_source

    # ------------------------------------------------------------------
    # Ingest
    # ------------------------------------------------------------------

    def ingest(
        self,
        document: Document,
        *,
        batch: bool = False,
        on_chunk: ProgressCallback | None = None,
    ) -> IngestReport:
        """Chunk, embed and store a document.

        Args:
            document: The document to ingest.
            batch: Write all successfully embedded chunks with a single
                ``insert_many`` instead of one insert per chunk.
            on_chunk: Optional progress hook.

        Returns:
            IngestReport listing stored ids and skipped chunks.
        """
        chunks = self.chunker.chunk_document(document)
        report = IngestReport(source=document.source, total_chunks=len(chunks))
        logger.info("Found %d sections to process in %s", len(chunks), document.source)

        if batch:
            self._ingest_batched(chunks, report, on_chunk)
        else:
            for chunk in chunks:
                chunk_id = self._ingest_one(chunk, report)
                if on_chunk:
                    on_chunk(chunk, chunk_id)

        logger.info(
            "Ingest of %s finished: %d stored, %d failed",
            document.source,
            report.stored_count,
            report.failed_count,
        )
        return report

    def ingest_path(
        self,
        path: str | Path,
        *,
        batch: bool = False,
        on_chunk: ProgressCallback | None = None,
    ) -> IngestReport:
        """Read a document from the configured source and ingest it."""
        if self.document_source is None:
            raise RuntimeError("No document source configured for this service")
        document = self.document_source.read(path)
        return self.ingest(document, batch=batch, on_chunk=on_chunk)

    def _ingest_one(self, chunk: Chunk, report: IngestReport) -> int | None:
        try:
            vector = self.embedder.embed(chunk.text)
            chunk_id = self.store.insert(chunk.text, vector)
        except (ProviderError, StoreError) as e:
            self._record_failure(chunk, e, report)
            return None

        report.stored_ids.append(chunk_id)
        logger.debug("Stored section %d as id %s", chunk.position + 1, chunk_id)
        return chunk_id

    def _ingest_batched(
        self,
        chunks: list[Chunk],
        report: IngestReport,
        on_chunk: ProgressCallback | None,
    ) -> None:
        embedded: list[tuple[Chunk, list[float]]] = []
        for chunk in chunks:
            try:
                embedded.append((chunk, self.embedder.embed(chunk.text)))
            except ProviderError as e:
                self._record_failure(chunk, e, report)
                if on_chunk:
                    on_chunk(chunk, None)

        if not embedded:
            return

        try:
            ids = self.store.insert_many([(chunk.text, vector) for chunk, vector in embedded])
        except StoreError as e:
            # The batch is all-or-nothing, so nothing from it was written
            logger.warning(
                "Batched insert of %d sections failed [%s]: %s; inserting one at a time",
                len(embedded),
                e.error_code,
                e.message,
            )
            for chunk, vector in embedded:
                try:
                    chunk_id = self.store.insert(chunk.text, vector)
                except StoreError as row_error:
                    self._record_failure(chunk, row_error, report)
                    chunk_id = None
                else:
                    report.stored_ids.append(chunk_id)
                if on_chunk:
                    on_chunk(chunk, chunk_id)
            return

        report.stored_ids.extend(ids)
        if on_chunk:
            for (chunk, _), chunk_id in zip(embedded, ids, strict=True):
                on_chunk(chunk, chunk_id)

    @staticmethod
    def _record_failure(chunk: Chunk, error: VecSearchError, report: IngestReport) -> None:
        logger.warning(
            "Skipping section %d of %s [%s]: %s",
            chunk.position + 1,
            chunk.source,
            error.error_code,
            error.message,
            extra={"error_code": error.error_code},
        )
        report.failures.append(
            ChunkFailure(
                position=chunk.position, error_code=error.error_code, message=error.message
            )
        )

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[SimilarityResult]:
        """Rank stored chunks against a free-text prompt.

        Arguments are validated before the provider is called. Provider and
        store errors propagate to the caller unchanged.

        Raises:
            EmptyQueryError: ``query`` is blank.
            InvalidLimitError: ``limit`` is not a positive integer.
        """
        prompt = require_query(query)
        limit = validate_limit(limit)

        logger.info("Searching for: %r (limit=%d)", prompt, limit)
        vector = self.embedder.embed(prompt)
        results = self.store.nearest(vector, limit)
        logger.debug("Search returned %d results", len(results))
        return results
