"""Document, chunk and search result models for the vector search pipeline."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Document:
    """A source document read once per ingest run.

    Attributes:
        content: Full raw text of the document (typically markdown).
        source: Reference to where the text came from (e.g. a file path).
    """

    content: str
    source: str = "<memory>"


@dataclass(frozen=True)
class Chunk:
    """A contiguous section of a document, rendered to plain text.

    Attributes:
        text: Plain text handed to the embedding model.
        source: Source reference of the parent document.
        position: 0-based ordinal among the chunks emitted for the document.
        raw: The markdown span the text was rendered from.
    """

    text: str
    source: str
    position: int
    raw: str = ""


@dataclass(frozen=True)
class SimilarityResult:
    """A stored chunk ranked against a query vector.

    Attributes:
        text: Stored chunk text.
        similarity: 1 - cosine distance (1.0 means same direction).
        chunk_id: Identifier generated by the store on insert.
    """

    text: str
    similarity: float
    chunk_id: int | None = None


@dataclass(frozen=True)
class ChunkFailure:
    """A chunk that could not be embedded or stored during ingest."""

    position: int
    error_code: str
    message: str


@dataclass
class IngestReport:
    """Outcome of ingesting one document.

    Ingest tolerates per-chunk failures, so a report can describe a partial
    success: ``stored_ids`` holds the ids of the chunks that made it into
    the store and ``failures`` the ones that were skipped.
    """

    source: str
    total_chunks: int = 0
    stored_ids: list[int] = field(default_factory=list)
    failures: list[ChunkFailure] = field(default_factory=list)

    @property
    def stored_count(self) -> int:
        return len(self.stored_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def succeeded(self) -> bool:
        """True when every chunk was stored."""
        return not self.failures
