"""Domain models for vecsearch.

- document: Document, Chunk, SimilarityResult and IngestReport
- requests: validated request/response models for the search operations
- exceptions: the structured error hierarchy

Models are re-exported here for convenient importing:

    from vecsearch.core.domain import Chunk, SimilarityResult
"""

from .document import Chunk, ChunkFailure, Document, IngestReport, SimilarityResult
from .requests import (
    DEFAULT_LIMIT,
    IngestRequest,
    SearchHit,
    SearchRequest,
    SearchResponse,
    parse_request,
)

__all__ = [
    # Document models
    "Document",
    "Chunk",
    "SimilarityResult",
    "ChunkFailure",
    "IngestReport",
    # Requests
    "DEFAULT_LIMIT",
    "SearchRequest",
    "IngestRequest",
    "SearchHit",
    "SearchResponse",
    "parse_request",
]
