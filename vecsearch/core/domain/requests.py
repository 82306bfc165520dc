"""Validated request and response models for the search operations.

The CLI (and any other inbound adapter) builds these from untrusted input
with ``parse_request``; anything that does not match the expected shape is
rejected as ``InvalidArgumentError`` before reaching the service.
"""

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .document import SimilarityResult
from .exceptions import InvalidArgumentError

DEFAULT_LIMIT = 3

RequestT = TypeVar("RequestT", bound=BaseModel)


class SearchRequest(BaseModel):
    """Request model for a similarity search."""

    model_config = ConfigDict(extra="forbid", strict=True)

    query: str = Field(..., min_length=1, description="Free-text prompt to search for")
    limit: int = Field(DEFAULT_LIMIT, gt=0, description="Maximum number of results")

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        """Reject whitespace-only prompts."""
        if not value.strip():
            raise ValueError("query cannot be whitespace only")
        return value.strip()


class IngestRequest(BaseModel):
    """Request model for ingesting a document from disk."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Field(..., description="Path to a markdown document")
    batch: bool = Field(False, description="Write all chunks with one batched insert")


class SearchHit(BaseModel):
    """One ranked match in a search response."""

    rank: int = Field(..., ge=1)
    chunk_id: int | None = None
    similarity: float
    text: str

    @classmethod
    def from_result(cls, rank: int, result: SimilarityResult) -> "SearchHit":
        return cls(
            rank=rank,
            chunk_id=result.chunk_id,
            similarity=result.similarity,
            text=result.text,
        )


class SearchResponse(BaseModel):
    """Response model for a similarity search."""

    query: str
    limit: int
    hits: list[SearchHit] = Field(default_factory=list)

    @classmethod
    def from_results(
        cls, request: SearchRequest, results: list[SimilarityResult]
    ) -> "SearchResponse":
        return cls(
            query=request.query,
            limit=request.limit,
            hits=[SearchHit.from_result(i, r) for i, r in enumerate(results, start=1)],
        )


def parse_request(model: type[RequestT], data: dict[str, Any]) -> RequestT:
    """Validate ``data`` against ``model``.

    Raises:
        InvalidArgumentError: If the payload does not match the model.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise InvalidArgumentError(
            f"Invalid {model.__name__}: {e.errors()[0]['msg']}",
            cause=e,
            context={"fields": fields},
        ) from e
