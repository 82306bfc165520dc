"""Vector Store Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..domain import SimilarityResult


class VectorStorePort(ABC):
    """Abstract interface for stores of (chunk text, embedding) rows.

    A store is a scoped resource: ``open`` acquires it, ``close`` releases
    it, and ``with store:`` does both. ``ensure_ready`` must have succeeded
    at least once against the backing database before inserts or queries.
    """

    dimension: int

    def open(self) -> None:
        """Acquire the underlying connection resources."""

    def close(self) -> None:
        """Release the underlying connection resources."""

    def __enter__(self) -> "VectorStorePort":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abstractmethod
    def ensure_ready(self) -> None:
        """Enable the vector capability and create the chunk table. Idempotent."""
        ...

    @abstractmethod
    def insert(self, chunk_text: str, embedding: Sequence[float]) -> int:
        """Persist one pair and return its generated id."""
        ...

    @abstractmethod
    def insert_many(self, rows: Sequence[tuple[str, Sequence[float]]]) -> list[int]:
        """Persist all pairs in one transaction; ids come back in input order."""
        ...

    @abstractmethod
    def nearest(self, query_vector: Sequence[float], limit: int) -> list[SimilarityResult]:
        """Return at most ``limit`` stored chunks by ascending cosine distance."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of stored chunks."""
        ...

    @abstractmethod
    def clear(self) -> int:
        """Delete every stored chunk and return how many were removed."""
        ...

    def stats(self) -> dict[str, Any]:
        """Summary used by status displays."""
        return {"count": self.count(), "dimension": self.dimension}
