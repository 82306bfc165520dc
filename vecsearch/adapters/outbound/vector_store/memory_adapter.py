"""In-process vector store using numpy cosine ranking.

Follows the same contract as the pgvector store (dimension checks, limit
validation, ties broken by insertion order) without a database. Used for
tests, dry runs and the ``memory`` backend setting.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Any

import numpy as np

from ....core.domain import SimilarityResult
from ....core.domain.exceptions import (
    DimensionMismatchError,
    StoreNotReadyError,
    StoreQueryError,
)
from ....core.domain.utils import validate_embedding, validate_limit
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Cosine distance between each row of ``matrix`` and ``query``.

    A zero vector has no direction; its distance to anything is 1.0
    (similarity 0).
    """
    row_norms = np.linalg.norm(matrix, axis=1)
    query_norm = np.linalg.norm(query)
    denom = row_norms * query_norm
    dots = matrix @ query
    with np.errstate(divide="ignore", invalid="ignore"):
        similarity = np.where(denom > 0, dots / denom, 0.0)
    return 1.0 - np.clip(similarity, -1.0, 1.0)


class InMemoryVectorStore(VectorStorePort):
    """Stores rows in lists; ``nearest`` is a brute-force numpy scan."""

    def __init__(self, dimension: int = 1536) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension
        self._ids: list[int] = []
        self._texts: list[str] = []
        self._vectors: list[np.ndarray] = []
        self._next_id = 1
        self._lock = threading.Lock()
        self.ready = False

    def ensure_ready(self) -> None:
        self.ready = True

    def _require_ready(self, operation: str) -> None:
        if not self.ready:
            raise StoreNotReadyError(
                f"In-memory store used before ensure_ready(): {operation}",
                context={"operation": operation},
            )

    def _check_vector(self, vector: Sequence[float]) -> np.ndarray:
        try:
            length = len(vector)
        except TypeError:
            length = None
        if length is not None and length != self.dimension:
            raise DimensionMismatchError(
                f"Vector has {length} dimensions, store expects {self.dimension}",
                context={"expected": self.dimension, "actual": length},
            )
        try:
            return np.asarray(validate_embedding(vector, self.dimension), dtype=np.float64)
        except ValueError as e:
            raise StoreQueryError(f"Malformed vector: {e}", cause=e) from e

    def insert(self, chunk_text: str, embedding: Sequence[float]) -> int:
        self._require_ready("insert")
        vector = self._check_vector(embedding)
        with self._lock:
            chunk_id = self._next_id
            self._next_id += 1
            self._ids.append(chunk_id)
            self._texts.append(chunk_text)
            self._vectors.append(vector)
        return chunk_id

    def insert_many(self, rows: Sequence[tuple[str, Sequence[float]]]) -> list[int]:
        self._require_ready("insert_many")
        # Validate everything first so a bad row leaves the store untouched
        checked = [(chunk_text, self._check_vector(embedding)) for chunk_text, embedding in rows]
        ids: list[int] = []
        with self._lock:
            for chunk_text, vector in checked:
                ids.append(self._next_id)
                self._ids.append(self._next_id)
                self._texts.append(chunk_text)
                self._vectors.append(vector)
                self._next_id += 1
        return ids

    def nearest(self, query_vector: Sequence[float], limit: int) -> list[SimilarityResult]:
        self._require_ready("nearest")
        limit = validate_limit(limit)
        query = self._check_vector(query_vector)

        with self._lock:
            if not self._vectors:
                return []
            matrix = np.vstack(self._vectors)
            ids = list(self._ids)
            texts = list(self._texts)

        distances = cosine_distances(matrix, query)
        # Stable sort keeps insertion order among equal distances
        order = np.argsort(distances, kind="stable")[:limit]
        return [
            SimilarityResult(
                text=texts[i], similarity=float(1.0 - distances[i]), chunk_id=ids[i]
            )
            for i in order
        ]

    def count(self) -> int:
        with self._lock:
            return len(self._ids)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._ids)
            self._ids.clear()
            self._texts.clear()
            self._vectors.clear()
        logger.info("Removed %d chunks from in-memory store", removed)
        return removed

    def stats(self) -> dict[str, Any]:
        return {
            "backend": "memory",
            "name": "memory",
            "count": self.count(),
            "dimension": self.dimension,
        }
