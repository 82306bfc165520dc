"""Unit tests for the in-memory vector store."""

import threading

import numpy as np
import pytest

from vecsearch.adapters.outbound.vector_store import InMemoryVectorStore
from vecsearch.adapters.outbound.vector_store.memory_adapter import cosine_distances
from vecsearch.core.domain.exceptions import (
    DimensionMismatchError,
    InvalidLimitError,
    StoreError,
    StoreNotReadyError,
    StoreQueryError,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def store():
    store = InMemoryVectorStore(dimension=3)
    store.ensure_ready()
    return store


class TestCosineDistances:
    def test_identical_orthogonal_and_opposite(self):
        matrix = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0]])
        distances = cosine_distances(matrix, np.array([2.0, 0.0, 0.0]))
        assert distances == pytest.approx([0.0, 1.0, 2.0])

    def test_zero_vector_has_similarity_zero(self):
        matrix = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        distances = cosine_distances(matrix, np.array([1.0, 0.0, 0.0]))
        assert distances == pytest.approx([1.0, 0.0])

    def test_zero_query(self):
        distances = cosine_distances(np.array([[1.0, 2.0, 3.0]]), np.zeros(3))
        assert distances == pytest.approx([1.0])


class TestInMemoryVectorStore:
    def test_insert_returns_increasing_ids(self, store):
        assert store.insert("a", [1.0, 0.0, 0.0]) == 1
        assert store.insert("b", [0.0, 1.0, 0.0]) == 2
        assert store.count() == 2

    def test_nearest_orders_by_similarity(self, store):
        store.insert("x axis", [1.0, 0.0, 0.0])
        store.insert("y axis", [0.0, 1.0, 0.0])
        store.insert("mostly x", [0.9, 0.1, 0.0])

        results = store.nearest([1.0, 0.0, 0.0], 2)

        assert [r.text for r in results] == ["x axis", "mostly x"]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[0].chunk_id == 1

    def test_equal_distances_return_in_insertion_order(self, store):
        for name in ("first", "second", "third"):
            store.insert(name, [0.0, 0.0, 1.0])
        assert [r.text for r in store.nearest([0.0, 0.0, 1.0], 3)] == [
            "first",
            "second",
            "third",
        ]

    def test_nearest_on_empty_store(self, store):
        assert store.nearest([1.0, 0.0, 0.0], 5) == []

    def test_limit_larger_than_store(self, store):
        store.insert("only", [1.0, 1.0, 1.0])
        assert len(store.nearest([1.0, 0.0, 0.0], 10)) == 1

    @pytest.mark.parametrize("limit", [0, -3])
    def test_invalid_limit(self, store, limit):
        with pytest.raises(InvalidLimitError):
            store.nearest([1.0, 0.0, 0.0], limit)

    def test_wrong_dimension_rejected(self, store):
        with pytest.raises(DimensionMismatchError) as exc_info:
            store.insert("bad", [1.0, 0.0])
        assert exc_info.value.extra_context == {"expected": 3, "actual": 2}
        assert store.count() == 0

    def test_wrong_dimension_query_rejected(self, store):
        with pytest.raises(DimensionMismatchError):
            store.nearest([1.0, 0.0, 0.0, 0.0], 1)

    def test_non_finite_vector_rejected(self, store):
        with pytest.raises(StoreQueryError):
            store.insert("nan", [float("nan"), 0.0, 0.0])

    def test_insert_many_is_all_or_nothing(self, store):
        with pytest.raises(DimensionMismatchError):
            store.insert_many([("ok", [1.0, 0.0, 0.0]), ("bad", [1.0])])
        assert store.count() == 0

    def test_insert_many_returns_ids_in_order(self, store):
        store.insert("existing", [1.0, 0.0, 0.0])
        ids = store.insert_many([("a", [0.0, 1.0, 0.0]), ("b", [0.0, 0.0, 1.0])])
        assert ids == [2, 3]

    def test_clear(self, store):
        store.insert("a", [1.0, 0.0, 0.0])
        store.insert("b", [0.0, 1.0, 0.0])
        assert store.clear() == 2
        assert store.count() == 0
        assert store.nearest([1.0, 0.0, 0.0], 3) == []

    def test_count_waits_for_writers(self, store):
        seen = []
        with store._lock:
            reader = threading.Thread(target=lambda: seen.append(store.count()))
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()
            store._ids.append(99)
        reader.join(timeout=1)
        assert seen == [1]

    def test_stats(self, store):
        store.insert("a", [1.0, 0.0, 0.0])
        assert store.stats() == {"backend": "memory", "name": "memory", "count": 1, "dimension": 3}

    def test_context_manager(self):
        with InMemoryVectorStore(dimension=3) as store:
            store.ensure_ready()
            assert store.ready

    def test_dimension_must_be_positive(self):
        with pytest.raises(ValueError):
            InMemoryVectorStore(dimension=0)


class TestReadiness:
    """Writes and queries need ensure_ready() first."""

    @pytest.fixture
    def unready(self):
        return InMemoryVectorStore(dimension=3)

    def test_insert_before_ready(self, unready):
        with pytest.raises(StoreNotReadyError):
            unready.insert("x", [1.0, 0.0, 0.0])
        assert unready.count() == 0

    def test_insert_many_before_ready(self, unready):
        with pytest.raises(StoreNotReadyError):
            unready.insert_many([("x", [1.0, 0.0, 0.0])])

    def test_nearest_before_ready_is_a_store_error(self, unready):
        with pytest.raises(StoreError) as exc_info:
            unready.nearest([1.0, 0.0, 0.0], 1)
        assert exc_info.value.error_code == "VS_VEC_005"

    def test_usable_after_ensure_ready(self, unready):
        unready.ensure_ready()
        unready.insert("x", [1.0, 0.0, 0.0])
        assert [r.text for r in unready.nearest([1.0, 0.0, 0.0], 1)] == ["x"]
