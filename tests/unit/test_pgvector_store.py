"""Unit tests for PgVectorStore.

The SQLAlchemy engine is mocked so no database is needed; SQL generation
is checked by compiling statements against the PostgreSQL dialect.
"""

import re
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError, ProgrammingError

from vecsearch.adapters.outbound.vector_store import PgVectorStore
from vecsearch.core.domain.exceptions import (
    DimensionMismatchError,
    InvalidLimitError,
    StoreConnectionError,
    StoreQueryError,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def engine():
    """Engine mock whose begin()/connect() yield the same connection mock."""
    engine = MagicMock()
    conn = MagicMock()
    engine.begin.return_value.__enter__.return_value = conn
    engine.connect.return_value.__enter__.return_value = conn
    engine.conn = conn
    return engine


@pytest.fixture
def store(engine):
    return PgVectorStore(table_name="chunks", dimension=3, engine=engine)


def compile_sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestSchema:
    def test_table_columns(self, store):
        columns = store.table.c
        assert list(columns.keys()) == ["id", "chunk_text", "embedding"]
        assert columns.id.primary_key
        assert not columns.chunk_text.nullable
        assert columns.embedding.type.dim == 3

    def test_ensure_ready_creates_extension_then_table(self, store, engine):
        with patch.object(store.metadata, "create_all") as create_all:
            store.ensure_ready()

        sql = str(engine.conn.execute.call_args_list[0].args[0])
        assert sql == "CREATE EXTENSION IF NOT EXISTS vector"
        create_all.assert_called_once_with(engine.conn, checkfirst=True)


class TestNearestStatement:
    def test_orders_by_cosine_distance_then_id(self, store):
        sql = compile_sql(store.nearest_statement([1.0, 0.0, 0.0], 5))

        assert "<=>" in sql
        assert re.search(r"ORDER BY \(?chunks\.embedding <=>", sql)
        assert "LIMIT" in sql
        assert "chunks.id" in sql.split("ORDER BY", 1)[1]

    def test_selects_similarity_column(self, store):
        sql = compile_sql(store.nearest_statement([1.0, 0.0, 0.0], 5))
        assert "AS similarity" in sql


class TestWrites:
    def test_insert_returns_generated_id(self, store, engine):
        engine.conn.execute.return_value.scalar_one.return_value = 7

        assert store.insert("hello", [1.0, 2.0, 3.0]) == 7
        sql = compile_sql(engine.conn.execute.call_args.args[0])
        assert sql.startswith("INSERT INTO chunks")
        assert "RETURNING chunks.id" in sql

    def test_insert_rejects_wrong_dimension_without_touching_db(self, store, engine):
        with pytest.raises(DimensionMismatchError):
            store.insert("hello", [1.0, 2.0])
        engine.begin.assert_not_called()

    def test_insert_rejects_non_finite(self, store):
        with pytest.raises(StoreQueryError):
            store.insert("hello", [1.0, float("inf"), 0.0])

    def test_insert_many_keeps_input_order(self, store, engine):
        engine.conn.execute.return_value.scalars.return_value.all.return_value = [4, 5]

        ids = store.insert_many([("a", [1.0, 0.0, 0.0]), ("b", [0.0, 1.0, 0.0])])

        assert ids == [4, 5]
        params = engine.conn.execute.call_args.args[1]
        assert [p["chunk_text"] for p in params] == ["a", "b"]

    def test_insert_many_empty(self, store, engine):
        assert store.insert_many([]) == []
        engine.begin.assert_not_called()

    def test_clear_returns_rowcount(self, store, engine):
        engine.conn.execute.return_value.rowcount = 4
        assert store.clear() == 4


class TestReads:
    def test_nearest_maps_rows(self, store, engine):
        engine.conn.execute.return_value.all.return_value = [
            MagicMock(id=2, chunk_text="best", similarity=0.9),
            MagicMock(id=1, chunk_text="next", similarity=0.5),
        ]

        results = store.nearest([1.0, 0.0, 0.0], 2)

        assert [(r.chunk_id, r.text, r.similarity) for r in results] == [
            (2, "best", 0.9),
            (1, "next", 0.5),
        ]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_nearest_invalid_limit(self, store, engine, limit):
        with pytest.raises(InvalidLimitError):
            store.nearest([1.0, 0.0, 0.0], limit)
        engine.connect.assert_not_called()

    def test_count(self, store, engine):
        engine.conn.execute.return_value.scalar_one.return_value = 12
        assert store.count() == 12

    def test_stats(self, store, engine):
        engine.conn.execute.return_value.scalar_one.return_value = 1
        assert store.stats() == {
            "backend": "pgvector",
            "name": "chunks",
            "count": 1,
            "dimension": 3,
        }


class TestErrors:
    def test_operational_error_becomes_connection_error(self, store, engine):
        engine.conn.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(StoreConnectionError) as exc_info:
            store.count()
        assert exc_info.value.extra_context["operation"] == "count"

    def test_programming_error_becomes_query_error(self, store, engine):
        engine.conn.execute.side_effect = ProgrammingError("INSERT", {}, Exception("no table"))

        with pytest.raises(StoreQueryError):
            store.insert("a", [1.0, 0.0, 0.0])

    def test_missing_database_url(self):
        store = PgVectorStore(database_url="", dimension=3)
        with pytest.raises(StoreConnectionError):
            store.count()


class TestLifecycle:
    def test_close_leaves_injected_engine_alone(self, store, engine):
        store.close()
        engine.dispose.assert_not_called()

    def test_owned_engine_created_on_open_and_disposed_on_close(self):
        with patch(
            "vecsearch.adapters.outbound.vector_store.pgvector_adapter.create_engine"
        ) as create_engine:
            store = PgVectorStore(database_url="postgresql+psycopg://u:p@db/x", dimension=3)
            with store:
                create_engine.assert_called_once_with(
                    "postgresql+psycopg://u:p@db/x", echo=False, pool_pre_ping=True
                )
            create_engine.return_value.dispose.assert_called_once()

    def test_dimension_must_be_positive(self):
        with pytest.raises(ValueError):
            PgVectorStore(dimension=0)
