"""PostgreSQL + pgvector store for chunk embeddings.

One table, ``(id serial, chunk_text text, embedding vector(D))``. The only
statements issued are the extension/table bootstrap, row inserts, the
ranked ``SELECT ... ORDER BY embedding <=> :q LIMIT :k`` and the
count/delete maintenance queries.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    Select,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

from ....core.domain import SimilarityResult
from ....core.domain.exceptions import (
    DimensionMismatchError,
    StoreConnectionError,
    StoreQueryError,
)
from ....core.domain.utils import validate_embedding, validate_limit
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "markdown_chunks"
DEFAULT_DIMENSION = 1536


def build_chunk_table(
    metadata: MetaData, name: str = DEFAULT_TABLE, dimension: int = DEFAULT_DIMENSION
) -> Table:
    """Declare the chunk table on ``metadata``."""
    return Table(
        name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("chunk_text", Text, nullable=False),
        Column("embedding", Vector(dimension), nullable=False),
    )


class PgVectorStore(VectorStorePort):
    """Vector store backed by a pgvector column in PostgreSQL."""

    def __init__(
        self,
        database_url: str = "",
        table_name: str = DEFAULT_TABLE,
        dimension: int = DEFAULT_DIMENSION,
        engine: Engine | None = None,
        echo: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            database_url: SQLAlchemy URL, e.g. ``postgresql+psycopg://user:pw@host/db``.
            table_name: Name of the chunk table.
            dimension: Vector dimensionality of the embedding column.
            engine: Pre-built engine; the store will not dispose of it.
            echo: Log emitted SQL.
        """
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.database_url = database_url
        self.table_name = table_name
        self.dimension = dimension
        self.echo = echo
        self.metadata = MetaData()
        self.table = build_chunk_table(self.metadata, table_name, dimension)
        self._engine = engine
        self._owns_engine = engine is None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Create the connection pool if it does not exist yet."""
        self._get_engine()

    def close(self) -> None:
        """Dispose of the connection pool created by this store."""
        if self._engine is not None and self._owns_engine:
            self._engine.dispose()
            self._engine = None
            logger.info("Closed vector store connection pool")

    def _get_engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            if not self.database_url:
                raise StoreConnectionError(
                    "No database URL configured for the pgvector store",
                    context={"table": self.table_name},
                )
            try:
                self._engine = create_engine(
                    self.database_url,
                    echo=self.echo,
                    pool_pre_ping=True,
                )
            except SQLAlchemyError as e:
                raise StoreConnectionError(
                    "Failed to create database engine",
                    cause=e,
                    context={"table": self.table_name},
                ) from e
            self._owns_engine = True
            logger.info("Opened vector store connection pool for table %s", self.table_name)
        return self._engine

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """Re-raise SQLAlchemy errors as store errors."""
        context = {"operation": operation, "table": self.table_name}
        try:
            yield
        except (OperationalError, InterfaceError) as e:
            raise StoreConnectionError(
                f"Database connection failed during {operation}", cause=e, context=context
            ) from e
        except DBAPIError as e:
            if e.connection_invalidated:
                raise StoreConnectionError(
                    f"Database connection lost during {operation}", cause=e, context=context
                ) from e
            raise StoreQueryError(
                f"Database error during {operation}", cause=e, context=context
            ) from e
        except SQLAlchemyError as e:
            raise StoreQueryError(
                f"Database error during {operation}", cause=e, context=context
            ) from e

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def ensure_ready(self) -> None:
        """Enable the vector extension and create the chunk table if missing."""
        engine = self._get_engine()
        with self._translate_errors("ensure_ready"), engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            self.metadata.create_all(conn, checkfirst=True)
        logger.info("Vector extension and table %s are ready", self.table_name)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _check_vector(self, vector: Sequence[float]) -> list[float]:
        try:
            length = len(vector)
        except TypeError:
            length = None
        if length is not None and length != self.dimension:
            raise DimensionMismatchError(
                f"Vector has {length} dimensions, store expects {self.dimension}",
                context={"expected": self.dimension, "actual": length, "table": self.table_name},
            )
        try:
            return validate_embedding(vector, self.dimension)
        except ValueError as e:
            raise StoreQueryError(
                f"Malformed vector: {e}", cause=e, context={"table": self.table_name}
            ) from e

    def insert(self, chunk_text: str, embedding: Sequence[float]) -> int:
        """Insert one row and return its generated id."""
        vector = self._check_vector(embedding)
        engine = self._get_engine()

        stmt = (
            insert(self.table)
            .values(chunk_text=chunk_text, embedding=vector)
            .returning(self.table.c.id)
        )
        with self._translate_errors("insert"), engine.begin() as conn:
            chunk_id = conn.execute(stmt).scalar_one()

        logger.debug("Inserted chunk %s (%d chars)", chunk_id, len(chunk_text))
        return int(chunk_id)

    def insert_many(self, rows: Sequence[tuple[str, Sequence[float]]]) -> list[int]:
        """Insert all rows in a single transaction; ids are returned in input order."""
        if not rows:
            return []

        params = [
            {"chunk_text": chunk_text, "embedding": self._check_vector(embedding)}
            for chunk_text, embedding in rows
        ]
        engine = self._get_engine()

        stmt = insert(self.table).returning(self.table.c.id, sort_by_parameter_order=True)
        with self._translate_errors("insert_many"), engine.begin() as conn:
            ids = conn.execute(stmt, params).scalars().all()

        logger.debug("Inserted %d chunks in one batch", len(ids))
        return [int(i) for i in ids]

    def clear(self) -> int:
        """Delete every row from the chunk table."""
        engine = self._get_engine()
        with self._translate_errors("clear"), engine.begin() as conn:
            removed = conn.execute(delete(self.table)).rowcount
        logger.info("Removed %d chunks from %s", removed, self.table_name)
        return int(removed or 0)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def nearest_statement(self, query_vector: Sequence[float], limit: int) -> Select:
        """Build the ranked similarity query.

        Rows are ordered by cosine distance, then by id so ties come back in
        insertion order.
        """
        distance = self.table.c.embedding.cosine_distance(query_vector)
        return (
            select(
                self.table.c.id,
                self.table.c.chunk_text,
                (1 - distance).label("similarity"),
            )
            .order_by(distance, self.table.c.id)
            .limit(limit)
        )

    def nearest(self, query_vector: Sequence[float], limit: int) -> list[SimilarityResult]:
        """Return at most ``limit`` chunks ranked by descending similarity."""
        limit = validate_limit(limit)
        vector = self._check_vector(query_vector)
        engine = self._get_engine()

        with self._translate_errors("nearest"), engine.connect() as conn:
            rows = conn.execute(self.nearest_statement(vector, limit)).all()

        return [
            SimilarityResult(text=row.chunk_text, similarity=float(row.similarity), chunk_id=row.id)
            for row in rows
        ]

    def count(self) -> int:
        engine = self._get_engine()
        with self._translate_errors("count"), engine.connect() as conn:
            return int(conn.execute(select(func.count()).select_from(self.table)).scalar_one())

    def stats(self) -> dict[str, Any]:
        return {
            "backend": "pgvector",
            "name": self.table_name,
            "count": self.count(),
            "dimension": self.dimension,
        }
