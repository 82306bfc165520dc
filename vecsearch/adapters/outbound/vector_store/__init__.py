"""Vector store adapters."""

from .memory_adapter import InMemoryVectorStore
from .pgvector_adapter import PgVectorStore, build_chunk_table

__all__ = ["InMemoryVectorStore", "PgVectorStore", "build_chunk_table"]
