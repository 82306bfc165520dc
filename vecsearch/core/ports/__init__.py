"""Port interfaces the core services depend on."""

from .document_source_port import DocumentSourcePort
from .embedding_port import EmbeddingPort
from .vector_store_port import VectorStorePort

__all__ = ["DocumentSourcePort", "EmbeddingPort", "VectorStorePort"]
