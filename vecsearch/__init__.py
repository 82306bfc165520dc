"""Markdown chunking, embedding and pgvector similarity search."""

__version__ = "0.1.0"
