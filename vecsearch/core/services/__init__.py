"""Core services: chunking and similarity search orchestration."""

from .chunker import MarkdownChunker, render_plain_text, split_sections
from .search_service import SimilaritySearchService

__all__ = ["MarkdownChunker", "SimilaritySearchService", "render_plain_text", "split_sections"]
