"""Embedding provider adapters."""

from .gemini_adapter import GeminiEmbeddingAdapter
from .openai_adapter import OpenAIEmbeddingAdapter
from .retrying_adapter import RetryingEmbeddingAdapter

__all__ = ["GeminiEmbeddingAdapter", "OpenAIEmbeddingAdapter", "RetryingEmbeddingAdapter"]
