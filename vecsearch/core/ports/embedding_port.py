"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding providers.

    Implementations make exactly one provider call per ``embed`` and never
    retry; resilience is layered on by the caller.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Number of components in every vector this provider returns."""
        ...

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed one text.

        Raises:
            ProviderError: The call failed or returned a malformed vector.
            EmptyQueryError: ``text`` is blank.
        """
        ...
