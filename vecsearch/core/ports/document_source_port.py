"""Document Source Port Interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..domain import Document


class DocumentSourcePort(ABC):
    """Abstract interface for reading source documents."""

    @abstractmethod
    def read(self, reference: str | Path) -> Document:
        """Read the full text behind ``reference``.

        Raises:
            DocumentSourceError: The document could not be read.
        """
        ...
