"""Reads source documents from the local filesystem."""

import logging
from pathlib import Path

from ....core.domain import Document
from ....core.domain.exceptions import DocumentSourceError
from ....core.ports.document_source_port import DocumentSourcePort

logger = logging.getLogger(__name__)


class FileDocumentSource(DocumentSourcePort):
    """Loads a whole text file as a ``Document``."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read(self, reference: str | Path) -> Document:
        path = Path(reference)
        if not path.is_file():
            raise DocumentSourceError(
                f"Document not found: {path}", context={"path": str(path)}
            )

        try:
            content = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentSourceError(
                f"Failed to read document: {path}",
                cause=e,
                context={"path": str(path), "encoding": self.encoding},
            ) from e

        logger.info("Read %d characters from %s", len(content), path)
        return Document(content=content, source=str(path))
