"""Section-based markdown chunker.

A document is split at every line that starts with the heading marker
(``"## "`` by default); the marker line opens a new chunk. Text before the
first marker is kept as its own chunk so nothing is dropped. Each span is
then rendered to plain text, since the embedding model is fed prose rather
than markdown syntax.
"""

import logging
import re

import markdown
from bs4 import BeautifulSoup

from ..domain import Chunk, Document
from ..domain.utils import clean_text

logger = logging.getLogger(__name__)

DEFAULT_HEADING_MARKER = "## "


def split_sections(text: str, marker: str = DEFAULT_HEADING_MARKER) -> list[str]:
    """Split markdown into raw sections at heading-marker lines.

    Args:
        text: Full document text.
        marker: Prefix identifying a section-start line.

    Returns:
        Non-blank sections in document order, each with its trailing
        whitespace removed.
    """
    if not marker:
        raise ValueError("marker must be a non-empty string")

    pattern = re.compile(rf"(?=^{re.escape(marker)})", re.MULTILINE)
    return [section.rstrip() for section in pattern.split(text) if section.strip()]


def render_plain_text(section: str) -> str:
    """Render one markdown section to plain text.

    Headings, list items and emphasis are reduced to their text; raw HTML
    tags are stripped. Runs of whitespace inside a line collapse to one
    space and blank lines are dropped.
    """
    html = markdown.markdown(section)
    # Tags become spaces; block boundaries keep their newlines
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


class MarkdownChunker:
    """Turns a ``Document`` into ordered plain-text ``Chunk`` objects."""

    def __init__(self, marker: str = DEFAULT_HEADING_MARKER) -> None:
        if not marker:
            raise ValueError("marker must be a non-empty string")
        self.marker = marker

    def chunk_document(self, document: Document) -> list[Chunk]:
        """Split and render a document.

        Returns an empty list for an empty or whitespace-only document.
        """
        sections = split_sections(clean_text(document.content), self.marker)

        chunks: list[Chunk] = []
        for section in sections:
            plain = render_plain_text(section) or self._literal_text(section)
            if not plain:
                logger.debug("Skipping bare heading marker: %.40r", section)
                continue
            chunks.append(
                Chunk(text=plain, source=document.source, position=len(chunks), raw=section)
            )

        logger.debug("Chunked %s into %d sections", document.source, len(chunks))
        return chunks

    def _literal_text(self, section: str) -> str:
        """Section text with the marker and extra whitespace removed.

        Used when markup renders to nothing (an HTML comment, a heading
        like ``<T>`` read as a tag), so the span still yields a chunk.
        """
        # Sections are right-stripped, so a bare marker may have lost its trailing space
        opener = self.marker.rstrip()
        if section.startswith(opener):
            section = section[len(opener) :]
        lines = (" ".join(line.split()) for line in section.splitlines())
        return "\n".join(line for line in lines if line)

    def chunk_text(self, text: str, source: str = "<memory>") -> list[str]:
        """Convenience wrapper returning just the chunk texts."""
        return [c.text for c in self.chunk_document(Document(content=text, source=source))]
