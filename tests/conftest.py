"""
Pytest configuration and shared fixtures.
"""

import os
import re
from pathlib import Path

import pytest

from vecsearch.adapters.outbound.document_source import FileDocumentSource
from vecsearch.adapters.outbound.vector_store import InMemoryVectorStore
from vecsearch.core.ports import EmbeddingPort
from vecsearch.core.services import MarkdownChunker, SimilaritySearchService

TEST_DIMENSION = 32

SAMPLE_MARKDOWN = "Intro text\n## Section A\nfoo bar\n## Section B\nbaz\n"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require a database)")
    config.addinivalue_line("markers", "slow: Slow tests (network, large data)")


class VocabularyEmbedder(EmbeddingPort):
    """Deterministic bag-of-words embedder.

    Each distinct lowercase word gets its own axis the first time it is
    seen, so texts sharing words point in similar directions and the same
    text always maps to the same vector.
    """

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self._dimension = dimension
        self.vocabulary: dict[str, int] = {}
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self._dimension
        for word in re.findall(r"\w+", text.lower()):
            index = self.vocabulary.setdefault(word, len(self.vocabulary) % self._dimension)
            vector[index] += 1.0
        return vector


@pytest.fixture
def embedder():
    return VocabularyEmbedder()


@pytest.fixture
def memory_store():
    store = InMemoryVectorStore(dimension=TEST_DIMENSION)
    store.ensure_ready()
    return store


@pytest.fixture
def service(embedder, memory_store):
    """Search service over the in-memory store."""
    return SimilaritySearchService(
        embedder=embedder,
        store=memory_store,
        chunker=MarkdownChunker(),
        document_source=FileDocumentSource(),
    )


@pytest.fixture
def sample_markdown():
    return SAMPLE_MARKDOWN


@pytest.fixture
def markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Sample document written to a temporary file."""
    path = tmp_path / "doc.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path


@pytest.fixture(scope="session")
def database_url():
    """Get the PostgreSQL URL from environment."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            for line in env_file.read_text().splitlines():
                if line.startswith("DATABASE_URL="):
                    url = line.split("=", 1)[1].strip().strip("\"'")
                    break

    if not url:
        pytest.skip("DATABASE_URL not set")

    return url
