"""Unit tests for FileDocumentSource."""

import pytest

from vecsearch.adapters.outbound.document_source import FileDocumentSource
from vecsearch.core.domain.exceptions import DocumentSourceError

pytestmark = pytest.mark.unit


def test_reads_whole_file(markdown_file, sample_markdown):
    document = FileDocumentSource().read(markdown_file)
    assert document.content == sample_markdown
    assert document.source == str(markdown_file)


def test_accepts_string_path(markdown_file):
    assert FileDocumentSource().read(str(markdown_file)).source == str(markdown_file)


def test_missing_file(tmp_path):
    with pytest.raises(DocumentSourceError) as exc_info:
        FileDocumentSource().read(tmp_path / "nope.md")
    assert exc_info.value.error_code == "VS_DOC_001"


def test_directory_is_not_a_document(tmp_path):
    with pytest.raises(DocumentSourceError):
        FileDocumentSource().read(tmp_path)


def test_undecodable_file(tmp_path):
    path = tmp_path / "latin1.md"
    path.write_bytes(b"caf\xe9")
    with pytest.raises(DocumentSourceError) as exc_info:
        FileDocumentSource().read(path)
    assert isinstance(exc_info.value.cause, UnicodeDecodeError)
