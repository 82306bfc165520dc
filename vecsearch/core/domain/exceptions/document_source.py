"""Document source exceptions for vecsearch."""

from .base import VecSearchError


class DocumentSourceError(VecSearchError):
    """Failed to read a source document."""

    error_code = "VS_DOC_001"
