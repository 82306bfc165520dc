"""Document source adapters."""

from .file_adapter import FileDocumentSource

__all__ = ["FileDocumentSource"]
