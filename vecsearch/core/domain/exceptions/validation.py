"""Validation exceptions for vecsearch."""

from .base import VecSearchError


class InvalidArgumentError(VecSearchError):
    """Input validation failed."""

    error_code = "VS_VAL_001"


class EmptyQueryError(InvalidArgumentError):
    """Query cannot be empty or whitespace only."""

    error_code = "VS_VAL_002"


class InvalidLimitError(InvalidArgumentError):
    """Result limit must be a positive integer."""

    error_code = "VS_VAL_003"
