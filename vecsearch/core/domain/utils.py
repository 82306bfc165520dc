"""Text and vector helpers shared by the core and its adapters.

Text handling contract
----------------------
Documents and queries have BOM markers removed and line endings
normalised once, at the point they enter the pipeline. Internal layers
assume text is already clean.

Vector contract
---------------
Every vector that crosses a port boundary is a ``list[float]`` of the
configured dimension with finite values. ``validate_embedding`` is the
single place that shape is checked.
"""

import math
import numbers
import unicodedata
from typing import Any

from .exceptions import EmptyQueryError, InvalidLimitError


def clean_text(text: str, *, normalize: bool = True) -> str:
    """Remove BOM markers, normalise line endings and optionally NFKC-normalise.

    Args:
        text: Input text that may contain BOM or special characters.
        normalize: Whether to apply NFKC normalization for consistent
            embeddings. Enabled by default.

    Returns:
        Cleaned text.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    return cleaned


def require_query(text: Any) -> str:
    """Return ``text`` stripped, or raise if it is not a non-blank string."""
    if not isinstance(text, str) or not text.strip():
        raise EmptyQueryError(
            "Query text cannot be empty or whitespace only",
            context={"query": repr(text)[:80]},
        )
    return text.strip()


def validate_limit(limit: Any) -> int:
    """Return ``limit`` if it is a positive int, else raise ``InvalidLimitError``."""
    # bool is an int subclass; True would otherwise pass as 1
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidLimitError(
            f"limit must be a positive integer, got {limit!r}",
            context={"limit": repr(limit)},
        )
    return limit


def validate_embedding(values: Any, dimension: int) -> list[float]:
    """Check the shape of an embedding and return it as ``list[float]``.

    Args:
        values: Candidate vector from a provider or caller.
        dimension: Required number of components.

    Returns:
        The vector as a list of Python floats.

    Raises:
        ValueError: If the value is not a sequence of ``dimension`` finite
            real numbers. Callers translate this into their own error type.
    """
    if values is None or isinstance(values, str | bytes):
        raise ValueError(f"expected a numeric sequence, got {type(values).__name__}")

    try:
        items = list(values)
    except TypeError as e:
        raise ValueError(f"expected a numeric sequence, got {type(values).__name__}") from e

    if len(items) != dimension:
        raise ValueError(f"expected {dimension} dimensions, got {len(items)}")

    vector: list[float] = []
    for index, item in enumerate(items):
        if isinstance(item, bool) or not isinstance(item, numbers.Real):
            raise ValueError(f"component {index} is not numeric: {item!r}")
        value = float(item)
        if not math.isfinite(value):
            raise ValueError(f"component {index} is not finite: {value!r}")
        vector.append(value)
    return vector
