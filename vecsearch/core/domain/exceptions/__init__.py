"""Custom exception hierarchy for vecsearch.

Each exception carries an error code, the location it was raised from,
the underlying cause and a JSON-friendly ``to_dict``. Import from this
package directly:

    from vecsearch.core.domain.exceptions import ProviderError, StoreError
"""

# Base classes
from .base import RaiseSite, VecSearchError

# Configuration exceptions
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingAPIKeyError,
)

# Document source exceptions
from .document_source import DocumentSourceError

# Embedding provider exceptions
from .embedding import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)

# Validation exceptions
from .validation import (
    EmptyQueryError,
    InvalidArgumentError,
    InvalidLimitError,
)

# Vector store exceptions
from .vector_store import (
    DimensionMismatchError,
    StoreConnectionError,
    StoreError,
    StoreNotReadyError,
    StoreQueryError,
)

__all__ = [
    # Base
    "RaiseSite",
    "VecSearchError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    "InvalidConfigurationError",
    # Document source
    "DocumentSourceError",
    # Embedding provider
    "ProviderError",
    "ProviderConnectionError",
    "ProviderTimeoutError",
    "ProviderRateLimitError",
    "ProviderAPIError",
    "ProviderResponseError",
    # Vector store
    "StoreError",
    "StoreConnectionError",
    "StoreQueryError",
    "StoreNotReadyError",
    "DimensionMismatchError",
    # Validation
    "InvalidArgumentError",
    "EmptyQueryError",
    "InvalidLimitError",
]
