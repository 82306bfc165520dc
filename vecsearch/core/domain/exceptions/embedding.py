"""Embedding provider exceptions for vecsearch."""

from .base import VecSearchError


class ProviderError(VecSearchError):
    """The embedding provider call failed or returned an unusable vector."""

    error_code = "VS_EMB_001"


class ProviderConnectionError(ProviderError):
    """Could not reach the embedding provider."""

    error_code = "VS_EMB_002"


class ProviderTimeoutError(ProviderError):
    """The embedding request timed out."""

    error_code = "VS_EMB_003"


class ProviderRateLimitError(ProviderError):
    """The embedding provider rejected the request with a rate limit."""

    error_code = "VS_EMB_004"


class ProviderAPIError(ProviderError):
    """The embedding provider returned an error status."""

    error_code = "VS_EMB_005"


class ProviderResponseError(ProviderError):
    """The embedding response was malformed.

    Common causes:
    - Empty ``data`` payload
    - Wrong dimensionality for the configured model
    - Non-numeric or non-finite values
    """

    error_code = "VS_EMB_006"
