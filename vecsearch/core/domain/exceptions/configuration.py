"""Errors raised while wiring providers and stores from settings."""

from .base import VecSearchError


class ConfigurationError(VecSearchError):
    """Settings cannot produce a working provider or store."""

    error_code = "VS_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """The selected embedding provider has no API key.

    Set ``OPENAI_API_KEY`` or ``GOOGLE_API_KEY`` to match ``EMBEDDING_PROVIDER``.
    """

    error_code = "VS_CFG_002"


class InvalidConfigurationError(ConfigurationError):
    """A setting is present but unusable, e.g. a non-positive dimension
    or the pgvector backend without ``DATABASE_URL``."""

    error_code = "VS_CFG_003"
