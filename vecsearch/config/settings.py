"""Configuration management for vecsearch."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets copied from dashboards or written by some editors may carry a
    BOM that breaks HTTP headers and connection strings.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Embedding provider
    embedding_provider: Literal["openai", "gemini"] = "openai"
    openai_api_key: str = ""
    google_api_key: str = ""
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimension: int = 1536
    embedding_timeout_seconds: float = 30.0
    embedding_requests_per_minute: int | None = None
    embedding_max_retries: int = 0

    # Vector store
    vector_backend: Literal["pgvector", "memory"] = "pgvector"
    database_url: str = ""
    vector_table: str = "markdown_chunks"

    @field_validator("openai_api_key", "google_api_key", "database_url", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Chunking / search
    heading_marker: str = "## "
    default_limit: int = 3
    ingest_batch_insert: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    log_json: bool = False


# Global settings instance
settings = Settings()
