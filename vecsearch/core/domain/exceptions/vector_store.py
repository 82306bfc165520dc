"""Vector store exceptions for vecsearch."""

from .base import VecSearchError


class StoreError(VecSearchError):
    """Base error for vector store operations."""

    error_code = "VS_VEC_001"


class StoreConnectionError(StoreError):
    """Failed to connect to the vector database.

    Common causes:
    - Invalid database URL or credentials
    - Network connectivity issues
    - Database service is down
    """

    error_code = "VS_VEC_002"


class StoreQueryError(StoreError):
    """An insert or query against the vector table failed.

    Common causes:
    - The vector extension or chunk table does not exist
    - Constraint violation
    - Malformed vector literal
    """

    error_code = "VS_VEC_003"


class DimensionMismatchError(StoreError):
    """Vector length does not match the store's configured dimension."""

    error_code = "VS_VEC_004"


class StoreNotReadyError(StoreError):
    """Insert or query attempted before ``ensure_ready`` succeeded."""

    error_code = "VS_VEC_005"
