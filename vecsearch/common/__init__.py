"""Shared helpers used by adapters and the CLI."""

from .exception_handler import (
    format_exception_json,
    get_error_code,
    get_exit_code,
    log_exception,
)
from .rate_limiter import RateLimiter

__all__ = [
    "format_exception_json",
    "log_exception",
    "get_error_code",
    "get_exit_code",
    "RateLimiter",
]
