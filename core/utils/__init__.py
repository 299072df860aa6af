"""Core utilities for async HTTP clients, retries, and error handling."""

from .async_http_client import cleanup_all_clients, register_cleanup
from .http_errors import HTTPRequestError, safe_http_request
from .retry import with_retry

__all__ = [
    "cleanup_all_clients",
    "register_cleanup",
    "HTTPRequestError",
    "safe_http_request",
    "with_retry",
]
