"""HTTP error handling utilities."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class HTTPRequestError(Exception):
    """HTTP request failed.

    Attributes:
        status_code: Response status, or None when no response was received
        body: Response body text (truncated), if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def transient(self) -> bool:
        """Connection failures, timeouts, 5xx and 429 are worth retrying."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


async def safe_http_request(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    **kwargs: Any,
) -> httpx.Response:
    """
    Make HTTP request with consistent error handling.

    Args:
        client: httpx.AsyncClient instance
        method: HTTP method (GET, POST, etc.)
        path: Request path or absolute URL
        **kwargs: Additional arguments for request

    Returns:
        Response object

    Raises:
        HTTPRequestError: On HTTP or connection errors
    """
    try:
        response = await client.request(method, path, **kwargs)
        response.raise_for_status()
        return response
    except httpx.ConnectError as e:
        logger.error(f"Connection failed to {client.base_url}{path}: {e}")
        raise HTTPRequestError(f"Connection failed: {e}") from e
    except httpx.TimeoutException as e:
        logger.error(f"Request timeout for {client.base_url}{path}: {e}")
        raise HTTPRequestError(f"Request timeout: {e}") from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        body = e.response.text[:1000]
        logger.error(f"HTTP {status} error for {client.base_url}{path}")
        raise HTTPRequestError(f"HTTP {status}: {body}", status_code=status, body=body) from e
    except httpx.HTTPError as e:
        logger.error(f"Request failed for {client.base_url}{path}: {e}")
        raise HTTPRequestError(f"Request failed: {e}") from e
