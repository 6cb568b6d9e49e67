"""Base service class for the PayHere HTTP API."""

from __future__ import annotations

from typing import Any

import httpx

from payhere.exceptions import RequestFailed
from payhere.logging import get_logger


class BaseService:
    """Base class for HTTP based API clients.

    Provides common functionality:
    - Shared httpx.AsyncClient, owned or injected
    - Per-request timeout
    - Structured logging of requests and responses
    - Transport errors wrapped in RequestFailed

    Requests are attempted once; failures are reported to the caller
    without retrying.
    """

    def __init__(
        self,
        timeout: httpx.Timeout,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the base service.

        Args:
            timeout: Timeout applied to every request.
            client: Optional httpx.AsyncClient. If not provided, one is
                    created and closed by ``close()``.
        """
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = get_logger(type(self).__module__, service=type(self).__name__)
        self._owns_client = client is None

    async def close(self) -> None:
        """Close the HTTP client if owned by this service."""
        if self._owns_client and self.client:
            await self.client.aclose()

    async def __aenter__(self) -> "BaseService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request.

        Non-2xx responses are returned as-is so callers can read the
        gateway's error body.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            operation: Operation name used in logs and errors
            **kwargs: Additional arguments passed to httpx.request()

        Raises:
            RequestFailed: On timeout or any other transport error.
        """
        self.logger.debug("http_request", operation=operation, method=method, url=url)

        try:
            response = await self.client.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.TimeoutException as e:
            self.logger.error(
                "request_timeout",
                operation=operation,
                method=method,
                url=url,
                error=str(e),
            )
            raise RequestFailed(
                operation,
                f"Request timed out: {e}",
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(
                "network_error",
                operation=operation,
                method=method,
                url=url,
                error=str(e),
            )
            raise RequestFailed(
                operation,
                f"Network error: {e}",
                original_error=e,
            ) from e

        self.logger.debug(
            "http_response",
            operation=operation,
            method=method,
            url=url,
            status_code=response.status_code,
        )
        return response

    async def _get(self, url: str, operation: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, operation, **kwargs)

    async def _post(self, url: str, operation: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, operation, **kwargs)
