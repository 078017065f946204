"""Base client for site requests."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class Client(ABC):
    """Base class for asynchronous site clients.

    Provides a lazily created httpx.AsyncClient with async context manager
    support, configurable timeout, retries and headers via dict config.

    Config keys:
        base_url (required): Origin the site paths are resolved against
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Number of attempts for transient failures (default: 3)
        retry_delay: Delay between attempts in seconds (default: 1)
        headers: Additional headers to include in requests
    """

    def __init__(self, config: dict, transport: httpx.AsyncBaseTransport | None = None):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"])

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return max(1, int(self._config.get("retry_attempts", 3)))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.get("headers", {}))

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Map HTTP errors to exceptions.

        Raises:
            NotFoundError: For 404 responses
            APIError: For other non-2xx responses
        """
        if response.is_success:
            return response

        status_code = response.status_code

        if status_code == 404:
            raise NotFoundError(f"Resource not found: {response.url}")
        raise APIError(
            f"API error {status_code}: {response.url}",
            status_code=status_code,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Make a request, retrying connection failures and timeouts.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (resolved against base_url)
            **kwargs: Additional arguments passed to httpx.AsyncClient.request

        Returns:
            The HTTP response

        Raises:
            ConnectionError: If all attempts fail due to network issues, or on
                any other request error such as a redirect loop
            APIError: If the site returns a non-2xx response
        """
        last_exception: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.request(method, path, **kwargs)
                return self._handle_response(response)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                logger.warning(
                    f"Request to {path} failed "
                    f"(attempt {attempt + 1}/{self.retry_attempts}): {e!r}"
                )
                if attempt < self.retry_attempts - 1:
                    await asyncio.sleep(self.retry_delay)
            except httpx.RequestError as e:
                raise ConnectionError(f"Request error for {path}: {e!r}") from e

        msg = f"Connection failed after {self.retry_attempts} attempts: {path}"
        raise ConnectionError(msg) from last_exception

    async def get(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return await self._request("GET", path, **kwargs)

    @abstractmethod
    async def fetch(self, *args, **kwargs) -> Any:
        """Fetch data from the site. Must be implemented by subclasses."""
        pass
