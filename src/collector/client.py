"""
Google API Client

Async HTTP client shared by the Search Console and GA4 providers:
- Bearer token auth
- Automatic retry with exponential backoff (429/5xx/timeouts)
- Graceful error handling via ProviderError
- Request logging
"""

import asyncio
import httpx
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 2
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


class ProviderError(Exception):
    """A Search Console or GA4 request failed (auth, network, quota)."""
    def __init__(self, message: str, status_code: int = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class GoogleAPIClient:
    """
    Async client for a Google REST API.

    Usage:
        client = GoogleAPIClient(
            base_url="https://analyticsdata.googleapis.com/v1beta",
            access_token=token,
        )

        report = await client.post("/properties/123:runReport", {...})

        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 30.0,
        max_connections: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, e.g. "https://www.googleapis.com/webmasters/v3"
            access_token: OAuth bearer token
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds
            max_connections: Maximum concurrent connections
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

        self._closed = False

    async def post(
        self,
        path: str,
        payload: Dict[str, Any],
        retry: bool = True
    ) -> Dict[str, Any]:
        """
        Make POST request.

        Args:
            path: Endpoint path relative to the base URL
            payload: JSON request body
            retry: Whether to retry on failure

        Returns:
            Response JSON as dictionary

        Raises:
            ProviderError: On HTTP, transport or timeout failure
        """
        if self._closed:
            raise ProviderError("Client is closed")

        if retry:
            return await self._request_with_retry(path, payload)
        return await self._make_request(path, payload)

    async def _make_request(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make a single HTTP request."""
        logger.debug(f"POST {path}")

        response = await self._client.post(path, json=payload)

        if response.status_code != 200:
            raise ProviderError(
                f"API request failed: {response.status_code} {response.text[:500]}",
                status_code=response.status_code,
                response=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON in response: {e}", status_code=response.status_code)

    async def _request_with_retry(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make request with automatic retry on failure."""
        last_exception = None
        delay = self.retry_config.initial_delay
        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            try:
                return await self._make_request(path, payload)

            except ProviderError as e:
                last_exception = e

                # Don't retry client errors (4xx except 429)
                if e.status_code not in self.retry_config.retryable_status_codes:
                    raise

            except httpx.TimeoutException as e:
                last_exception = ProviderError(f"Request timed out: {e}")

            except httpx.HTTPError as e:
                last_exception = ProviderError(f"HTTP error: {e}")

            if attempt < self.retry_config.max_retries:
                logger.warning(
                    f"Request to {path} failed (attempt {attempt + 1}/{attempts}): "
                    f"{last_exception}. Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
                delay = min(
                    delay * self.retry_config.exponential_base,
                    self.retry_config.max_delay
                )

        raise last_exception

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
