"""
Rate-Limited HTTP Fetcher

Wraps an httpx.AsyncClient with retry and exponential backoff for responses
that signal rate limiting (429, or GitHub's 403 with no remaining quota).
404 is a normal answer here ("name not taken"), not a failure.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping

import httpx

from .config import DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# Backoff base in seconds: 2^attempt * BACKOFF_BASE
BACKOFF_BASE = 0.5

RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"


class FetchError(Exception):
    """Base class for fetch failures."""


class RateLimitExceeded(FetchError):
    """Retries exhausted while the platform kept rate limiting us."""

    def __init__(self, max_attempts: int) -> None:
        self.max_attempts = max_attempts
        super().__init__(f"Rate limit exceeded after {max_attempts} attempts")


class RequestFailed(FetchError):
    """Non-retryable HTTP status."""

    def __init__(self, url: str, status: int) -> None:
        self.url = url
        self.status = status
        super().__init__(f"{url} failed with status {status}")


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return (
        response.status_code == 403
        and response.headers.get(RATE_LIMIT_REMAINING_HEADER) == "0"
    )


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given (1-based) rate-limited attempt."""
    return 2**attempt * BACKOFF_BASE


class RateLimitedFetcher:
    """
    Async HTTP fetcher with rate-limit-aware retries.

    Usage:
        async with RateLimitedFetcher() as fetcher:
            response = await fetcher.fetch("https://registry.npmjs.org/left-pad")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._transport = transport
        self._sleep = sleep
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RateLimitedFetcher":
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._headers,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> httpx.Response:
        """
        GET a URL, retrying on rate-limit responses.

        Returns:
            The first 2xx or 404 response.

        Raises:
            RateLimitExceeded: rate limited on every one of max_attempts tries
            RequestFailed: any other non-success status (no retry)
            httpx.HTTPError: transport failures
        """
        if self._client is None:
            raise RuntimeError("Fetcher not initialized. Use 'async with' context.")

        attempt = 0
        while attempt < max_attempts:
            response = await self._client.get(url, headers=headers)

            if response.is_success or response.status_code == 404:
                return response

            if _is_rate_limited(response):
                attempt += 1
                if attempt >= max_attempts:
                    break

                delay = backoff_delay(attempt)
                logger.debug(
                    "Rate limited by %s (status %d), retry %d/%d in %.1fs",
                    url, response.status_code, attempt, max_attempts - 1, delay,
                )
                await self._sleep(delay)
                continue

            raise RequestFailed(url, response.status_code)

        raise RateLimitExceeded(max_attempts)
