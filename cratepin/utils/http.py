"""
HTTP client utilities for cratepin.

This module provides a synchronous HTTP client with retry logic, rate
limiting, and registry-friendly status handling.  "Not found" statuses are
returned to the caller untouched because registry indexes use them to
answer "no such crate".
"""

from __future__ import annotations

import time
import httpx
import random
import threading
from typing import Any, Optional

from cratepin.utils.logger import get_logger
from cratepin.__version__ import __version__
from cratepin.exceptions import NetworkError
from cratepin.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    INDEX_NOT_FOUND_STATUSES,
    MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


class HTTPClient:
    """Synchronous HTTP client with retries and rate limiting.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Maximum number of retry attempts.
        rate_limit_delay: Minimum delay (seconds) between requests.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.

    Example:
        >>> with HTTPClient() as client:
        ...     response = client.get("https://index.crates.io/se/rd/serde")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rate_limit_delay: float = 0.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)

        self._client: Optional[httpx.Client] = None
        self._last_request_time: float = 0.0
        self._rate_limit_lock = threading.Lock()
        self._max_429_retries: int = MAX_RATE_LIMIT_RETRIES

    def __enter__(self) -> "HTTPClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            )
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _rate_limit(self) -> None:
        """Enforce a minimum delay between outgoing requests."""
        if self.rate_limit_delay <= 0:
            return

        with self._rate_limit_lock:
            now = time.time()
            elapsed = now - self._last_request_time

            if elapsed < self.rate_limit_delay:
                delay = self.rate_limit_delay - elapsed
                self._last_request_time = now + delay
                time.sleep(delay)
            else:
                self._last_request_time = now

    def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and backoff logic."""
        client = self._ensure_client()

        clean_url = url.strip().strip("\"'")
        last_exc: Optional[Exception] = None
        retry_429_count = 0

        for attempt in range(self.max_retries + 1):
            try:
                self._rate_limit()
                response = client.request(method, clean_url, **kwargs)

                if response.status_code == 429:
                    retry_429_count += 1
                    if retry_429_count > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=clean_url,
                            status_code=429,
                        )
                    retry_after = _retry_after_seconds(response)
                    logger.warning(
                        "Rate limited (429), retrying after %ds (%d/%d)",
                        retry_after,
                        retry_429_count,
                        self._max_429_retries,
                    )
                    time.sleep(retry_after)
                    continue

                if response.status_code in INDEX_NOT_FOUND_STATUSES:
                    return response

                if response.status_code >= 400:
                    response.raise_for_status()

                return response

            except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
                raise NetworkError(
                    f"Cannot request {clean_url}: {exc}",
                    url=clean_url,
                ) from exc

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.warning(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    clean_url,
                )

            except httpx.NetworkError as exc:
                last_exc = exc
                logger.warning(
                    "Network error (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except httpx.TransportError as exc:
                last_exc = exc
                logger.warning(
                    "Transport error (%d/%d): %s: %s",
                    attempt + 1,
                    self.max_retries + 1,
                    type(exc).__name__,
                    exc,
                )

            except httpx.HTTPStatusError as exc:
                if 400 <= exc.response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {exc.response.status_code} error for {clean_url}",
                        url=clean_url,
                        status_code=exc.response.status_code,
                        response_body=exc.response.text,
                    ) from exc
                last_exc = exc
                logger.warning(
                    "HTTP %d error (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    self.max_retries + 1,
                    clean_url,
                )

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                time.sleep(delay)

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {clean_url}",
            url=clean_url,
        ) from last_exc

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return self._request_with_retry("GET", url, **kwargs)


def _retry_after_seconds(response: httpx.Response) -> int:
    """Read ``Retry-After`` as delay seconds, falling back to 1.

    Only the delay-seconds form is honoured; an HTTP-date or garbage value
    waits the default second.
    """
    value = response.headers.get("Retry-After", "")
    try:
        return max(int(value), 0)
    except ValueError:
        return 1
