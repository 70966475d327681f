# SPDX-License-Identifier: MIT
"""Proxied page fetcher with key rotation and classified retries."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from .constants import (
    BACKOFF_STATUSES,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_BACKOFF_INITIAL_DELAY,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_FETCH_RETRIES,
    DEFAULT_KEEP_HEADERS,
    DEFAULT_MAX_COST,
    DEFAULT_RENDER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_404,
    ROTATE_KEY_STATUSES,
    SCRAPER_API_URL,
)
from .credentials import KeyRotator, mask_key
from .exceptions import CredentialExhaustedError
from .logging_config import get_detail_logger, get_status_logger
from .models import FetchResult


detail_logger = get_detail_logger()
status_logger = get_status_logger()


def _flag(value: bool) -> str:
    return "true" if value else "false"


class ResilientFetcher:
    """Fetches pages through the ScraperAPI proxy.

    Failure handling per attempt:
    - 401/403: the key is rejected; rotate and retry immediately. When every
      key has been rejected in a row the fetch ends with a failed result.
    - 429/500 and any other non-2xx status: wait ``initial_delay * base**attempt``
      and retry with the same key.
    - Network errors: same exponential wait.

    HTTP and network faults never raise; once the retry budget is spent a
    failed :class:`FetchResult` with an empty body is returned. Bodies are
    decoded leniently, with undecodable bytes replaced.
    """

    def __init__(
        self,
        rotator: KeyRotator,
        session: aiohttp.ClientSession | None = None,
        proxy_url: str = SCRAPER_API_URL,
        retries: int = DEFAULT_FETCH_RETRIES,
        initial_delay: float = DEFAULT_BACKOFF_INITIAL_DELAY,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        render: bool = DEFAULT_RENDER,
        retry_404: bool = DEFAULT_RETRY_404,
        country_code: str = DEFAULT_COUNTRY_CODE,
        max_cost: int = DEFAULT_MAX_COST,
        keep_headers: bool = DEFAULT_KEEP_HEADERS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the fetcher.

        Args:
            rotator: Key pool shared by all fetches of the run
            session: Existing aiohttp session; one is created on entry if None
            proxy_url: Proxy fetch endpoint
            retries: Default attempt budget per fetch
            initial_delay: First backoff delay in seconds
            backoff_base: Multiplier applied per attempt
            timeout: Total aiohttp timeout per request in seconds
            render: Ask the proxy to render JavaScript
            retry_404: Ask the proxy to retry 404s itself
            country_code: Proxy geolocation
            max_cost: Upper bound on proxy credits per request
            keep_headers: Forward our headers to the target
            sleep: Awaitable used for backoff delays
        """
        self.rotator = rotator
        self.session = session
        self._owns_session = session is None
        self.proxy_url = proxy_url
        self.retries = retries
        self.initial_delay = initial_delay
        self.backoff_base = backoff_base
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.render = render
        self.retry_404 = retry_404
        self.country_code = country_code
        self.max_cost = max_cost
        self.keep_headers = keep_headers
        self._sleep = sleep

    async def __aenter__(self) -> "ResilientFetcher":
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None

    @property
    def credentials_exhausted(self) -> bool:
        """Whether the last rejections cycled through every key."""
        return self.rotator.cycled_fully

    def build_params(self, url: str, api_key: str) -> dict[str, str]:
        """Query parameters for one proxied request."""
        return {
            "api_key": api_key,
            "url": url,
            "render": _flag(self.render),
            "retry_404": _flag(self.retry_404),
            "country_code": self.country_code,
            "max_cost": str(self.max_cost),
            "keep_headers": _flag(self.keep_headers),
        }

    def backoff_delay(self, attempt: int) -> float:
        """Delay in seconds before retrying after ``attempt`` (0-based)."""
        return float(self.initial_delay * self.backoff_base**attempt)

    async def fetch(self, url: str, retries: int | None = None) -> FetchResult:
        """Fetch a page through the proxy.

        Args:
            url: Target page URL
            retries: Attempt budget; defaults to the fetcher's setting

        Returns:
            A successful result with the page body, or the failed sentinel

        Raises:
            RuntimeError: If the fetcher was not entered and has no session
        """
        if self.session is None:
            raise RuntimeError(
                "ResilientFetcher has no session; use it with 'async with' or pass one"
            )

        budget = self.retries if retries is None else retries
        last_status: int | None = None
        started = time.perf_counter()

        for attempt in range(budget):
            is_final = attempt == budget - 1
            api_key = self.rotator.current()
            detail_logger.debug(
                f"Fetching {url} with API key {mask_key(api_key)} "
                f"(attempt {attempt + 1}/{budget})"
            )

            attempt_start = time.perf_counter()
            try:
                async with self.session.get(
                    self.proxy_url, params=self.build_params(url, api_key)
                ) as response:
                    last_status = response.status
                    if 200 <= response.status < 300:
                        text = await response.text(errors="replace")
                        elapsed = (time.perf_counter() - attempt_start) * 1000
                        detail_logger.debug(
                            f"Fetched {url} successfully in {elapsed:.2f} ms"
                        )
                        self.rotator.mark_success()
                        return FetchResult(
                            url=url,
                            ok=True,
                            status=response.status,
                            text=text,
                            attempts=attempt + 1,
                            elapsed_ms=(time.perf_counter() - started) * 1000,
                        )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                elapsed = (time.perf_counter() - attempt_start) * 1000
                detail_logger.debug(f"Failed to fetch {url} in {elapsed:.2f} ms: {e}")
                last_status = None
                if not is_final:
                    delay = self.backoff_delay(attempt)
                    status_logger.warning(
                        f"Network error fetching {url}, retrying in {delay:.1f}s"
                    )
                    await self._sleep(delay)
                continue

            elapsed = (time.perf_counter() - attempt_start) * 1000
            detail_logger.debug(
                f"Failed to fetch {url} in {elapsed:.2f} ms (HTTP {last_status})"
            )

            if last_status in ROTATE_KEY_STATUSES:
                reason = "Unauthorized request" if last_status == 401 else "Quota exceeded"
                status_logger.warning(f"{reason} (HTTP {last_status}), switching API key")
                if self.rotator.rotate():
                    error = CredentialExhaustedError(len(self.rotator), url)
                    status_logger.error(f"{error} while fetching {url}")
                    return FetchResult.failed(
                        url,
                        status=last_status,
                        attempts=attempt + 1,
                        elapsed_ms=(time.perf_counter() - started) * 1000,
                        error=str(error),
                    )
                continue

            if is_final:
                break

            delay = self.backoff_delay(attempt)
            if last_status in BACKOFF_STATUSES:
                label = "Too many requests" if last_status == 429 else "Server error"
            else:
                label = "HTTP error"
            status_logger.warning(
                f"{label} (HTTP {last_status}) for {url}, retrying in {delay:.1f}s"
            )
            await self._sleep(delay)

        status_logger.error(f"Giving up on {url} after {budget} attempt(s)")
        return FetchResult.failed(
            url,
            status=last_status,
            attempts=budget,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            error=f"Retries exhausted (last status: {last_status})",
        )
