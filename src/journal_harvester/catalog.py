# SPDX-License-Identifier: MIT
"""Client for the publisher's paginated journal catalog search."""

import asyncio
import json
from typing import Any

import aiohttp

from .constants import (
    CATALOG_REFERER_URL,
    CATALOG_SEARCH_URL,
    CATALOG_USER_AGENT,
    DEFAULT_CATALOG_INITIAL_DELAY,
    DEFAULT_CATALOG_RETRIES,
    DEFAULT_CATALOG_SORT,
)
from .exceptions import CatalogError
from .logging_config import get_detail_logger
from .models import CatalogFilters, CatalogItem, CatalogSearchRequest
from .retry_utils import async_retry_with_backoff


detail_logger = get_detail_logger()


def parse_search_response(data: Any) -> list[CatalogItem]:
    """Extract catalog items from a search response body.

    Responses without ``searchResponse.items`` yield an empty list.
    """
    if not isinstance(data, dict):
        return []
    search_response = data.get("searchResponse") or {}
    items = search_response.get("items") or []
    return [CatalogItem.from_api(item) for item in items if isinstance(item, dict)]


class CatalogClient:
    """Posts catalog search requests page by page."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        search_url: str = CATALOG_SEARCH_URL,
        query: str = "",
        sort: str = DEFAULT_CATALOG_SORT,
        filters: CatalogFilters | None = None,
        retries: int = DEFAULT_CATALOG_RETRIES,
        initial_delay: float = DEFAULT_CATALOG_INITIAL_DELAY,
        timeout: float = 30.0,
    ):
        self.session = session
        self._owns_session = session is None
        self.search_url = search_url
        self.query = query
        self.sort = sort
        self.filters = filters or CatalogFilters()
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.search_page = async_retry_with_backoff(
            max_retries=retries,
            initial_delay=initial_delay,
            exceptions=(CatalogError,),
        )(self._search_page_once)

    async def __aenter__(self) -> "CatalogClient":
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None

    def build_request(self, page: int) -> CatalogSearchRequest:
        return CatalogSearchRequest(
            query=self.query, page=page, filters=self.filters, sort=self.sort
        )

    def build_headers(self, page: int) -> dict[str, str]:
        return {
            "User-Agent": CATALOG_USER_AGENT,
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.5",
            "Referer": f"{CATALOG_REFERER_URL}?sortBy={self.sort}&page={page}",
            "Content-Type": "text/plain;charset=UTF-8",
            "Origin": "https://www.elsevier.com",
        }

    async def _search_page_once(self, page: int) -> list[CatalogItem]:
        """Fetch one catalog page.

        Raises:
            CatalogError: On HTTP errors, network failures or undecodable bodies
            RuntimeError: If the client was not entered and has no session
        """
        if self.session is None:
            raise RuntimeError(
                "CatalogClient has no session; use it with 'async with' or pass one"
            )

        body = json.dumps(self.build_request(page).model_dump())
        detail_logger.debug(f"Requesting catalog page {page}")

        try:
            async with self.session.post(
                self.search_url, data=body, headers=self.build_headers(page)
            ) as response:
                if response.status != 200:
                    details = await response.text()
                    detail_logger.debug(
                        f"Catalog page {page} returned HTTP {response.status}: {details[:200]}"
                    )
                    raise CatalogError(f"HTTP error {response.status}", page)
                data = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise CatalogError("Timeout fetching catalog", page) from e
        except aiohttp.ClientError as e:
            raise CatalogError(f"Network error: {e}", page) from e
        except ValueError as e:
            raise CatalogError(f"Invalid JSON in catalog response: {e}", page) from e

        items = parse_search_response(data)
        detail_logger.debug(f"Catalog page {page} listed {len(items)} journals")
        return items
