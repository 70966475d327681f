# SPDX-License-Identifier: MIT
"""Assembles one journal record from its ScienceDirect sub-pages."""

import asyncio
import re

from .constants import (
    AIMS_AND_SCOPE_ENDPOINT,
    INSIGHTS_ENDPOINT,
    SCIENCEDIRECT_JOURNAL_URL,
)
from .exceptions import MissingTitleError
from .extraction import parse_aims_and_scope, parse_html, parse_insights
from .fetcher import ResilientFetcher
from .logging_config import get_detail_logger, get_status_logger
from .models import InsightsData, JournalRecord


detail_logger = get_detail_logger()
status_logger = get_status_logger()

_TITLE_PATTERN = re.compile(r"journals/([^/?#]+)")


def extract_journal_title(source_url: str) -> str | None:
    """Return the ``journals/<title>`` path segment of a catalog URL.

    Examples:
        >>> extract_journal_title("https://shop.elsevier.com/journals/foo-journal/0000-0000")
        'foo-journal'
        >>> extract_journal_title("https://example.com/books/bar") is None
        True
    """
    match = _TITLE_PATTERN.search(source_url)
    return match.group(1) if match else None


def build_sciencedirect_url(
    journal_title: str, endpoint: str = INSIGHTS_ENDPOINT
) -> str:
    """Build the URL of a ScienceDirect journal sub-page."""
    return f"{SCIENCEDIRECT_JOURNAL_URL}/{journal_title}/{endpoint}"


class RecordAssembler:
    """Fetches and merges the aims-and-scope and insights pages of a journal."""

    def __init__(self, fetcher: ResilientFetcher):
        self.fetcher = fetcher

    async def _build_insights_url(self, journal_title: str) -> str:
        return build_sciencedirect_url(journal_title, INSIGHTS_ENDPOINT)

    async def fetch_aims_and_scope(self, journal_title: str) -> str | None:
        """Fetch and parse the aims-and-scope page; None if it is unavailable."""
        url = build_sciencedirect_url(journal_title, AIMS_AND_SCOPE_ENDPOINT)
        result = await self.fetcher.fetch(url)
        if not result.ok:
            status_logger.warning(
                f"Skipping aims and scope for {journal_title} due to fetch error"
            )
            return None
        return parse_aims_and_scope(parse_html(result.text))

    async def fetch_insights(self, insights_url: str) -> InsightsData:
        """Fetch and parse the insights page.

        A failed fetch parses as an empty page, so every field takes its
        default.
        """
        result = await self.fetcher.fetch(insights_url)
        if not result.ok:
            status_logger.warning(
                f"Insights page unavailable for {insights_url}, storing empty metrics"
            )
        return parse_insights(parse_html(result.text))

    async def assemble(self, source_url: str) -> JournalRecord:
        """Build the record for a catalog product URL.

        Args:
            source_url: Publisher catalog URL containing ``journals/<title>``

        Returns:
            The merged record; sub-page failures leave their fields null

        Raises:
            MissingTitleError: If the URL carries no journal title
        """
        journal_title = extract_journal_title(source_url)
        if not journal_title:
            raise MissingTitleError(source_url)

        insights_url, aims_and_scope = await asyncio.gather(
            self._build_insights_url(journal_title),
            self.fetch_aims_and_scope(journal_title),
        )
        insights = await self.fetch_insights(insights_url)

        detail_logger.debug(f"Assembled record for {journal_title}")
        return JournalRecord(
            journal_title=journal_title,
            aims_and_scope=aims_and_scope,
            **insights.model_dump(),
            shop_url=source_url,
            sciencedirect_url=insights_url,
        )
