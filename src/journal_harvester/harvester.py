# SPDX-License-Identifier: MIT
"""Crawl driver: catalog pages -> journals -> assembled records -> store."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from .assembler import RecordAssembler, extract_journal_title
from .catalog import CatalogClient
from .exceptions import CatalogError, HarvesterError
from .logging_config import get_detail_logger, get_status_logger
from .models import CatalogItem, HarvestSummary
from .store import JournalStore


detail_logger = get_detail_logger()
status_logger = get_status_logger()


class JournalHarvester:
    """Processes catalog pages one journal at a time, in listing order.

    Failures are contained per journal and per page: a journal that cannot
    be assembled or stored is logged and skipped, and a catalog page that
    cannot be retrieved is logged and the crawl moves on.
    """

    def __init__(
        self,
        assembler: RecordAssembler,
        store: JournalStore,
        catalog: CatalogClient | None = None,
        page_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.assembler = assembler
        self.store = store
        self.catalog = catalog
        self.page_delay = page_delay
        self._sleep = sleep

    async def process_journal(self, shop_url: str) -> int:
        """Assemble and store one journal.

        Returns:
            Row id of the stored (or already present) journal

        Raises:
            MissingTitleError: If the URL carries no journal title
            StoreError: If the record cannot be stored
        """
        record = await self.assembler.assemble(shop_url)
        row_id = self.store.upsert_if_absent(record)
        status_logger.info(
            f"Successfully processed journal: {record.journal_title} (ID: {row_id})"
        )
        return row_id

    async def _process_item(self, item: CatalogItem, summary: HarvestSummary) -> None:
        if not item.shop_url:
            detail_logger.debug(f"Catalog item without product URL: {item.title}")
            return

        journal_title = extract_journal_title(item.shop_url)
        try:
            if journal_title and self.store.get_id_by_title(journal_title) is not None:
                status_logger.info(
                    f"Journal title '{journal_title}' already exists. Skipping processing."
                )
                summary.journals_skipped += 1
                return

            record = await self.assembler.assemble(item.shop_url)
            row_id, created = self.store.upsert_if_absent_with_status(record)
        except (HarvesterError, ValueError) as e:
            status_logger.error(f"Error processing journal from {item.shop_url}: {e}")
            summary.journals_failed += 1
            return

        if created:
            summary.journals_inserted += 1
            summary.inserted_ids.append(row_id)
            status_logger.info(
                f"Processed journal: {item.title or 'N/A'} (ID: {row_id})"
            )
        else:
            summary.journals_skipped += 1

    async def harvest_page(self, page: int, summary: HarvestSummary) -> None:
        """Process every journal listed on one catalog page."""
        if self.catalog is None:
            raise HarvesterError("No catalog client configured")

        items = await self.catalog.search_page(page)
        for item in items:
            await self._process_item(item, summary)
            if self.assembler.fetcher.credentials_exhausted:
                return

    async def harvest(self, start_page: int, end_page: int) -> HarvestSummary:
        """Crawl catalog pages ``start_page`` through ``end_page`` inclusive.

        The crawl stops early only when every API key has been rejected.

        Returns:
            Summary with the number of newly inserted journals
        """
        summary = HarvestSummary()

        for page in range(start_page, end_page + 1):
            try:
                await self.harvest_page(page, summary)
                summary.pages_processed += 1
                status_logger.info(
                    f"Processed page {page} - Total journals added so far: "
                    f"{summary.journals_inserted}"
                )
            except CatalogError as e:
                summary.pages_failed += 1
                status_logger.error(f"Error processing page {page}: {e}")

            if self.assembler.fetcher.credentials_exhausted:
                summary.stopped_early = True
                status_logger.error(
                    "All API keys were rejected; stopping the crawl early"
                )
                break

            if page < end_page and self.page_delay > 0:
                await self._sleep(self.page_delay)

        status_logger.info(
            f"Crawl finished. Total journals processed: {summary.journals_inserted} "
            f"(skipped {summary.journals_skipped}, failed {summary.journals_failed}, "
            f"failed pages {summary.pages_failed})"
        )
        return summary
