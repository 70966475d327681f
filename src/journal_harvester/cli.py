# SPDX-License-Identifier: MIT
"""Command-line interface for the journal harvester."""

import asyncio
import functools
import sys
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from . import __version__
from .assembler import RecordAssembler
from .catalog import CatalogClient
from .config import (
    AppConfig,
    ConfigManager,
    ScraperApiConfig,
    get_config_manager,
    set_config_manager,
)
from .credentials import KeyRotator
from .exceptions import ConfigurationError, HarvesterError
from .fetcher import ResilientFetcher
from .harvester import JournalHarvester
from .logging_config import get_status_logger, setup_logging
from .models import HarvestSummary
from .store import JournalStore


F = TypeVar("F", bound=Callable[..., Any])


def handle_cli_errors(func: F) -> F:
    """Decorator to handle common CLI error patterns.

    Setup failures (configuration, database) are logged and end the process
    with exit status 1; per-journal and per-page errors never reach here.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        status_logger = get_status_logger()
        verbose = kwargs.get("verbose", False)

        try:
            return func(*args, **kwargs)
        except (HarvesterError, ValueError, OSError) as e:
            if verbose:
                status_logger.error(f"Error in {func.__name__}: {e}")
                traceback.print_exc()
            else:
                status_logger.error(f"Error: {e}")
            sys.exit(1)

    return wrapper  # type: ignore


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit if requested."""
    if value:
        setup_logging()
        status_logger = get_status_logger()
        status_logger.info(f"Journal-Harvester version {__version__}")
        ctx.exit(0)


def _resolve_config(
    api_keys: str | None = None,
    db_path: str | None = None,
) -> AppConfig:
    """Load configuration and apply command-line overrides."""
    config = get_config_manager().load_config()
    updates: dict[str, Any] = {}
    if api_keys:
        updates["scraper_api"] = ScraperApiConfig.model_validate(
            {**config.scraper_api.model_dump(), "api_keys": api_keys}
        )
    if db_path:
        updates["storage"] = config.storage.model_copy(update={"db_path": db_path})
    return config.model_copy(update=updates) if updates else config


def build_fetcher(config: AppConfig) -> ResilientFetcher:
    """Create the page fetcher described by the configuration.

    Raises:
        ConfigurationError: If no API keys are configured
    """
    if not config.scraper_api.api_keys:
        raise ConfigurationError(
            "No API keys configured (set SCRAPERAPI_KEYS or pass --api-keys)"
        )
    api = config.scraper_api
    return ResilientFetcher(
        KeyRotator(api.api_keys),
        proxy_url=api.base_url,
        retries=config.fetch.retries,
        initial_delay=config.fetch.initial_delay,
        backoff_base=config.fetch.backoff_base,
        timeout=config.fetch.timeout,
        render=api.render,
        retry_404=api.retry_404,
        country_code=api.country_code,
        max_cost=api.max_cost,
        keep_headers=api.keep_headers,
    )


def open_store(config: AppConfig) -> JournalStore:
    """Open the journal store; failures here are fatal for the run."""
    store = JournalStore(Path(config.storage.db_path))
    store.open()
    return store


async def _run_harvest(
    config: AppConfig, start_page: int, end_page: int
) -> HarvestSummary:
    fetcher = build_fetcher(config)
    with open_store(config) as store:
        async with fetcher, CatalogClient(
            search_url=config.catalog.search_url,
            query=config.catalog.query,
            sort=config.catalog.sort,
            retries=config.catalog.retries,
            initial_delay=config.catalog.initial_delay,
        ) as catalog:
            harvester = JournalHarvester(
                RecordAssembler(fetcher),
                store,
                catalog,
                page_delay=config.catalog.page_delay,
            )
            return await harvester.harvest(start_page, end_page)


async def _run_single(config: AppConfig, shop_url: str) -> int:
    fetcher = build_fetcher(config)
    with open_store(config) as store:
        async with fetcher:
            harvester = JournalHarvester(RecordAssembler(fetcher), store)
            return await harvester.process_journal(shop_url)


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version information and exit",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML configuration file",
)
def main(config_path: Path | None) -> None:
    """Journal-Harvester - Collect journal metrics from publisher pages."""
    detail_logger, status_logger = setup_logging()
    if config_path is not None:
        set_config_manager(ConfigManager(config_path))
    detail_logger.debug("CLI initialized")


@main.command()
@click.option("--start-page", type=int, help="First catalog page to crawl")
@click.option("--end-page", type=int, help="Last catalog page to crawl (inclusive)")
@click.option("--db-path", help="SQLite database file")
@click.option("--api-keys", help="Comma-separated proxy API keys")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@handle_cli_errors
def harvest(
    start_page: int | None,
    end_page: int | None,
    db_path: str | None,
    api_keys: str | None,
    verbose: bool,
) -> None:
    """Crawl catalog pages and store every new journal."""
    status_logger = get_status_logger()
    config = _resolve_config(api_keys, db_path)

    first = start_page if start_page is not None else config.catalog.start_page
    last = end_page if end_page is not None else config.catalog.end_page
    if last < first:
        raise ConfigurationError(f"--end-page ({last}) is before --start-page ({first})")

    status_logger.info(f"Crawling catalog pages {first}-{last}")
    summary = asyncio.run(_run_harvest(config, first, last))

    status_logger.info(
        "All data fetched and stored in database. "
        f"Total journals processed: {summary.journals_inserted}"
    )
    click.echo(summary.journals_inserted)


@main.command()
@click.argument("shop_url")
@click.option("--db-path", help="SQLite database file")
@click.option("--api-keys", help="Comma-separated proxy API keys")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@handle_cli_errors
def journal(
    shop_url: str, db_path: str | None, api_keys: str | None, verbose: bool
) -> None:
    """Scrape and store a single journal.

    SHOP_URL: Catalog product URL containing journals/<title>
    """
    config = _resolve_config(api_keys, db_path)
    row_id = asyncio.run(_run_single(config, shop_url))
    click.echo(row_id)


@main.command()
@click.option("--db-path", help="SQLite database file")
@handle_cli_errors
def count(db_path: str | None) -> None:
    """Show how many journals are stored."""
    config = _resolve_config(db_path=db_path)
    with open_store(config) as store:
        click.echo(store.count())


@main.command()
@click.option(
    "--write",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the default configuration to this file instead",
)
@handle_cli_errors
def config(output_path: Path | None) -> None:
    """Show the complete current configuration."""
    manager = get_config_manager()
    if output_path is not None:
        manager.create_default_config(output_path)
        get_status_logger().info(f"Wrote default configuration to {output_path}")
        return
    click.echo(manager.show_config())


if __name__ == "__main__":
    main()
