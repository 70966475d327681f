# SPDX-License-Identifier: MIT
"""Configuration management for the journal harvester."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    CATALOG_SEARCH_URL,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_BACKOFF_INITIAL_DELAY,
    DEFAULT_CATALOG_INITIAL_DELAY,
    DEFAULT_CATALOG_RETRIES,
    DEFAULT_CATALOG_SORT,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_DB_PATH,
    DEFAULT_FETCH_RETRIES,
    DEFAULT_KEEP_HEADERS,
    DEFAULT_MAX_COST,
    DEFAULT_PAGE_DELAY,
    DEFAULT_RENDER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_404,
    SCRAPER_API_KEYS_ENV,
    SCRAPER_API_URL,
)
from .credentials import parse_keys


ENV_PREFIX = "JOURNAL_HARVESTER_"


class ScraperApiConfig(BaseModel):
    """Configuration for the proxy fetch service."""

    api_keys: list[str] = Field(
        default_factory=list, description="API keys, rotated on 401/403"
    )
    base_url: str = Field(SCRAPER_API_URL, description="Proxy endpoint")
    render: bool = Field(DEFAULT_RENDER, description="Render JavaScript")
    retry_404: bool = Field(DEFAULT_RETRY_404, description="Proxy-side 404 retry")
    country_code: str = Field(DEFAULT_COUNTRY_CODE, description="Proxy geolocation")
    max_cost: int = Field(DEFAULT_MAX_COST, ge=1, description="Credit cap per request")
    keep_headers: bool = Field(DEFAULT_KEEP_HEADERS, description="Forward headers")

    @field_validator("api_keys", mode="before")
    @classmethod
    def split_keys(cls, v: Any) -> list[str]:
        """Accept a comma-separated string as well as a list."""
        return parse_keys(v)


class FetchConfig(BaseModel):
    """Retry policy for page fetches."""

    retries: int = Field(DEFAULT_FETCH_RETRIES, ge=1, description="Attempts per page")
    initial_delay: float = Field(
        DEFAULT_BACKOFF_INITIAL_DELAY, ge=0.0, description="First backoff delay (s)"
    )
    backoff_base: float = Field(
        DEFAULT_BACKOFF_BASE, ge=1.0, description="Backoff multiplier"
    )
    timeout: float = Field(
        DEFAULT_REQUEST_TIMEOUT, gt=0.0, description="Per-request timeout (s)"
    )


class CatalogConfig(BaseModel):
    """Configuration for the catalog crawl."""

    search_url: str = Field(CATALOG_SEARCH_URL, description="Catalog search endpoint")
    query: str = Field("", description="Free-text catalog query")
    sort: str = Field(DEFAULT_CATALOG_SORT, description="Catalog sort order")
    start_page: int = Field(1, ge=1, description="First page to crawl")
    end_page: int = Field(1, ge=1, description="Last page to crawl (inclusive)")
    page_delay: float = Field(
        DEFAULT_PAGE_DELAY, ge=0.0, description="Pause between pages (s)"
    )
    retries: int = Field(
        DEFAULT_CATALOG_RETRIES, ge=0, description="Retries per catalog page"
    )
    initial_delay: float = Field(
        DEFAULT_CATALOG_INITIAL_DELAY, ge=0.0, description="First retry delay (s)"
    )

    @model_validator(mode="after")
    def check_page_range(self) -> "CatalogConfig":
        if self.end_page < self.start_page:
            raise ValueError(
                f"end_page ({self.end_page}) is before start_page ({self.start_page})"
            )
        return self


class StorageConfig(BaseModel):
    """Configuration for the journal database."""

    db_path: str = Field(DEFAULT_DB_PATH, description="SQLite database file")


class AppConfig(BaseModel):
    """Main application configuration."""

    scraper_api: ScraperApiConfig = ScraperApiConfig()
    fetch: FetchConfig = FetchConfig()
    catalog: CatalogConfig = CatalogConfig()
    storage: StorageConfig = StorageConfig()


class ConfigManager:
    """Manages application configuration from files and environment."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._find_config_file()
        self._config: AppConfig | None = None

    def _find_config_file(self) -> Path | None:
        """Find configuration file in standard locations."""
        search_paths = [
            Path.cwd() / ".journal-harvester" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "journal-harvester" / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return path

        return None

    def load_config(self) -> AppConfig:
        """Load configuration from file or create default."""
        if self._config is not None:
            return self._config

        default_config = self.get_default_config()

        if self.config_path and self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            config_data = self._deep_merge_configs(default_config, file_config)
        else:
            config_data = default_config

        config_data = self._apply_env_overrides(config_data)

        self._config = AppConfig(**config_data)
        return self._config

    def _deep_merge_configs(
        self, default_config: dict[str, Any], override_config: dict[str, Any]
    ) -> dict[str, Any]:
        """Merge override config into default config, one section at a time.

        Example:
            Default: {"fetch": {"retries": 3, "timeout": 70.0}}
            Override: {"fetch": {"retries": 5}}
            Result: {"fetch": {"retries": 5, "timeout": 70.0}}
        """
        result = copy.deepcopy(default_config)

        for key, value in override_config.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key].update(value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config.

        Recognized variables:
            SCRAPERAPI_KEYS: comma-separated API keys
            JOURNAL_HARVESTER_DB_PATH: database file
            JOURNAL_HARVESTER_FETCH_RETRIES: attempts per page
        """
        keys = os.environ.get(SCRAPER_API_KEYS_ENV)
        if keys:
            config_data.setdefault("scraper_api", {})["api_keys"] = keys

        db_path = os.environ.get(f"{ENV_PREFIX}DB_PATH")
        if db_path:
            config_data.setdefault("storage", {})["db_path"] = db_path

        retries = os.environ.get(f"{ENV_PREFIX}FETCH_RETRIES")
        if retries:
            config_data.setdefault("fetch", {})["retries"] = int(retries)

        return config_data

    def get_complete_config_dict(self, mask_keys: bool = True) -> dict[str, Any]:
        """Get the complete configuration as a dictionary for display."""
        config_dict = self.load_config().model_dump()
        if mask_keys:
            config_dict["scraper_api"]["api_keys"] = [
                "***" for _ in config_dict["scraper_api"]["api_keys"]
            ]
        return config_dict

    def show_config(self) -> str:
        """Show the complete configuration in YAML format, API keys masked."""
        config_dict = self.get_complete_config_dict()
        return yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    def get_default_config(self) -> dict[str, Any]:
        """Get default configuration as plain data."""
        return AppConfig().model_dump()

    def create_default_config(self, output_path: Path) -> None:
        """Write the default configuration to a YAML file."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.get_default_config(), f, default_flow_style=False, sort_keys=False
            )


# Global config manager instance with factory pattern
_config_manager_instance: ConfigManager | None = None


def get_config_manager(config_path: Path | None = None) -> ConfigManager:
    """Get or create the global config manager instance.

    Args:
        config_path: Optional path to config file (only used on first call)

    Returns:
        The global ConfigManager instance
    """
    global _config_manager_instance
    if _config_manager_instance is None:
        _config_manager_instance = ConfigManager(config_path)
    return _config_manager_instance


def set_config_manager(manager: ConfigManager) -> None:
    """Set the config manager instance (primarily for testing)."""
    global _config_manager_instance
    _config_manager_instance = manager


def reset_config_manager() -> None:
    """Reset the config manager instance (primarily for testing)."""
    global _config_manager_instance
    _config_manager_instance = None
