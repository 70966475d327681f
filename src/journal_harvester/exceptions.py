# SPDX-License-Identifier: MIT
"""Standard exceptions for the journal harvester."""


class HarvesterError(Exception):
    """Base class for all harvester exceptions."""


class ConfigurationError(HarvesterError):
    """Raised when the configuration cannot drive a crawl (e.g. no API keys)."""


class FetchError(HarvesterError):
    """Base class for retrieval failures.

    The fetcher itself degrades HTTP and network faults to a failed result;
    these exceptions describe conditions that end a fetch early.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class CredentialExhaustedError(FetchError):
    """Raised when every configured API key was rejected in a row."""

    def __init__(self, key_count: int, url: str | None = None) -> None:
        self.key_count = key_count
        super().__init__(
            f"All {key_count} API key(s) rejected (401/403) without a success",
            url,
        )


class ExtractionError(HarvesterError):
    """Raised when a page or URL cannot yield a usable record."""


class MissingTitleError(ExtractionError):
    """Raised when no journal title can be derived from a source URL."""

    def __init__(self, source_url: str) -> None:
        self.source_url = source_url
        super().__init__(f"Could not extract journal title from URL: {source_url}")


class StoreError(HarvesterError):
    """Raised when a database lookup or insert fails."""


class StoreInitializationError(StoreError):
    """Raised when the database cannot be opened or its schema created."""


class CatalogError(HarvesterError):
    """Raised when a catalog search page cannot be retrieved or decoded."""

    def __init__(self, message: str, page: int | None = None) -> None:
        self.page = page
        msg = f"{message} (page {page})" if page is not None else message
        super().__init__(msg)
