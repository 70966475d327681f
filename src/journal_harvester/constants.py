# SPDX-License-Identifier: MIT
"""Constants used throughout the journal harvester.

This module centralizes:

- **Endpoints**: the proxy fetch service, the publisher catalog search and the
  ScienceDirect journal pages
- **Proxy flags**: rendering options sent with every proxied request
- **Retry defaults**: attempt budget and backoff base for the fetcher and the
  catalog client
- **Field defaults**: placeholder values for the two fields that do not fall
  back to null
"""

# Proxy fetch service
SCRAPER_API_URL: str = "https://api.scraperapi.com/"
SCRAPER_API_KEYS_ENV: str = "SCRAPERAPI_KEYS"
DEFAULT_RENDER: bool = True
DEFAULT_RETRY_404: bool = True
DEFAULT_COUNTRY_CODE: str = "us"
DEFAULT_MAX_COST: int = 5000
DEFAULT_KEEP_HEADERS: bool = True

# ScienceDirect journal pages
SCIENCEDIRECT_JOURNAL_URL: str = "https://www.sciencedirect.com/journal"
INSIGHTS_ENDPOINT: str = "about/insights"
AIMS_AND_SCOPE_ENDPOINT: str = "about/aims-and-scope"

# Publisher catalog search
CATALOG_SEARCH_URL: str = "https://www.elsevier.com/api/search/journal-catalog-search"
CATALOG_REFERER_URL: str = "https://www.elsevier.com/products/journals"
DEFAULT_CATALOG_SORT: str = "alphabeticalAsc"
CATALOG_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:131.0) Gecko/20100101 Firefox/131.0"
)

# Fetch retry policy
DEFAULT_FETCH_RETRIES: int = 3
DEFAULT_BACKOFF_INITIAL_DELAY: float = 1.0  # seconds
DEFAULT_BACKOFF_BASE: float = 2.0
DEFAULT_REQUEST_TIMEOUT: float = 70.0  # seconds, proxy service recommendation

# Catalog retry policy
DEFAULT_CATALOG_RETRIES: int = 1
DEFAULT_CATALOG_INITIAL_DELAY: float = 1.0
DEFAULT_PAGE_DELAY: float = 1.0

# Status codes
ROTATE_KEY_STATUSES: frozenset[int] = frozenset({401, 403})
BACKOFF_STATUSES: frozenset[int] = frozenset({429, 500})

# Storage
DEFAULT_DB_PATH: str = "journal_details.db"
JOURNAL_TABLE: str = "journal_details"

# Field defaults that are not null
SUBJECT_AREAS_NOT_FOUND: str = "N/A"
ABSTRACTING_INDEXING_SEPARATOR: str = ", "
