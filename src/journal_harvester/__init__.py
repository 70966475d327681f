# SPDX-License-Identifier: MIT
"""Journal Harvester - Resilient scraping of journal bibliometric pages."""

from importlib.metadata import PackageNotFoundError, version

from .assembler import RecordAssembler, extract_journal_title
from .credentials import KeyRotator
from .fetcher import ResilientFetcher
from .models import JournalRecord
from .store import JournalStore


__all__: list[str] = [
    "JournalRecord",
    "JournalStore",
    "KeyRotator",
    "RecordAssembler",
    "ResilientFetcher",
    "extract_journal_title",
    "__version__",
]

# Get version from installed package metadata
__version__: str
try:
    __version__ = version("journal-harvester")
except PackageNotFoundError:
    # Package is not installed, use development fallback
    __version__ = "development"
