# SPDX-License-Identifier: MIT
"""SQLite persistence for harvested journals."""

from .journal_store import JournalStore
from .schema import JOURNAL_COLUMNS


__all__ = ["JOURNAL_COLUMNS", "JournalStore"]
