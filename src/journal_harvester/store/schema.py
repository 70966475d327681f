# SPDX-License-Identifier: MIT
"""Database schema initialization for the journal store."""

import sqlite3

from ..constants import JOURNAL_TABLE


# Insertable columns, in table order. ``id`` and ``created_at`` are
# filled in by SQLite.
JOURNAL_COLUMNS: tuple[str, ...] = (
    "journal_title",
    "aims_and_scope",
    "issn",
    "subject_areas",
    "impact_factor",
    "cite_score",
    "apc",
    "time_to_first_decision",
    "review_time",
    "submission_to_acceptance",
    "acceptance_to_publication",
    "acceptance_rate",
    "abstracting_indexing",
    "shop_url",
    "sciencedirect_url",
)

SCHEMA_SQL = f"""
    -- One row per unique journal title, never updated after insert
    CREATE TABLE IF NOT EXISTS {JOURNAL_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        journal_title TEXT NOT NULL UNIQUE,
        aims_and_scope TEXT,
        issn TEXT,
        subject_areas TEXT,
        impact_factor REAL,
        cite_score REAL,
        apc REAL,
        time_to_first_decision INTEGER,
        review_time INTEGER,
        submission_to_acceptance INTEGER,
        acceptance_to_publication INTEGER,
        acceptance_rate REAL,
        abstracting_indexing TEXT,
        shop_url TEXT,
        sciencedirect_url TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the journal table on an open connection if it does not exist."""
    conn.executescript(SCHEMA_SQL)
