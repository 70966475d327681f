# SPDX-License-Identifier: MIT
"""Centralized SQLite connection configuration utilities.

All database access goes through :func:`open_configured_connection` so every
connection gets the same PRAGMA settings.
"""

import sqlite3
from pathlib import Path

from ..logging_config import get_detail_logger


detail_logger = get_detail_logger()


def configure_sqlite_connection(
    conn: sqlite3.Connection,
    enable_wal: bool = True,
) -> None:
    """Configure SQLite connection with performance optimizations and WAL mode.

    Applies consistent PRAGMA settings:
    - WAL mode so readers are not blocked while the crawl writes
    - NORMAL synchronous mode for balanced safety/performance
    - Memory temp storage

    Args:
        conn: SQLite database connection to configure
        enable_wal: Whether to enable WAL mode (default: True)
    """
    detail_logger.debug("Configuring SQLite PRAGMA settings")

    if enable_wal:
        conn.execute("PRAGMA journal_mode = WAL")
        detail_logger.debug("Set PRAGMA journal_mode = WAL")

    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute("PRAGMA temp_store = MEMORY")


def open_configured_connection(
    db_path: str | Path,
    timeout: float = 30.0,
    enable_wal: bool = True,
) -> sqlite3.Connection:
    """Open a configured connection the caller is responsible for closing.

    Used by the journal store, which keeps one connection for a whole run.

    Args:
        db_path: Path to the SQLite database file
        timeout: Lock wait timeout in seconds (default: 30.0)
        enable_wal: Whether to enable WAL mode (default: True)

    Returns:
        Configured connection with :class:`sqlite3.Row` rows
    """
    detail_logger.debug(
        f"Opening SQLite connection to {db_path} with {timeout}s timeout"
    )
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    try:
        configure_sqlite_connection(conn, enable_wal=enable_wal)
    except sqlite3.Error:
        conn.close()
        raise
    conn.row_factory = sqlite3.Row
    return conn
