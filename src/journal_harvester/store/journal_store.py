# SPDX-License-Identifier: MIT
"""Insert-once journal storage keyed by journal title."""

import sqlite3
from pathlib import Path
from typing import Any

from ..constants import JOURNAL_TABLE
from ..exceptions import StoreError, StoreInitializationError
from ..logging_config import get_detail_logger, get_status_logger
from ..models import JournalRecord
from .connection_utils import open_configured_connection
from .schema import JOURNAL_COLUMNS, create_schema


detail_logger = get_detail_logger()
status_logger = get_status_logger()


class JournalStore:
    """SQLite store holding at most one row per journal title.

    The store keeps a single connection open for the lifetime of a crawl.
    Rows are never updated: storing a title that already exists returns the
    existing row id and discards the incoming record.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "JournalStore":
        self.open()
        return self

    def __exit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        """Open the connection and create the schema if needed.

        Raises:
            StoreInitializationError: If the directory, file or schema cannot be created
        """
        if self._conn is not None:
            return

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error_msg = f"Failed to create database directory: {self.db_path.parent}"
            detail_logger.exception(f"{error_msg}: {e}")
            raise StoreInitializationError(error_msg) from e

        try:
            conn = open_configured_connection(self.db_path)
        except sqlite3.Error as e:
            error_msg = f"Failed to open database at {self.db_path}"
            detail_logger.exception(f"{error_msg}: {e}")
            raise StoreInitializationError(error_msg) from e

        try:
            create_schema(conn)
        except sqlite3.Error as e:
            conn.close()
            error_msg = f"Failed to initialize database at {self.db_path}"
            detail_logger.exception(f"{error_msg}: {e}")
            raise StoreInitializationError(error_msg) from e

        self._conn = conn
        detail_logger.debug(f"Journal store ready: {self.db_path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            detail_logger.debug(f"Closed journal store: {self.db_path}")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Journal store is not open")
        return self._conn

    def get_id_by_title(self, journal_title: str) -> int | None:
        """Return the row id stored for a title, or None."""
        try:
            row = (
                self._connection()
                .execute(
                    f"SELECT id FROM {JOURNAL_TABLE} WHERE journal_title = ?",
                    (journal_title,),
                )
                .fetchone()
            )
        except sqlite3.Error as e:
            raise StoreError(f"Lookup failed for '{journal_title}': {e}") from e
        return int(row["id"]) if row else None

    def get_by_title(self, journal_title: str) -> dict[str, Any] | None:
        """Return the full stored row for a title, or None."""
        try:
            row = (
                self._connection()
                .execute(
                    f"SELECT * FROM {JOURNAL_TABLE} WHERE journal_title = ?",
                    (journal_title,),
                )
                .fetchone()
            )
        except sqlite3.Error as e:
            raise StoreError(f"Lookup failed for '{journal_title}': {e}") from e
        return dict(row) if row else None

    def count(self) -> int:
        """Return the number of stored journals."""
        try:
            row = (
                self._connection()
                .execute(f"SELECT COUNT(*) AS total FROM {JOURNAL_TABLE}")
                .fetchone()
            )
        except sqlite3.Error as e:
            raise StoreError(f"Count failed: {e}") from e
        return int(row["total"])

    def upsert_if_absent_with_status(self, record: JournalRecord) -> tuple[int, bool]:
        """Store a record unless its title is already present.

        Args:
            record: Assembled journal record

        Returns:
            Tuple of (row id, whether this call inserted the row)

        Raises:
            StoreError: If the lookup or insert fails
        """
        existing_id = self.get_id_by_title(record.journal_title)
        if existing_id is not None:
            status_logger.info(
                f"Journal title '{record.journal_title}' already exists. Skipping insertion."
            )
            return existing_id, False

        row = record.to_row()
        values = tuple(row[column] for column in JOURNAL_COLUMNS)
        placeholders = ", ".join("?" for _ in JOURNAL_COLUMNS)
        conn = self._connection()

        try:
            with conn:
                cursor = conn.execute(
                    f"INSERT INTO {JOURNAL_TABLE} ({', '.join(JOURNAL_COLUMNS)}) "
                    f"VALUES ({placeholders})",
                    values,
                )
        except sqlite3.IntegrityError:
            # Another writer stored the same title between lookup and insert
            existing_id = self.get_id_by_title(record.journal_title)
            if existing_id is None:
                raise StoreError(
                    f"Insert rejected for '{record.journal_title}'"
                ) from None
            return existing_id, False
        except sqlite3.Error as e:
            raise StoreError(f"Insert failed for '{record.journal_title}': {e}") from e

        new_id = cursor.lastrowid
        if new_id is None:
            raise StoreError(f"Insert returned no row id for '{record.journal_title}'")
        detail_logger.debug(f"Inserted journal '{record.journal_title}' with id {new_id}")
        return int(new_id), True

    def upsert_if_absent(self, record: JournalRecord) -> int:
        """Store a record unless its title exists; return the row id either way."""
        row_id, _ = self.upsert_if_absent_with_status(record)
        return row_id
