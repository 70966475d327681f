# SPDX-License-Identifier: MIT
"""Two loggers for a crawl run.

``journal_harvester.detail`` records every fetch attempt, extraction miss and
store statement in the run's log file. ``journal_harvester.status`` reports
page and journal progress on stderr and copies it into the same file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

DETAIL_LOGGER_NAME = "journal_harvester.detail"
STATUS_LOGGER_NAME = "journal_harvester.status"

LOG_DIR_NAME = ".journal-harvester"
LOG_FILE_NAME = "journal-harvester.log"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(asctime)s %(message)s"


class FlushingStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler that flushes after every record.

    Long crawls sleep between pages; progress lines must not sit in a buffer.
    """

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        if self.stream and not self.stream.closed:
            self.flush()


def _reset(logger: logging.Logger, level: int) -> logging.Logger:
    for handler in logger.handlers[:]:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False
    return logger


def setup_logging(
    log_dir: Path | None = None, console: TextIO | None = None
) -> tuple[logging.Logger, logging.Logger]:
    """Attach handlers for one run; the log file is rewritten each time.

    Args:
        log_dir: Directory for the log file, ``./.journal-harvester`` by default
        console: Stream for status output, stderr by default

    Returns:
        Tuple of (detail_logger, status_logger)
    """
    log_dir = log_dir if log_dir is not None else Path.cwd() / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    console_handler = FlushingStreamHandler(console or sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))

    detail_logger = _reset(logging.getLogger(DETAIL_LOGGER_NAME), logging.DEBUG)
    detail_logger.addHandler(file_handler)

    status_logger = _reset(logging.getLogger(STATUS_LOGGER_NAME), logging.INFO)
    status_logger.addHandler(console_handler)
    status_logger.addHandler(file_handler)

    detail_logger.info(f"Logging initialized. Log file: {log_file}")
    return detail_logger, status_logger


def get_detail_logger() -> logging.Logger:
    """Logger for fetch timings, extraction misses and store activity."""
    return logging.getLogger(DETAIL_LOGGER_NAME)


def get_status_logger() -> logging.Logger:
    """Logger for page progress, skipped journals and the crawl summary."""
    return logging.getLogger(STATUS_LOGGER_NAME)
