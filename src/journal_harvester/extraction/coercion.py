# SPDX-License-Identifier: MIT
"""Value coercion helpers for scraped text."""

import re

from ..constants import ABSTRACTING_INDEXING_SEPARATOR


# Leading decimal number, optionally signed, with an optional exponent.
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def clean_text(text: str | None) -> str | None:
    """Trim surrounding whitespace; None stays None."""
    if text is None:
        return None
    return text.strip()


def parse_leading_float(text: str | None) -> float | None:
    """Parse the numeric prefix of a string.

    Mirrors how browsers read numbers out of page text: surrounding
    whitespace is ignored and trailing units are dropped, so ``" 38% "``
    reads as ``38.0``. Text without a numeric prefix yields None.

    Args:
        text: Raw element text

    Returns:
        Parsed number or None
    """
    if text is None:
        return None
    match = _LEADING_FLOAT.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def parse_price(text: str | None) -> float | None:
    """Parse a price such as ``"$1,234.50"`` into ``1234.5``.

    The dollar sign and thousands separators are removed first; anything
    that is not a number afterwards (e.g. ``"N/A"``) yields None.
    """
    if text is None:
        return None
    return parse_leading_float(text.replace("$", "").replace(",", ""))


def join_items(items: list[str]) -> str:
    """Join list item texts, dropping blank entries."""
    cleaned = [item.strip() for item in items]
    return ABSTRACTING_INDEXING_SEPARATOR.join(item for item in cleaned if item)
