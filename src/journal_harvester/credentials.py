# SPDX-License-Identifier: MIT
"""API key rotation for the proxy fetch service."""

from collections.abc import Iterable

from .logging_config import get_detail_logger


detail_logger = get_detail_logger()


def mask_key(key: str) -> str:
    """Return a log-safe form of an API key."""
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}...{key[-4:]}"


def parse_keys(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated key string (or a list) into clean keys."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [part.strip() for part in parts if part and part.strip()]


class KeyRotator:
    """Cycles through a pool of API keys.

    The rotator counts consecutive rotations since the last successful
    request. Once that count reaches the pool size every key has been
    rejected in a row, and :meth:`rotate` reports it by returning ``True``.
    """

    def __init__(self, keys: Iterable[str]):
        self._keys = parse_keys(keys)
        if not self._keys:
            raise ValueError("At least one API key is required")
        self._index = 0
        self._consecutive_rotations = 0

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> str:
        """Return the active key."""
        return self._keys[self._index]

    def rotate(self) -> bool:
        """Advance to the next key.

        Returns:
            True if this rotation completed a full cycle of rejected keys
        """
        self._index = (self._index + 1) % len(self._keys)
        self._consecutive_rotations += 1
        detail_logger.debug(
            f"Switched to API key {mask_key(self.current())} "
            f"({self._index + 1}/{len(self._keys)})"
        )
        return self.cycled_fully

    @property
    def cycled_fully(self) -> bool:
        return self._consecutive_rotations >= len(self._keys)

    def mark_success(self) -> None:
        """Reset the rejection streak after a key worked."""
        self._consecutive_rotations = 0
