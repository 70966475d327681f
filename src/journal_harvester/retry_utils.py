# SPDX-License-Identifier: MIT
"""Retry utilities for plain (non-proxied) API calls."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from .logging_config import get_detail_logger


detail_logger = get_detail_logger()

T = TypeVar("T")


def backoff_delays(
    max_retries: int,
    initial_delay: float,
    exponential_base: float = 2.0,
    max_delay: float = 60.0,
) -> list[float]:
    """Delays slept between attempts, e.g. ``[1.0, 2.0, 4.0]`` for three retries."""
    return [
        min(initial_delay * exponential_base**attempt, max_delay)
        for attempt in range(max_retries)
    ]


def async_retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for retrying async functions with exponential backoff.

    The wrapped call is attempted ``max_retries + 1`` times in total; the
    last exception is re-raised once the budget is spent.

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff calculation
        exceptions: Tuple of exception types to catch and retry

    Returns:
        Decorated async function

    Example:
        >>> @async_retry_with_backoff(max_retries=1, exceptions=(CatalogError,))
        ... async def search_page(page):
        ...     ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            delays = backoff_delays(
                max_retries, initial_delay, exponential_base, max_delay
            )
            attempt = 0

            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_retries:
                        detail_logger.debug(
                            f"{func.__name__} failed after {max_retries} retries: {e}"
                        )
                        raise

                    delay = delays[attempt]
                    detail_logger.debug(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries}): {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
