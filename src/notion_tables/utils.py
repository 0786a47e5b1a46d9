"""
Utilities
=========

This module provides utility functions that are used across the package
but do not belong to a more specific domain like decoding or pagination.

It contains the `retry` decorator used by the transport to ride out
transient network errors with exponential backoff and jitter, and a helper
for normalising Notion object identifiers.
"""
import logging
import random
import time
from functools import wraps
from typing import Any, Callable, Type, TypeVar

log = logging.getLogger(__name__)
T = TypeVar("T")


def retry(
    retryable_exceptions: tuple[Type[Exception], ...],
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    A decorator that retries a method call on specific exceptions.

    The decorated method's instance must expose a ``settings`` attribute with
    ``MAX_RETRIES`` and ``MAX_RETRY_BACKOFF_SECONDS``.

    Args:
        retryable_exceptions: A tuple of exception types that should trigger a retry.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(self, *args, **kwargs) -> T:
            settings = self.settings
            if settings.MAX_RETRIES < 1:
                raise ValueError("MAX_RETRIES must be >= 1")
            for attempt in range(1, settings.MAX_RETRIES + 1):
                try:
                    return func(self, *args, **kwargs)
                except retryable_exceptions as e:
                    if attempt == settings.MAX_RETRIES:
                        log.exception(
                            "%s failed after %d attempts",
                            func.__name__,
                            attempt,
                        )
                        raise
                    log.warning(
                        "%s failed (%s) - retry %d/%d",
                        func.__name__,
                        e,
                        attempt,
                        settings.MAX_RETRIES,
                    )
                    _sleep_backoff(attempt, settings)
            # Unreachable while MAX_RETRIES >= 1
            raise RuntimeError("Retry loop exited unexpectedly.")

        return wrapper

    return decorator


def _sleep_backoff(attempt: int, settings: Any) -> None:
    """Sleep for a short duration with exponential backoff and jitter."""
    delay = min(
        (2**attempt) * random.uniform(0.8, 1.2),
        float(settings.MAX_RETRY_BACKOFF_SECONDS),
    )
    log.info(
        "Sleeping %.1f s before retry %d/%d",
        delay,
        attempt,
        settings.MAX_RETRIES,
    )
    time.sleep(delay)


def normalize_id(object_id: str) -> str:
    """
    Return a Notion object id without dashes or surrounding whitespace.

    Notion accepts both the dashed UUID form and the 32-character form that
    appears in share URLs; the API routes are built from the compact one.
    """
    return object_id.strip().replace("-", "")
