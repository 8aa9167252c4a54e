"""Retry helpers for outbound API calls."""

import functools
import logging
import time
from typing import Callable, Optional

import httpx

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """Base class for failures worth another attempt."""

    pass


class NetworkError(RetryableError):
    """Connection, DNS, or timeout failure before a response arrived."""

    pass


class TemporaryServiceError(RetryableError):
    """The service answered with a status that may succeed on retry (429, 5xx)."""

    def __init__(self, message: str, response: Optional[httpx.Response] = None):
        super().__init__(message)
        self.response = response


class APIRateLimitError(TemporaryServiceError):
    """The service answered 429 Too Many Requests."""

    pass


def is_retryable_status(status_code: int) -> bool:
    """Check whether an HTTP status is worth retrying (429 and 5xx only)."""
    return status_code == 429 or status_code >= 500


def retry_api_call(
    max_retries: int = 2,
    base_delay: float = 1.0,
) -> Callable:
    """Retry the decorated call on NetworkError or TemporaryServiceError.

    The first attempt is not counted, so ``max_retries=2`` allows three
    attempts in total, with a fixed ``base_delay`` between them.

    Args:
        max_retries: Retries after the first attempt
        base_delay: Seconds to wait between attempts

    Returns:
        Decorator wrapping a synchronous callable
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except (NetworkError, TemporaryServiceError) as e:
                    if attempt >= max_retries:
                        logger.warning(
                            f"{func.__name__} failed after {attempt + 1} attempt(s): {e}"
                        )
                        raise
                    attempt += 1
                    logger.info(
                        f"{func.__name__} failed ({e}), retrying in {base_delay:.1f}s "
                        f"({attempt}/{max_retries})"
                    )
                    if base_delay > 0:
                        time.sleep(base_delay)

        return wrapper

    return decorator
