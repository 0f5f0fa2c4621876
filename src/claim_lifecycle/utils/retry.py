"""Retry utilities with exponential backoff for collaborator calls."""

import logging
from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Transient errors that are worth retrying
RETRYABLE_EXCEPTIONS = (ConnectionError, TimeoutError)


def call_with_retry(
    func: Callable[..., T],
    *args,
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 5.0,
    multiplier: float = 1.0,
    **kwargs,
) -> T:
    """Call ``func`` and retry it with exponential backoff on transient failures.

    Non-transient exceptions propagate on the first attempt; the last transient
    exception is re-raised once attempts are exhausted.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(func, *args, **kwargs)
