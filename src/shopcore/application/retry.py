"""Bounded retry for units of work that failed to commit.

Only ``TransactionFailureError`` is retried: every other domain error is
a business answer and is raised straight away. Apply it to the
``handle`` method of a handler whose whole body runs in one unit of
work, so each attempt starts from a fresh read of the store.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import structlog

from shopcore.domain.exceptions import TransactionFailureError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF = 0.05


def retry_on_transaction_failure(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff: float = DEFAULT_BACKOFF,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def deco(fn: Callable[P, R]) -> Callable[P, R]:
        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempt = 0
            while True:
                attempt += 1
                try:
                    return fn(*args, **kwargs)
                except TransactionFailureError as exc:
                    if attempt >= max_attempts:
                        raise
                    logger.warning(
                        "transaction_retry",
                        operation=fn.__qualname__,
                        attempt=attempt,
                        error=str(exc),
                    )
                    time.sleep(backoff * attempt)
        return wrapper
    return deco
