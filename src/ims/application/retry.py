"""Bounded retry around optimistic-concurrency conflicts.

Each attempt must open its own unit of work so it re-reads the current
state.  Only ConcurrentModificationError is retried; business rejections
such as InsufficientStockError propagate on the first attempt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from ims.domain.exceptions import ConcurrentConflictError, ConcurrentModificationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try, and how long to back off in between (seconds)."""

    attempts: int = 3
    backoff: float = 0.01
    max_backoff: float = 0.1

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("Retry attempts must be at least 1")
        if self.backoff < 0 or self.max_backoff < 0:
            raise ValueError("Retry backoff cannot be negative")


def run_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    description: str,
) -> T:
    """Run *operation*, retrying on write conflicts.

    Raises ConcurrentConflictError once ``policy.attempts`` attempts have
    all lost their conditional write.
    """
    delay = policy.backoff
    attempt = 1
    while True:
        try:
            return operation()
        except ConcurrentModificationError as exc:
            if attempt >= policy.attempts:
                raise ConcurrentConflictError(
                    f"{description} failed due to concurrent modification. Please retry."
                ) from exc
            logger.debug(
                "%s: write conflict on attempt %d/%d (%s)",
                description, attempt, policy.attempts, exc,
            )
            if delay:
                time.sleep(delay)
            delay = min(policy.max_backoff, delay * 2)
            attempt += 1
