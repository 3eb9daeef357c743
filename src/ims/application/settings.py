"""Runtime knobs the handlers need, decoupled from where they come from.

The infrastructure layer builds a Settings from the environment; tests
build one directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from ims.application.retry import RetryPolicy
from ims.domain.model.reservation import DEFAULT_HOLD

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Settings:

    hold: timedelta = DEFAULT_HOLD
    retry: RetryPolicy = field(default_factory=RetryPolicy)
