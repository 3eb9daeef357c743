"""One place to parse and hold configuration.

No side effects beyond reading the environment.  The application layer
never sees this object; the composition root turns it into Settings.
A malformed variable is reported as a ClickException naming it, so the
CLI prints one line instead of a traceback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click

# Project root when installed in editable mode.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:

    data_dir: Path = _DEFAULT_DATA_DIR
    hold_minutes: int = 10
    retry_attempts: int = 3
    retry_backoff_ms: int = 10
    log_level: str = "WARNING"

    @staticmethod
    def from_env() -> Config:
        return Config(
            data_dir=Path(os.getenv("IMS_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            hold_minutes=_int_env("IMS_HOLD_MINUTES", 10, minimum=0),
            retry_attempts=_int_env("IMS_RETRY_ATTEMPTS", 3, minimum=1),
            retry_backoff_ms=_int_env("IMS_RETRY_BACKOFF_MS", 10, minimum=0),
            log_level=_log_level_env("IMS_LOG_LEVEL", "WARNING"),
        )


def _int_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise click.ClickException(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise click.ClickException(f"{name} must be at least {minimum}, got {value}")
    return value


def _log_level_env(name: str, default: str) -> str:
    level = os.getenv(name, default).upper()
    if level not in _LOG_LEVELS:
        raise click.ClickException(
            f"{name} must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
        )
    return level
