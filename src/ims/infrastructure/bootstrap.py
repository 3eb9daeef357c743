"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from datetime import timedelta

from ims.application.retry import RetryPolicy
from ims.application.settings import Settings
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.infrastructure.config import Config
from ims.infrastructure.persistence.json_database import JsonDatabase
from ims.infrastructure.persistence.unit_of_work import InMemoryUnitOfWork


def settings(config: Config | None = None) -> Settings:
    config = config or Config.from_env()
    return Settings(
        hold=timedelta(minutes=config.hold_minutes),
        retry=RetryPolicy(
            attempts=config.retry_attempts,
            backoff=config.retry_backoff_ms / 1000,
        ),
    )


def unit_of_work_factory(config: Config | None = None) -> UnitOfWorkFactory:
    config = config or Config.from_env()
    db = JsonDatabase(config.data_dir / "store.json")
    return lambda: InMemoryUnitOfWork(db)
