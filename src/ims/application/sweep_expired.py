"""Application service: run the expiry sweep on demand."""

from __future__ import annotations

from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.repository.unit_of_work import UnitOfWorkFactory


class SweepExpiredHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._clock = clock
        self._sweeper = ExpirySweeper(uow_factory, (settings or Settings()).retry)

    def handle(self) -> int:
        """Return the number of reservations that were expired."""
        return self._sweeper.sweep(self._clock())
