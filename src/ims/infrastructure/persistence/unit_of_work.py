"""Unit of work over an InMemoryDatabase (or a subclass backed by a file).

``commit()`` opens a database transaction, refreshes the committed tables,
re-checks every staged precondition and only then applies the writes.
Nothing is applied when any check fails, so a commit is all-or-nothing.
"""

from __future__ import annotations

from ims.domain.repository.unit_of_work import AbstractUnitOfWork
from ims.infrastructure.persistence.database import InMemoryDatabase
from ims.infrastructure.persistence.in_memory_repositories import (
    InMemoryInventoryRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemoryReservationRepository,
)


class InMemoryUnitOfWork(AbstractUnitOfWork):

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self.products = InMemoryProductRepository(db)
        self.inventory = InMemoryInventoryRepository(db)
        self.reservations = InMemoryReservationRepository(db)
        self.orders = InMemoryOrderRepository(db)

    def __enter__(self) -> InMemoryUnitOfWork:
        with self._db.transaction():
            self._db.load()
        return self

    def commit(self) -> None:
        repos = self._repositories()
        with self._db.transaction():
            self._db.load()
            for repo in repos:
                repo.check()
            for repo in repos:
                repo.apply()
            self._db.flush()
        self.rollback()

    def rollback(self) -> None:
        for repo in self._repositories():
            repo.reset()

    def _repositories(self) -> list:
        return [self.products, self.inventory, self.reservations, self.orders]
