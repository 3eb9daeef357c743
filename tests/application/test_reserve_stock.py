"""Integration tests for the Reserve use case, including contention."""

import threading
from datetime import datetime, timedelta

import pytest

from ims.application.reserve_stock import ReserveStockHandler
from ims.application.retry import RetryPolicy
from ims.application.settings import Settings
from ims.domain.exceptions import (
    ConcurrentConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from ims.domain.model.reservation import Reservation, ReservationStatus
from tests.fakes import (
    FAST_SETTINGS,
    START,
    FakeClock,
    assert_conserved,
    contended_factory,
    held_quantity,
    seeded_database,
    uow_factory,
)


class TestReserveHappyPath:

    def test_reserve_holds_stock(self):
        db = seeded_database(("p1", "Widget", 10))
        clock = FakeClock()

        dto = ReserveStockHandler(uow_factory(db), FAST_SETTINGS, clock).handle("p1", 7)

        assert dto.status == "RESERVED"
        assert dto.product_id == "p1"
        assert dto.quantity == 7
        assert datetime.fromisoformat(dto.expires_at) == clock.now + timedelta(minutes=10)
        assert db.inventory["p1"].available_stock == 3

        reservation = db.reservations[dto.reservation_id]
        assert reservation.order_id == dto.order_id
        assert reservation.status == ReservationStatus.RESERVED
        assert reservation.expires_at == reservation.created_at + timedelta(minutes=10)
        assert_conserved(db, "p1")

    def test_each_reservation_gets_its_own_order_id(self):
        db = seeded_database(("p1", "Widget", 10))
        handler = ReserveStockHandler(uow_factory(db), FAST_SETTINGS, FakeClock())
        first = handler.handle("p1", 1)
        second = handler.handle("p1", 1)
        assert first.order_id != second.order_id


class TestReserveRejections:

    def test_insufficient_stock_leaves_stock_unchanged(self):
        db = seeded_database(("p1", "Widget", 3))

        with pytest.raises(InsufficientStockError) as exc_info:
            ReserveStockHandler(uow_factory(db), FAST_SETTINGS, FakeClock()).handle("p1", 5)

        assert exc_info.value.requested == 5
        assert exc_info.value.available == 3
        assert not exc_info.value.retryable
        assert db.inventory["p1"].available_stock == 3
        assert db.reservations == {}

    def test_unknown_product_rejected(self):
        with pytest.raises(NotFoundError):
            ReserveStockHandler(uow_factory(seeded_database()), FAST_SETTINGS).handle("nope", 1)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, quantity):
        db = seeded_database(("p1", "Widget", 3))
        with pytest.raises(ValidationError, match="must be positive"):
            ReserveStockHandler(uow_factory(db), FAST_SETTINGS).handle("p1", quantity)


class TestReserveConflicts:

    def test_conflict_is_retried_against_fresh_state(self):
        db = seeded_database(("p1", "Widget", 10))
        factory = contended_factory(db, "p1", conflicts=1)

        dto = ReserveStockHandler(factory, FAST_SETTINGS, FakeClock()).handle("p1", 6)

        assert db.inventory["p1"].available_stock == 4
        assert list(db.reservations) == [dto.reservation_id]

    def test_exhausted_retries_leave_nothing_behind(self):
        db = seeded_database(("p1", "Widget", 10))
        factory = contended_factory(db, "p1", conflicts=3)

        with pytest.raises(ConcurrentConflictError, match="Please retry"):
            ReserveStockHandler(factory, FAST_SETTINGS, FakeClock()).handle("p1", 6)

        assert db.inventory["p1"].available_stock == 10
        assert db.reservations == {}

    def test_two_racing_reservations_never_oversell(self):
        """Two concurrent Reserve(p, 6) against 10 units: exactly one wins."""
        db = seeded_database(("p1", "Widget", 10))
        handler = ReserveStockHandler(uow_factory(db), FAST_SETTINGS, FakeClock())
        barrier = threading.Barrier(2)
        outcomes = []

        def worker():
            barrier.wait()
            try:
                outcomes.append(handler.handle("p1", 6))
            except InsufficientStockError as exc:
                outcomes.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        successes = [o for o in outcomes if not isinstance(o, Exception)]
        failures = [o for o in outcomes if isinstance(o, InsufficientStockError)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert failures[0].available == 4
        assert db.inventory["p1"].available_stock == 4
        assert_conserved(db, "p1")

    def test_many_threads_never_oversell(self):
        db = seeded_database(("p1", "Widget", 25))
        # Generous budget so contention resolves into stock decisions.
        settings = Settings(retry=RetryPolicy(attempts=50, backoff=0))
        handler = ReserveStockHandler(uow_factory(db), settings, FakeClock())
        lock = threading.Lock()
        won = []

        def worker():
            try:
                handler.handle("p1", 2)
            except (InsufficientStockError, ConcurrentConflictError):
                return
            with lock:
                won.append(2)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(won) <= 25
        assert held_quantity(db, "p1") == sum(won)
        assert_conserved(db, "p1")


class TestReserveIdentifierCollisions:

    def _seed_taken_order_id(self):
        db = seeded_database(("p1", "Widget", 10))
        taken = Reservation.create(product_id="p1", quantity=1, now=START, order_id="taken")
        taken.status = ReservationStatus.CONFIRMED
        db.reservations[taken.id] = taken
        return db

    def test_colliding_order_id_is_redrawn(self, monkeypatch):
        db = self._seed_taken_order_id()
        ids = iter(["r1", "taken", "r2", "fresh"])
        monkeypatch.setattr("ims.domain.model.reservation.new_identifier", lambda: next(ids))

        dto = ReserveStockHandler(uow_factory(db), FAST_SETTINGS, FakeClock()).handle("p1", 3)

        assert dto.order_id == "fresh"
        assert dto.reservation_id == "r2"
        assert db.inventory["p1"].available_stock == 7

    def test_persistent_collisions_are_retryable(self, monkeypatch):
        db = self._seed_taken_order_id()
        monkeypatch.setattr("ims.domain.model.reservation.new_identifier", lambda: "taken")

        with pytest.raises(ConcurrentConflictError) as excinfo:
            ReserveStockHandler(uow_factory(db), FAST_SETTINGS, FakeClock()).handle("p1", 3)

        assert excinfo.value.retryable
        assert db.inventory["p1"].available_stock == 10
