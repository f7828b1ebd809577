from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from tablebook.domain.errors import PersistenceError
from tablebook.models import Reservation, ReservationStatus


def test_add_and_get_roundtrip(store, make_reservation) -> None:
    created = make_reservation(party_size=4)
    fetched = store.get(created.id)
    assert fetched is not None
    assert fetched.party_size == 4
    assert fetched.seats == 4
    assert store.get("missing") is None


def test_list_for_date_sorted_and_excludes_cancelled(store, make_reservation, future_day: date) -> None:
    make_reservation(time="21:00")
    make_reservation(time="13:00")
    make_reservation(time="14:00", status=ReservationStatus.CANCELLED)
    assert [r.time for r in store.list_for_date(future_day)] == ["13:00", "21:00"]
    assert len(store.list_for_date(future_day, include_cancelled=True)) == 3


def test_list_from_orders_by_date_then_time(store, make_reservation, future_day: date) -> None:
    make_reservation(day=future_day + timedelta(days=1), time="13:00")
    make_reservation(day=future_day, time="20:00")
    make_reservation(day=future_day - timedelta(days=10), time="13:00")
    rows = store.list_from(future_day)
    assert [(r.date, r.time) for r in rows] == [
        (future_day, "20:00"),
        (future_day + timedelta(days=1), "13:00"),
    ]


def test_set_status_persists(store, make_reservation) -> None:
    reservation = make_reservation(status=ReservationStatus.PENDING)
    store.set_status(reservation, ReservationStatus.CONFIRMED)
    assert store.get(reservation.id).status == ReservationStatus.CONFIRMED


def test_delete_reports_missing(store, make_reservation) -> None:
    reservation = make_reservation()
    assert store.delete(reservation.id) is True
    assert store.delete(reservation.id) is False


def test_delete_pending_created_before_spares_confirmed(store, make_reservation, now: datetime) -> None:
    old = now - timedelta(hours=30)
    pending = make_reservation(status=ReservationStatus.PENDING, created_at=old)
    confirmed = make_reservation(status=ReservationStatus.CONFIRMED, created_at=old)
    fresh = make_reservation(status=ReservationStatus.PENDING, created_at=now)
    cutoff = (now - timedelta(hours=24)).replace(tzinfo=None)
    removed = store.delete_pending_created_before(cutoff)
    assert [r.id for r in removed] == [pending.id]
    assert store.get(confirmed.id) is not None
    assert store.get(fresh.id) is not None


def test_delete_dated_before(store, make_reservation, future_day: date) -> None:
    make_reservation(day=future_day - timedelta(days=40))
    kept = make_reservation(day=future_day)
    assert store.delete_dated_before(future_day - timedelta(days=30)) == 1
    assert [r.id for r in store.list_all()] == [kept.id]


def test_counts_and_covers_by_status(store, make_reservation) -> None:
    make_reservation(party_size=4)
    make_reservation(party_size="large")
    make_reservation(party_size=2, status=ReservationStatus.PENDING)
    assert store.count_by_status(ReservationStatus.CONFIRMED) == 2
    assert store.sum_seats_by_status(ReservationStatus.CONFIRMED) == 14
    assert store.count_by_status(ReservationStatus.PENDING) == 1


def test_commit_failure_raises_persistence_error(store, session, monkeypatch, now: datetime, future_day: date) -> None:
    def failing_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)
    reservation = Reservation(
        id="x1",
        name="Ana Ruiz",
        phone="612345678",
        date=future_day,
        time="13:00",
        party_size=2,
        large_group=False,
        status=ReservationStatus.PENDING,
        created_at=now.replace(tzinfo=None),
    )
    with pytest.raises(PersistenceError):
        store.add(reservation)
    monkeypatch.undo()
    assert store.get("x1") is None


def test_blocked_days_add_remove(blocked_days, now: datetime, future_day: date) -> None:
    created = now.replace(tzinfo=None)
    assert blocked_days.add(future_day, created_at=created) is True
    assert blocked_days.add(future_day, created_at=created) is False
    assert blocked_days.contains(future_day)
    assert blocked_days.list_all() == [future_day]
    assert blocked_days.remove(future_day) is True
    assert blocked_days.remove(future_day) is False
    assert blocked_days.list_all() == []
