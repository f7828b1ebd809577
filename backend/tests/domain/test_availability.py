from datetime import date, timedelta

import pytest
from tablebook.domain.availability import AvailabilityEngine
from tablebook.domain.errors import ValidationError
from tablebook.models import Availability, ReservationStatus, ServiceWindow


@pytest.fixture
def engine_(store, settings) -> AvailabilityEngine:
    return AvailabilityEngine(store, settings)


def test_window_of_maps_slots(engine_: AvailabilityEngine) -> None:
    assert engine_.window_of("13:00") == ServiceWindow.MIDDAY
    assert engine_.window_of("22:30") == ServiceWindow.EVENING
    with pytest.raises(ValidationError):
        engine_.window_of("17:00")


def test_occupancy_counts_only_confirmed(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size=4, status=ReservationStatus.CONFIRMED)
    make_reservation(party_size=3, time="15:30", status=ReservationStatus.CONFIRMED)
    make_reservation(party_size=5, status=ReservationStatus.PENDING)
    make_reservation(party_size=6, status=ReservationStatus.CANCELLED)
    assert engine_.occupancy(future_day, ServiceWindow.MIDDAY) == 7


def test_occupancy_is_scoped_to_date_and_window(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size=4)
    make_reservation(party_size=2, time="21:00")
    make_reservation(party_size=5, day=future_day + timedelta(days=1))
    assert engine_.occupancy(future_day, ServiceWindow.MIDDAY) == 4
    assert engine_.occupancy(future_day, ServiceWindow.EVENING) == 2


def test_large_group_weighs_ten_seats(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size="large")
    assert engine_.occupancy(future_day, ServiceWindow.MIDDAY) == 10


def test_remaining_plus_occupancy_equals_capacity(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size=8)
    make_reservation(party_size="large", time="14:00")
    for window in ServiceWindow:
        occupied = engine_.occupancy(future_day, window)
        assert engine_.remaining(future_day, window) + occupied == engine_.capacity(window)


def test_remaining_goes_negative_when_overbooked(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size="large")
    make_reservation(party_size=8, time="14:30")
    assert engine_.remaining(future_day, ServiceWindow.MIDDAY) == -3


def test_pending_holds_capacity_when_configured(store, settings, make_reservation, future_day: date) -> None:
    engine_ = AvailabilityEngine(store, settings.model_copy(update={"pending_holds_capacity": True}))
    make_reservation(party_size=5, status=ReservationStatus.PENDING)
    make_reservation(party_size=2, status=ReservationStatus.CONFIRMED)
    make_reservation(party_size=3, status=ReservationStatus.CANCELLED)
    assert engine_.occupancy(future_day, ServiceWindow.MIDDAY) == 7


def test_snapshot_classifies_window(engine_, make_reservation, future_day: date) -> None:
    make_reservation(party_size=7)
    snapshot = engine_.snapshot(future_day, ServiceWindow.MIDDAY)
    assert snapshot.occupied == 7
    assert snapshot.remaining == 8
    assert snapshot.status == Availability.PARTIAL
    assert engine_.classify(0, 15) == Availability.AVAILABLE
