from __future__ import annotations

from datetime import date
from typing import Dict, FrozenSet, List

from ..config import Settings
from ..models import Availability, ReservationStatus, ServiceWindow
from .errors import ValidationError
from .repositories import ReservationStore
from .services import WindowSnapshot, classify


class AvailabilityEngine:
    """
    Occupancy and remaining capacity per (date, service window), read from the store.

    Only confirmed reservations are counted unless `pending_holds_capacity` is set.
    Remaining capacity is reported as-is, negative when staff over-book manually.
    """

    def __init__(self, store: ReservationStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings
        self._slots: Dict[ServiceWindow, List[str]] = {
            ServiceWindow.MIDDAY: list(settings.midday_slots),
            ServiceWindow.EVENING: list(settings.evening_slots),
        }
        self._capacity: Dict[ServiceWindow, int] = {
            ServiceWindow.MIDDAY: settings.capacity_midday,
            ServiceWindow.EVENING: settings.capacity_evening,
        }

    @property
    def counted_statuses(self) -> FrozenSet[ReservationStatus]:
        if self.settings.pending_holds_capacity:
            return frozenset({ReservationStatus.CONFIRMED, ReservationStatus.PENDING})
        return frozenset({ReservationStatus.CONFIRMED})

    def slots(self, window: ServiceWindow) -> List[str]:
        return list(self._slots[window])

    def capacity(self, window: ServiceWindow) -> int:
        return self._capacity[window]

    def window_of(self, time: str) -> ServiceWindow:
        for window, slots in self._slots.items():
            if time in slots:
                return window
        raise ValidationError("time", f"{time!r} is not a bookable time")

    def occupancy(self, day: date, window: ServiceWindow) -> int:
        return self.store.sum_seats(day, self._slots[window], self.counted_statuses)

    def remaining(self, day: date, window: ServiceWindow) -> int:
        return self.capacity(window) - self.occupancy(day, window)

    def classify(self, occupancy: int, capacity: int) -> Availability:
        return classify(occupancy, capacity, self.settings.partial_threshold, self.settings.full_threshold)

    def snapshot(self, day: date, window: ServiceWindow) -> WindowSnapshot:
        return WindowSnapshot(
            window=window,
            capacity=self.capacity(window),
            occupied=self.occupancy(day, window),
            partial_threshold=self.settings.partial_threshold,
            full_threshold=self.settings.full_threshold,
        )
