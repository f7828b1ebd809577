from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Protocol

from ..models import Reservation, ReservationStatus


class ReservationStore(Protocol):
    def add(self, reservation: Reservation) -> Reservation: ...

    def get(self, reservation_id: str) -> Reservation | None: ...

    def list_all(self) -> list[Reservation]: ...

    def list_for_date(self, day: date, *, include_cancelled: bool = False) -> list[Reservation]: ...

    def list_between(self, start: date, end: date) -> list[Reservation]: ...

    def list_from(self, day: date) -> list[Reservation]: ...

    def sum_seats(
        self,
        day: date,
        times: Collection[str],
        statuses: Collection[ReservationStatus],
    ) -> int: ...

    def count_by_status(self, status: ReservationStatus) -> int: ...

    def sum_seats_by_status(self, status: ReservationStatus) -> int: ...

    def set_status(self, reservation: Reservation, status: ReservationStatus) -> Reservation: ...

    def delete(self, reservation_id: str) -> bool: ...

    def delete_pending_created_before(self, cutoff: datetime) -> list[Reservation]: ...

    def delete_dated_before(self, day: date) -> int: ...


class BlockedDayRepository(Protocol):
    def contains(self, day: date) -> bool: ...

    def add(self, day: date, *, created_at: datetime) -> bool: ...

    def remove(self, day: date) -> bool: ...

    def list_all(self) -> list[date]: ...
