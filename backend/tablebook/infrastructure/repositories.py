from __future__ import annotations

from datetime import date, datetime
from typing import Collection, List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain.errors import PersistenceError
from ..domain.repositories import BlockedDayRepository, ReservationStore
from ..models import BlockedDay, Reservation, ReservationStatus


def _commit(session: Session, action: str) -> None:
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"could not {action}") from exc


class SqlAlchemyReservationStore(ReservationStore):
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, reservation: Reservation) -> Reservation:
        self.session.add(reservation)
        _commit(self.session, "save reservation")
        return reservation

    def get(self, reservation_id: str) -> Reservation | None:
        return self.session.get(Reservation, reservation_id)

    def list_all(self) -> List[Reservation]:
        stmt = select(Reservation).order_by(Reservation.date, Reservation.time, Reservation.created_at)
        return list(self.session.scalars(stmt))

    def list_for_date(self, day: date, *, include_cancelled: bool = False) -> List[Reservation]:
        stmt = select(Reservation).where(Reservation.date == day)
        if not include_cancelled:
            stmt = stmt.where(Reservation.status != ReservationStatus.CANCELLED)
        stmt = stmt.order_by(Reservation.time, Reservation.created_at)
        return list(self.session.scalars(stmt))

    def list_between(self, start: date, end: date) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .where(
                Reservation.date >= start,
                Reservation.date <= end,
                Reservation.status != ReservationStatus.CANCELLED,
            )
            .order_by(Reservation.date, Reservation.time)
        )
        return list(self.session.scalars(stmt))

    def list_from(self, day: date) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .where(Reservation.date >= day, Reservation.status != ReservationStatus.CANCELLED)
            .order_by(Reservation.date, Reservation.time, Reservation.created_at)
        )
        return list(self.session.scalars(stmt))

    def sum_seats(
        self,
        day: date,
        times: Collection[str],
        statuses: Collection[ReservationStatus],
    ) -> int:
        # Large groups are stored with their seat weight in party_size.
        stmt = select(func.coalesce(func.sum(Reservation.party_size), 0)).where(
            Reservation.date == day,
            Reservation.time.in_(list(times)),
            Reservation.status.in_(list(statuses)),
        )
        return int(self.session.scalar(stmt) or 0)

    def count_by_status(self, status: ReservationStatus) -> int:
        stmt = select(func.count()).select_from(Reservation).where(Reservation.status == status)
        return int(self.session.scalar(stmt) or 0)

    def sum_seats_by_status(self, status: ReservationStatus) -> int:
        stmt = select(func.coalesce(func.sum(Reservation.party_size), 0)).where(Reservation.status == status)
        return int(self.session.scalar(stmt) or 0)

    def set_status(self, reservation: Reservation, status: ReservationStatus) -> Reservation:
        reservation.status = status
        self.session.add(reservation)
        _commit(self.session, "update reservation")
        return reservation

    def delete(self, reservation_id: str) -> bool:
        reservation = self.get(reservation_id)
        if reservation is None:
            return False
        self.session.delete(reservation)
        _commit(self.session, "delete reservation")
        return True

    def delete_pending_created_before(self, cutoff: datetime) -> List[Reservation]:
        stmt = select(Reservation).where(
            Reservation.status == ReservationStatus.PENDING,
            Reservation.created_at < cutoff,
        )
        expired = list(self.session.scalars(stmt))
        if not expired:
            return []
        for reservation in expired:
            self.session.delete(reservation)
        _commit(self.session, "remove expired reservations")
        return expired

    def delete_dated_before(self, day: date) -> int:
        result = self.session.execute(delete(Reservation).where(Reservation.date < day))
        _commit(self.session, "prune reservation history")
        return int(result.rowcount or 0)


class SqlAlchemyBlockedDayRepository(BlockedDayRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def contains(self, day: date) -> bool:
        return self.session.get(BlockedDay, day) is not None

    def add(self, day: date, *, created_at: datetime) -> bool:
        if self.contains(day):
            return False
        self.session.add(BlockedDay(date=day, created_at=created_at))
        _commit(self.session, "block day")
        return True

    def remove(self, day: date) -> bool:
        blocked = self.session.get(BlockedDay, day)
        if blocked is None:
            return False
        self.session.delete(blocked)
        _commit(self.session, "unblock day")
        return True

    def list_all(self) -> List[date]:
        return list(self.session.scalars(select(BlockedDay.date).order_by(BlockedDay.date)))
