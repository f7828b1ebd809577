from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from ..config import Settings
from ..domain.availability import AvailabilityEngine
from ..domain.errors import (
    InvalidTransitionError,
    RateLimitedError,
    ReservationNotFoundError,
    ValidationError,
)
from ..domain.rate_limiter import RateLimiter
from ..domain.repositories import BlockedDayRepository, ReservationStore
from ..domain.services import (
    normalize_phone,
    parse_party_size,
    sanitize_text,
    validate_capacity,
    validate_name,
)
from ..models import Reservation, ReservationStatus, ServiceWindow
from ..utils.notification import GuestConfirmation, build_confirmation
from ..utils.time import is_future_date, local_date, parse_iso_date, to_utc_naive

logger = logging.getLogger(__name__)

SUBMISSION_KEY = "reserva_form"


@dataclass(frozen=True)
class SweepResult:
    expired: List[Reservation]
    pruned: int


def new_reservation_id(now: datetime) -> str:
    """Millisecond timestamp followed by a random suffix."""
    return f"{int(now.timestamp() * 1000)}{uuid.uuid4().hex[:9]}"


class BookingWorkflow:
    """Orchestrates validation, throttling, capacity checks and store mutations."""

    def __init__(
        self,
        store: ReservationStore,
        blocked_days: BlockedDayRepository,
        rate_limiter: RateLimiter,
        settings: Settings,
    ) -> None:
        self.store = store
        self.blocked_days = blocked_days
        self.rate_limiter = rate_limiter
        self.settings = settings
        self.engine = AvailabilityEngine(store, settings)
        self.tz = ZoneInfo(settings.timezone)

    def submit_guest_reservation(
        self,
        *,
        name: str,
        phone: str,
        date: str | date,
        time: str,
        party_size: object,
        notes: str | None = None,
        now: datetime,
        submission_key: str = SUBMISSION_KEY,
    ) -> tuple[Reservation, GuestConfirmation]:
        if not self.rate_limiter.check(
            submission_key,
            self.settings.submission_max_attempts,
            self.settings.submission_window_ms,
            now=now,
        ):
            raise RateLimitedError(self.rate_limiter.retry_after(submission_key, now=now))

        clean_name = validate_name(name)
        clean_phone = normalize_phone(phone)
        day = self._parse_date(date)
        self.ensure_bookable(day, now=now)
        window = self.engine.window_of(time)
        seats, large_group = parse_party_size(party_size)

        # Large groups skip the automatic check and wait for staff.
        if not large_group:
            validate_capacity(self.engine.snapshot(day, window), seats=seats)

        reservation = self._build(
            name=clean_name,
            phone=clean_phone,
            day=day,
            time=time,
            seats=seats,
            large_group=large_group,
            notes=notes,
            status=ReservationStatus.PENDING,
            now=now,
        )
        self.store.add(reservation)
        confirmation = build_confirmation(
            reservation,
            country_code=self.settings.phone_country_code,
            number=self.settings.whatsapp_number,
        )
        return reservation, confirmation

    def create_manual_reservation(
        self,
        *,
        name: str,
        phone: str,
        date: str | date,
        time: str,
        party_size: object,
        notes: str | None = None,
        now: datetime,
    ) -> Reservation:
        clean_name = validate_name(name, min_length=1)
        clean_phone = normalize_phone(phone)
        day = self._parse_date(date)
        if not time:
            raise ValidationError("time", "time is required")
        self.engine.window_of(time)
        seats, large_group = parse_party_size(party_size)
        if self.blocked_days.contains(day):
            raise ValidationError("date", "this day is blocked, unblock it before adding reservations")

        reservation = self._build(
            name=clean_name,
            phone=clean_phone,
            day=day,
            time=time,
            seats=seats,
            large_group=large_group,
            notes=notes,
            status=ReservationStatus.CONFIRMED,
            now=now,
        )
        return self.store.add(reservation)

    def confirm_reservation(self, reservation_id: str) -> tuple[Reservation, ReservationStatus]:
        """Returns the reservation and its status before the call."""
        reservation = self.store.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        previous = reservation.status
        # Idempotent: already confirmed returns as-is
        if previous == ReservationStatus.CONFIRMED:
            return reservation, previous
        if previous != ReservationStatus.PENDING:
            raise InvalidTransitionError(f"cannot confirm a {previous} reservation")
        return self.store.set_status(reservation, ReservationStatus.CONFIRMED), previous

    def delete_reservation(self, reservation_id: str) -> Optional[Reservation]:
        """Remove a reservation in any status. Unknown ids are a no-op returning None."""
        reservation = self.store.get(reservation_id)
        if reservation is None:
            return None
        self.store.delete(reservation_id)
        return reservation

    def sweep_expired(self, *, now: datetime) -> List[Reservation]:
        cutoff = to_utc_naive(now) - timedelta(hours=self.settings.pending_expiry_hours)
        expired = self.store.delete_pending_created_before(cutoff)
        if expired:
            logger.info("removed %d pending reservations older than %dh", len(expired), self.settings.pending_expiry_hours)
        return expired

    def prune_history(self, *, now: datetime) -> int:
        horizon = local_date(now, self.tz) - timedelta(days=self.settings.history_retention_days)
        pruned = self.store.delete_dated_before(horizon)
        if pruned:
            logger.info("pruned %d reservations dated before %s", pruned, horizon.isoformat())
        return pruned

    def start_admin_session(self, *, now: datetime) -> SweepResult:
        return SweepResult(expired=self.sweep_expired(now=now), pruned=self.prune_history(now=now))

    def list_day(self, day: str | date) -> List[Reservation]:
        return self.store.list_for_date(self._parse_date(day))

    def list_upcoming(self, *, now: datetime) -> List[Reservation]:
        return self.store.list_from(local_date(now, self.tz))

    def block_day(self, day: str | date, *, now: datetime) -> bool:
        return self.blocked_days.add(self._parse_date(day), created_at=to_utc_naive(now))

    def unblock_day(self, day: str | date) -> bool:
        return self.blocked_days.remove(self._parse_date(day))

    def list_blocked_days(self) -> List[date]:
        return self.blocked_days.list_all()

    def ensure_bookable(self, day: date, *, now: datetime) -> None:
        """Date rules a guest booking must pass. Raises ValidationError on the date field."""
        if not is_future_date(day, now, self.tz, allow_today=self.settings.allow_same_day):
            if self.settings.allow_same_day:
                raise ValidationError("date", "date must not be in the past")
            raise ValidationError("date", "reservations must be made at least one day in advance")
        if day > local_date(now, self.tz) + timedelta(days=self.settings.max_days_ahead):
            raise ValidationError("date", f"reservations open at most {self.settings.max_days_ahead} days ahead")
        self._ensure_open(day)

    def is_day_bookable(self, day: date, *, now: datetime) -> bool:
        try:
            self.ensure_bookable(day, now=now)
        except ValidationError:
            return False
        return True

    def window_of(self, time: str) -> ServiceWindow:
        return self.engine.window_of(time)

    def _ensure_open(self, day: date) -> None:
        if day.weekday() in self.settings.closed_weekdays:
            raise ValidationError("date", "the restaurant is closed on this day")
        if self.blocked_days.contains(day):
            raise ValidationError("date", "this day is not available for reservations")

    @staticmethod
    def _parse_date(value: str | date) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError("date", f"invalid date {value!r}") from exc

    @staticmethod
    def _build(
        *,
        name: str,
        phone: str,
        day: date,
        time: str,
        seats: int,
        large_group: bool,
        notes: str | None,
        status: ReservationStatus,
        now: datetime,
    ) -> Reservation:
        return Reservation(
            id=new_reservation_id(now),
            name=name,
            phone=phone,
            date=day,
            time=time,
            party_size=seats,
            large_group=large_group,
            notes=sanitize_text(notes) or None,
            status=status,
            created_at=to_utc_naive(now),
        )
