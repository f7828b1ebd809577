from datetime import date, datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from .domain.services import WindowSnapshot
from .models import Availability, Reservation, ReservationStatus, ServiceWindow
from .usecases.availability import CalendarDay, SlotCheck
from .utils.notification import GuestConfirmation

PartySizeField = Union[int, Literal["large"]]


class ReservationCreate(BaseModel):
    # Kept loose so the workflow reports field errors in one place.
    name: str = Field(max_length=2000)
    phone: str = Field(max_length=32)
    date: str
    time: str
    party_size: PartySizeField
    notes: Optional[str] = Field(default=None, max_length=2000)


class ManualReservationCreate(ReservationCreate):
    pass


class ReservationRead(BaseModel):
    reservation_id: str
    name: str
    phone: str
    date: date
    time: str
    party_size: PartySizeField
    seats: int
    notes: Optional[str]
    status: ReservationStatus
    created_at: datetime

    @field_serializer("created_at")
    def _ser_created_at(self, dt: datetime) -> str:
        # Stored as naive UTC.
        return dt.replace(tzinfo=timezone.utc).isoformat()

    @classmethod
    def from_db(cls, *, reservation: Reservation) -> "ReservationRead":
        return cls(
            reservation_id=reservation.id,
            name=reservation.name,
            phone=reservation.phone,
            date=reservation.date,
            time=reservation.time,
            party_size="large" if reservation.large_group else reservation.party_size,
            seats=reservation.seats,
            notes=reservation.notes,
            status=reservation.status,
            created_at=reservation.created_at,
        )


class GuestReservationRead(BaseModel):
    reservation: ReservationRead
    message: str
    link: str

    @classmethod
    def from_result(cls, *, reservation: Reservation, confirmation: GuestConfirmation) -> "GuestReservationRead":
        return cls(
            reservation=ReservationRead.from_db(reservation=reservation),
            message=confirmation.message,
            link=confirmation.link,
        )


class WindowAvailability(BaseModel):
    window: ServiceWindow
    capacity: int
    occupied: int
    remaining: int
    status: Availability

    @classmethod
    def from_snapshot(cls, snapshot: WindowSnapshot) -> "WindowAvailability":
        return cls(
            window=snapshot.window,
            capacity=snapshot.capacity,
            occupied=snapshot.occupied,
            remaining=snapshot.remaining,
            status=snapshot.status,
        )


class DayAvailability(BaseModel):
    date: date
    open: bool
    windows: List[WindowAvailability]


class SlotCheckRead(BaseModel):
    date: date
    time: str
    window: ServiceWindow
    open: bool
    remaining: int
    fits: bool
    needs_manual_confirmation: bool

    @classmethod
    def from_check(cls, check: SlotCheck) -> "SlotCheckRead":
        return cls(
            date=check.date,
            time=check.time,
            window=check.window,
            open=check.open,
            remaining=check.remaining,
            fits=check.fits,
            needs_manual_confirmation=check.needs_manual_confirmation,
        )


class CalendarDayRead(BaseModel):
    date: date
    weekday: int
    past: bool
    closed: bool
    blocked: bool
    midday: int
    evening: int
    midday_status: Availability
    evening_status: Availability

    @classmethod
    def from_day(cls, day: CalendarDay) -> "CalendarDayRead":
        return cls(
            date=day.date,
            weekday=day.weekday,
            past=day.past,
            closed=day.closed,
            blocked=day.blocked,
            midday=day.reservations[ServiceWindow.MIDDAY],
            evening=day.reservations[ServiceWindow.EVENING],
            midday_status=day.status[ServiceWindow.MIDDAY],
            evening_status=day.status[ServiceWindow.EVENING],
        )


class AdminLogin(BaseModel):
    pin: str = Field(min_length=1, max_length=64)


class AdminSessionRead(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    expired_reservations: int
    pruned_reservations: int


class SweepRead(BaseModel):
    expired: List[str]
    pruned: int


class StatsRead(BaseModel):
    pending: int
    confirmed: int
    today: int
    estimated_revenue: int


class BlockedDaysRead(BaseModel):
    dates: List[date]


class MenuRead(BaseModel):
    images: List[str]
    warning: Optional[str] = None
    refreshed_at: Optional[datetime] = None
