from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List

from ..domain.errors import ValidationError
from ..domain.services import WindowSnapshot, parse_party_size
from ..models import Availability, Reservation, ServiceWindow
from ..utils.time import local_date
from .reservations import BookingWorkflow


@dataclass(frozen=True)
class SlotCheck:
    date: date
    time: str
    window: ServiceWindow
    open: bool
    remaining: int
    fits: bool
    needs_manual_confirmation: bool


@dataclass(frozen=True)
class CalendarDay:
    date: date
    weekday: int
    past: bool
    closed: bool
    blocked: bool
    reservations: Dict[ServiceWindow, int]
    status: Dict[ServiceWindow, Availability]


def check_slot(
    workflow: BookingWorkflow,
    *,
    day: date,
    time: str,
    party_size: object,
    now: datetime,
) -> SlotCheck:
    """Guest pre-check before submitting; never writes. Applies the same date rules as submission."""
    window = workflow.window_of(time)
    seats, large_group = parse_party_size(party_size)
    is_open = workflow.is_day_bookable(day, now=now)
    remaining = workflow.engine.remaining(day, window)
    fits = is_open and (large_group or seats <= remaining)
    return SlotCheck(
        date=day,
        time=time,
        window=window,
        open=is_open,
        remaining=remaining,
        fits=fits,
        needs_manual_confirmation=large_group,
    )


def day_overview(workflow: BookingWorkflow, *, day: date) -> List[WindowSnapshot]:
    return [workflow.engine.snapshot(day, window) for window in ServiceWindow]


def month_overview(workflow: BookingWorkflow, *, year: int, month: int, now: datetime) -> List[CalendarDay]:
    if month < 1 or month > 12:
        raise ValidationError("month", "month must be between 1 and 12")
    _, days_in_month = calendar.monthrange(year, month)
    first = date(year, month, 1)
    last = date(year, month, days_in_month)
    today = local_date(now, workflow.tz)
    blocked = set(workflow.list_blocked_days())
    by_day: Dict[date, List[Reservation]] = {}
    for reservation in workflow.store.list_between(first, last):
        by_day.setdefault(reservation.date, []).append(reservation)

    engine = workflow.engine
    counted = engine.counted_statuses
    days: List[CalendarDay] = []
    for number in range(1, days_in_month + 1):
        current = date(year, month, number)
        counts = {window: 0 for window in ServiceWindow}
        occupied = {window: 0 for window in ServiceWindow}
        for reservation in by_day.get(current, []):
            try:
                window = workflow.window_of(reservation.time)
            except ValidationError:
                # Time no longer in the configured slot lists.
                continue
            counts[window] += 1
            if reservation.status in counted:
                occupied[window] += reservation.seats
        days.append(
            CalendarDay(
                date=current,
                weekday=current.weekday(),
                past=current < today,
                closed=current.weekday() in workflow.settings.closed_weekdays,
                blocked=current in blocked,
                reservations=counts,
                status={
                    window: engine.classify(occupied[window], engine.capacity(window)) for window in ServiceWindow
                },
            )
        )
    return days
