from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..domain.errors import InvalidCredentialsError, RateLimitedError
from ..models import ReservationStatus
from ..utils.auth import create_access_token, pin_matches
from ..utils.time import local_date
from .reservations import BookingWorkflow, SweepResult

logger = logging.getLogger(__name__)

LOGIN_KEY = "admin_login"


@dataclass(frozen=True)
class AdminSession:
    token: str
    expires_at: datetime
    sweep: SweepResult


@dataclass(frozen=True)
class DashboardStats:
    pending: int
    confirmed: int
    today: int
    estimated_revenue: int


def login(workflow: BookingWorkflow, *, pin: str, now: datetime) -> AdminSession:
    settings = workflow.settings
    limiter = workflow.rate_limiter
    if not limiter.check(
        LOGIN_KEY,
        settings.login_max_attempts,
        settings.login_window_ms,
        now=now,
        lockout_ms=settings.login_lockout_ms,
    ):
        raise RateLimitedError(limiter.retry_after(LOGIN_KEY, now=now))
    if not pin_matches(pin, settings.admin_pin):
        logger.warning("rejected admin login attempt")
        raise InvalidCredentialsError("incorrect PIN")

    limiter.reset(LOGIN_KEY)
    lifetime = timedelta(minutes=settings.admin_token_minutes)
    token = create_access_token(
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        expires_delta=lifetime,
        now=now,
    )
    sweep = workflow.start_admin_session(now=now)
    return AdminSession(token=token, expires_at=now + lifetime, sweep=sweep)


def dashboard_stats(workflow: BookingWorkflow, *, now: datetime) -> DashboardStats:
    store = workflow.store
    confirmed_covers = store.sum_seats_by_status(ReservationStatus.CONFIRMED)
    return DashboardStats(
        pending=store.count_by_status(ReservationStatus.PENDING),
        confirmed=store.count_by_status(ReservationStatus.CONFIRMED),
        today=len(store.list_for_date(local_date(now, workflow.tz))),
        estimated_revenue=confirmed_covers * workflow.settings.price_per_cover,
    )
