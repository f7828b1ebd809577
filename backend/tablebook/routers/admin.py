from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ..deps import get_workflow, require_admin
from ..domain.errors import BookingError
from ..schemas import (
    AdminLogin,
    AdminSessionRead,
    BlockedDaysRead,
    CalendarDayRead,
    ManualReservationCreate,
    ReservationRead,
    StatsRead,
    SweepRead,
)
from ..usecases import admin as admin_usecase
from ..usecases import availability as availability_usecase
from ..usecases.reservations import BookingWorkflow
from ..utils.audit_log import emit_audit_log
from ..utils.time import utc_now
from .errors import http_error

login_router = APIRouter(prefix="/admin", tags=["admin"])
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _audit(**kwargs: object) -> None:
    try:
        emit_audit_log(**kwargs)  # type: ignore[arg-type]
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed") from exc


def _audit_expired(expired: list) -> None:
    for reservation in expired:
        _audit(
            action="reservation.expired",
            initiator="system",
            reservation_id=reservation.id,
            reservation_date=reservation.date,
            time=reservation.time,
            party_size=reservation.seats,
            status_from=reservation.status,
        )


@login_router.post("/login", response_model=AdminSessionRead)
async def login(
    payload: AdminLogin,
    workflow: BookingWorkflow = Depends(get_workflow),
) -> AdminSessionRead:
    try:
        session = admin_usecase.login(workflow, pin=payload.pin, now=utc_now())
    except BookingError as exc:
        raise http_error(exc) from exc
    _audit_expired(session.sweep.expired)
    return AdminSessionRead(
        access_token=session.token,
        expires_at=session.expires_at,
        expired_reservations=len(session.sweep.expired),
        pruned_reservations=session.sweep.pruned,
    )


@router.get("/stats", response_model=StatsRead)
async def stats(workflow: BookingWorkflow = Depends(get_workflow)) -> StatsRead:
    result = admin_usecase.dashboard_stats(workflow, now=utc_now())
    return StatsRead(
        pending=result.pending,
        confirmed=result.confirmed,
        today=result.today,
        estimated_revenue=result.estimated_revenue,
    )


@router.get("/reservations", response_model=List[ReservationRead])
async def list_upcoming(workflow: BookingWorkflow = Depends(get_workflow)) -> list[ReservationRead]:
    return [ReservationRead.from_db(reservation=r) for r in workflow.list_upcoming(now=utc_now())]


@router.get("/reservations/day/{day}", response_model=List[ReservationRead])
async def list_day(day: date, workflow: BookingWorkflow = Depends(get_workflow)) -> list[ReservationRead]:
    return [ReservationRead.from_db(reservation=r) for r in workflow.list_day(day)]


@router.get("/calendar/{year}/{month}", response_model=List[CalendarDayRead])
async def calendar(
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    workflow: BookingWorkflow = Depends(get_workflow),
) -> list[CalendarDayRead]:
    days = availability_usecase.month_overview(workflow, year=year, month=month, now=utc_now())
    return [CalendarDayRead.from_day(day) for day in days]


@router.post("/reservations", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
async def create_manual_reservation(
    payload: ManualReservationCreate,
    workflow: BookingWorkflow = Depends(get_workflow),
) -> ReservationRead:
    try:
        reservation = workflow.create_manual_reservation(
            name=payload.name,
            phone=payload.phone,
            date=payload.date,
            time=payload.time,
            party_size=payload.party_size,
            notes=payload.notes,
            now=utc_now(),
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    _audit(
        action="reservation.manual_created",
        initiator="staff",
        reservation_id=reservation.id,
        reservation_date=reservation.date,
        time=reservation.time,
        party_size=reservation.seats,
        status_to=reservation.status,
    )
    return ReservationRead.from_db(reservation=reservation)


@router.post("/reservations/{reservation_id}/confirm", response_model=ReservationRead)
async def confirm_reservation(
    reservation_id: str = Path(..., min_length=1, max_length=40),
    workflow: BookingWorkflow = Depends(get_workflow),
) -> ReservationRead:
    try:
        reservation, previous = workflow.confirm_reservation(reservation_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    if previous != reservation.status:
        _audit(
            action="reservation.confirmed",
            initiator="staff",
            reservation_id=reservation.id,
            reservation_date=reservation.date,
            time=reservation.time,
            party_size=reservation.seats,
            status_from=previous,
            status_to=reservation.status,
        )
    return ReservationRead.from_db(reservation=reservation)


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(
    reservation_id: str = Path(..., min_length=1, max_length=40),
    workflow: BookingWorkflow = Depends(get_workflow),
) -> None:
    try:
        removed = workflow.delete_reservation(reservation_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    if removed is not None:
        _audit(
            action="reservation.deleted",
            initiator="staff",
            reservation_id=removed.id,
            reservation_date=removed.date,
            time=removed.time,
            party_size=removed.seats,
            status_from=removed.status,
        )


@router.post("/sweep", response_model=SweepRead)
async def sweep(workflow: BookingWorkflow = Depends(get_workflow)) -> SweepRead:
    try:
        result = workflow.start_admin_session(now=utc_now())
    except BookingError as exc:
        raise http_error(exc) from exc
    _audit_expired(result.expired)
    return SweepRead(expired=[r.id for r in result.expired], pruned=result.pruned)


@router.get("/blocked-days", response_model=BlockedDaysRead)
async def blocked_days(workflow: BookingWorkflow = Depends(get_workflow)) -> BlockedDaysRead:
    return BlockedDaysRead(dates=workflow.list_blocked_days())


@router.put("/blocked-days/{day}", response_model=BlockedDaysRead)
async def block_day(day: date, workflow: BookingWorkflow = Depends(get_workflow)) -> BlockedDaysRead:
    try:
        if workflow.block_day(day, now=utc_now()):
            _audit(action="day.blocked", initiator="staff", reservation_date=day)
    except BookingError as exc:
        raise http_error(exc) from exc
    return BlockedDaysRead(dates=workflow.list_blocked_days())


@router.delete("/blocked-days/{day}", response_model=BlockedDaysRead)
async def unblock_day(day: date, workflow: BookingWorkflow = Depends(get_workflow)) -> BlockedDaysRead:
    try:
        if workflow.unblock_day(day):
            _audit(action="day.unblocked", initiator="staff", reservation_date=day)
    except BookingError as exc:
        raise http_error(exc) from exc
    return BlockedDaysRead(dates=workflow.list_blocked_days())
