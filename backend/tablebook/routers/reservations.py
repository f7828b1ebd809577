from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..deps import get_workflow
from ..domain.errors import BookingError
from ..schemas import GuestReservationRead, ReservationCreate
from ..usecases.reservations import SUBMISSION_KEY, BookingWorkflow
from ..utils.audit_log import emit_audit_log
from ..utils.time import utc_now
from .errors import http_error

router = APIRouter(prefix="", tags=["reservations"])


async def get_submission_key(request: Request) -> str:
    client = request.client.host if request.client else "unknown"
    return f"{SUBMISSION_KEY}:{client}"


@router.post("/reservations", response_model=GuestReservationRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    workflow: BookingWorkflow = Depends(get_workflow),
    submission_key: str = Depends(get_submission_key),
) -> GuestReservationRead:
    try:
        reservation, confirmation = workflow.submit_guest_reservation(
            name=payload.name,
            phone=payload.phone,
            date=payload.date,
            time=payload.time,
            party_size=payload.party_size,
            notes=payload.notes,
            now=utc_now(),
            submission_key=submission_key,
        )
    except BookingError as exc:
        raise http_error(exc) from exc

    try:
        emit_audit_log(
            action="reservation.created",
            initiator="guest",
            reservation_id=reservation.id,
            reservation_date=reservation.date,
            time=reservation.time,
            party_size=reservation.seats,
            status_to=reservation.status,
        )
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed") from exc

    return GuestReservationRead.from_result(reservation=reservation, confirmation=confirmation)
