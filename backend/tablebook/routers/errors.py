from fastapi import HTTPException, status

from ..domain.errors import (
    BookingError,
    CapacityExceededError,
    InvalidCredentialsError,
    PersistenceError,
    RateLimitedError,
    RemoteUnavailableError,
    ReservationNotFoundError,
    ValidationError,
)


def http_error(exc: BookingError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": exc.field, "message": exc.message},
        )
    if isinstance(exc, RateLimitedError):
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="too many attempts, try again later",
            headers={"Retry-After": str(max(int(exc.retry_after + 0.999), 1))},
        )
    if isinstance(exc, CapacityExceededError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "capacity exceeded", "requested": exc.requested, "remaining": max(exc.remaining, 0)},
        )
    if isinstance(exc, ReservationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    if isinstance(exc, InvalidCredentialsError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="incorrect PIN")
    if isinstance(exc, PersistenceError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="the reservation could not be saved, please try again or call the restaurant",
        )
    if isinstance(exc, RemoteUnavailableError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
