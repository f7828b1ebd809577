class BookingError(Exception):
    """Base class for expected, user-facing booking failures."""


class ValidationError(BookingError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidTransitionError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__("status", message)


class RateLimitedError(BookingError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(f"too many attempts, retry in {retry_after:.0f}s")
        self.retry_after = retry_after


class CapacityExceededError(BookingError):
    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(f"capacity exceeded: requested {requested}, remaining {remaining}")
        self.requested = requested
        self.remaining = remaining


class ReservationNotFoundError(BookingError):
    pass


class PersistenceError(BookingError):
    """The durable store could not be written; the change may be lost."""


class RemoteUnavailableError(BookingError):
    pass


class InvalidCredentialsError(BookingError):
    pass
