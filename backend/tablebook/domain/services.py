import re
from dataclasses import dataclass
from typing import Literal, Union

from ..models import LARGE_GROUP_SEATS, MAX_PARTY_SIZE, Availability, ServiceWindow
from .errors import CapacityExceededError, ValidationError

LARGE_GROUP = "large"
MAX_TEXT_LENGTH = 500
MIN_NAME_LENGTH = 3
PHONE_DIGITS = 9

PartySize = Union[int, Literal["large"]]

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)
_NON_DIGIT_RE = re.compile(r"\D")


def sanitize_text(value: str | None) -> str:
    """Strip markup and script vectors, drop control characters, trim and cap at 500 chars."""
    if not value:
        return ""
    text = _SCRIPT_RE.sub("", value)
    text = _TAG_RE.sub("", text)
    text = _JS_SCHEME_RE.sub("", text)
    text = _EVENT_HANDLER_RE.sub("", text)
    text = "".join(ch for ch in text if ch.isprintable() or ch == "\n")
    return text.strip()[:MAX_TEXT_LENGTH]


def normalize_phone(value: str | None) -> str:
    digits = _NON_DIGIT_RE.sub("", value or "")
    if len(digits) != PHONE_DIGITS:
        raise ValidationError("phone", f"phone must have exactly {PHONE_DIGITS} digits")
    return digits


def validate_name(value: str | None, *, min_length: int = MIN_NAME_LENGTH) -> str:
    name = sanitize_text(value)
    if len(name) < min_length:
        if min_length <= 1:
            raise ValidationError("name", "name is required")
        raise ValidationError("name", f"name must have at least {min_length} characters")
    return name


def parse_party_size(value: object) -> tuple[int, bool]:
    """
    Return (seat weight, is_large_group) for a party size given as 1..8 or the
    large-group sentinel.
    """
    if value == LARGE_GROUP:
        return LARGE_GROUP_SEATS, True
    if isinstance(value, bool) or value is None:
        raise ValidationError("party_size", "party size is required")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("party_size", f"party size must be a whole number, got {value!r}")
    try:
        size = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValidationError("party_size", f"invalid party size {value!r}") from exc
    if size < 1 or size > MAX_PARTY_SIZE:
        raise ValidationError("party_size", f"party size must be between 1 and {MAX_PARTY_SIZE} or '{LARGE_GROUP}'")
    return size, False


@dataclass(frozen=True)
class WindowSnapshot:
    window: ServiceWindow
    capacity: int
    occupied: int
    partial_threshold: int
    full_threshold: int

    @property
    def remaining(self) -> int:
        return self.capacity - self.occupied

    @property
    def status(self) -> Availability:
        return classify(self.occupied, self.capacity, self.partial_threshold, self.full_threshold)


def classify(occupied: int, capacity: int, partial_threshold: int, full_threshold: int) -> Availability:
    if occupied >= full_threshold or occupied >= capacity:
        return Availability.FULL
    if occupied >= partial_threshold:
        return Availability.PARTIAL
    return Availability.AVAILABLE


def validate_capacity(snapshot: WindowSnapshot, *, seats: int) -> int:
    """
    Pure validation: ensures the window still has room for `seats`.
    Returns remaining capacity after booking if OK. Raises CapacityExceededError otherwise.
    """
    if seats <= 0:
        raise ValidationError("party_size", "party size must be positive")
    remaining = snapshot.remaining
    if seats > remaining:
        raise CapacityExceededError(requested=seats, remaining=remaining)
    return remaining - seats
