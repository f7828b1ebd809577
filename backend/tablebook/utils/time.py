from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

MADRID = ZoneInfo("Europe/Madrid")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def local_date(now: datetime, tz: ZoneInfo = MADRID) -> date:
    """Calendar day at the restaurant for the instant `now`."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def tomorrow(now: datetime, tz: ZoneInfo = MADRID) -> date:
    return local_date(now, tz) + timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string. Raises ValueError otherwise."""
    if len(value) != 10:
        raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
    return date.fromisoformat(value)


def is_future_date(day: date, now: datetime, tz: ZoneInfo = MADRID, *, allow_today: bool = False) -> bool:
    today = local_date(now, tz)
    return day >= today if allow_today else day > today


def weekday(day: date) -> int:
    """Monday == 0 ... Sunday == 6."""
    return day.weekday()


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600
