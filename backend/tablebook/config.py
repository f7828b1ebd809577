from functools import lru_cache
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator


load_dotenv()

DEFAULT_MIDDAY_SLOTS = ["13:00", "13:30", "14:00", "14:30", "15:00", "15:30"]
DEFAULT_EVENING_SLOTS = ["20:00", "20:30", "21:00", "21:30", "22:00", "22:30"]


class Settings(BaseModel):
    database_url: str = Field(default="sqlite:///./tablebook.db")
    echo_sql: bool = Field(default=False)

    auth_secret: str = Field(default="change-me")
    auth_algorithm: str = Field(default="HS256")
    admin_token_minutes: int = Field(default=120, ge=1)

    admin_pin: str = Field(default="2010", min_length=1)
    login_max_attempts: int = Field(default=3, ge=1)
    login_window_ms: int = Field(default=300_000, ge=1)
    login_lockout_ms: int = Field(default=300_000, ge=1)

    submission_max_attempts: int = Field(default=3, ge=1)
    submission_window_ms: int = Field(default=60_000, ge=1)

    timezone: str = Field(default="Europe/Madrid")
    capacity_midday: int = Field(default=15, ge=1)
    capacity_evening: int = Field(default=15, ge=1)
    partial_threshold: int = Field(default=7, ge=1)
    full_threshold: int = Field(default=10, ge=1)
    midday_slots: List[str] = Field(default_factory=lambda: list(DEFAULT_MIDDAY_SLOTS))
    evening_slots: List[str] = Field(default_factory=lambda: list(DEFAULT_EVENING_SLOTS))

    pending_expiry_hours: int = Field(default=24, ge=1)
    history_retention_days: int = Field(default=30, ge=0)
    max_days_ahead: int = Field(default=90, ge=1)
    # Python weekday numbers, Monday == 0.
    closed_weekdays: List[int] = Field(default_factory=lambda: [0])

    # Pending reservations are provisional and do not block other guests.
    pending_holds_capacity: bool = Field(default=False)
    allow_same_day: bool = Field(default=False)

    price_per_cover: int = Field(default=25, ge=0)
    whatsapp_number: str = Field(default="34669670985")
    phone_country_code: str = Field(default="34")

    menu_source_url: Optional[str] = Field(default=None)
    menu_poll_seconds: int = Field(default=30, ge=1)
    max_active_menus: int = Field(default=2, ge=1)

    @field_validator("midday_slots", "evening_slots")
    @classmethod
    def _check_slots(cls, slots: List[str]) -> List[str]:
        if not slots:
            raise ValueError("a service window needs at least one slot")
        for slot in slots:
            hours, sep, minutes = slot.partition(":")
            if not sep or len(hours) != 2 or len(minutes) != 2 or not (hours + minutes).isdigit():
                raise ValueError(f"invalid slot {slot!r}, expected HH:MM")
            if int(hours) > 23 or int(minutes) > 59:
                raise ValueError(f"invalid slot {slot!r}, expected HH:MM")
        return slots

    @field_validator("closed_weekdays")
    @classmethod
    def _check_weekdays(cls, days: List[int]) -> List[int]:
        if any(day < 0 or day > 6 for day in days):
            raise ValueError("closed_weekdays must be within 0..6")
        return days

    @model_validator(mode="after")
    def _check_policy(self) -> "Settings":
        if self.partial_threshold > self.full_threshold:
            raise ValueError("partial_threshold must not exceed full_threshold")
        overlap = set(self.midday_slots) & set(self.evening_slots)
        if overlap:
            raise ValueError(f"slots shared by both windows: {sorted(overlap)}")
        return self


def _env_list(name: str) -> Optional[List[str]]:
    raw = os.getenv(name)
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    defaults = Settings.model_fields
    values: dict[str, object] = {
        "database_url": os.getenv("DATABASE_URL", defaults["database_url"].default),
        "echo_sql": bool(int(os.getenv("ECHO_SQL", "0"))),
        "auth_secret": os.getenv("AUTH_SECRET", defaults["auth_secret"].default),
        "admin_token_minutes": int(os.getenv("ADMIN_TOKEN_MINUTES", "120")),
        "admin_pin": os.getenv("ADMIN_PIN", defaults["admin_pin"].default),
        "login_max_attempts": int(os.getenv("LOGIN_MAX_ATTEMPTS", "3")),
        "login_window_ms": int(os.getenv("LOGIN_WINDOW_MS", "300000")),
        "login_lockout_ms": int(os.getenv("LOGIN_LOCKOUT_MS", "300000")),
        "submission_max_attempts": int(os.getenv("SUBMISSION_MAX_ATTEMPTS", "3")),
        "submission_window_ms": int(os.getenv("SUBMISSION_WINDOW_MS", "60000")),
        "timezone": os.getenv("TIMEZONE", defaults["timezone"].default),
        "capacity_midday": int(os.getenv("CAPACITY_MIDDAY", "15")),
        "capacity_evening": int(os.getenv("CAPACITY_EVENING", "15")),
        "partial_threshold": int(os.getenv("PARTIAL_THRESHOLD", "7")),
        "full_threshold": int(os.getenv("FULL_THRESHOLD", "10")),
        "pending_expiry_hours": int(os.getenv("PENDING_EXPIRY_HOURS", "24")),
        "history_retention_days": int(os.getenv("HISTORY_RETENTION_DAYS", "30")),
        "max_days_ahead": int(os.getenv("MAX_DAYS_AHEAD", "90")),
        "allow_same_day": bool(int(os.getenv("ALLOW_SAME_DAY", "0"))),
        "pending_holds_capacity": bool(int(os.getenv("PENDING_HOLDS_CAPACITY", "0"))),
        "price_per_cover": int(os.getenv("PRICE_PER_COVER", "25")),
        "whatsapp_number": os.getenv("WHATSAPP_NUMBER", defaults["whatsapp_number"].default),
        "phone_country_code": os.getenv("PHONE_COUNTRY_CODE", defaults["phone_country_code"].default),
        "menu_source_url": os.getenv("MENU_SOURCE_URL") or None,
        "menu_poll_seconds": int(os.getenv("MENU_POLL_SECONDS", "30")),
        "max_active_menus": int(os.getenv("MAX_ACTIVE_MENUS", "2")),
    }
    midday = _env_list("MIDDAY_SLOTS")
    if midday is not None:
        values["midday_slots"] = midday
    evening = _env_list("EVENING_SLOTS")
    if evening is not None:
        values["evening_slots"] = evening
    closed = _env_list("CLOSED_WEEKDAYS")
    if closed is not None:
        values["closed_weekdays"] = [int(day) for day in closed]
    return Settings(**values)
