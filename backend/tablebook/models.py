from __future__ import annotations

import datetime as dt
from enum import StrEnum
from typing import Optional

from sqlalchemy import CheckConstraint, Enum, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.sqltypes import Boolean, Date, DateTime, Integer, String, Text

MAX_PARTY_SIZE = 8
LARGE_GROUP_SEATS = 10


class Base(DeclarativeBase):
    pass


class ReservationStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ServiceWindow(StrEnum):
    MIDDAY = "midday"
    EVENING = "evening"


class Availability(StrEnum):
    AVAILABLE = "available"
    PARTIAL = "partial"
    FULL = "full"


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint(
            f"large_group OR (party_size >= 1 AND party_size <= {MAX_PARTY_SIZE})",
            name="chk_res_party_size",
        ),
        CheckConstraint("length(phone) = 9", name="chk_res_phone"),
        Index("idx_res_date_time", "date", "time"),
        Index("idx_res_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    phone: Mapped[str] = mapped_column(String(9), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    large_group: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(
            ReservationStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    @property
    def seats(self) -> int:
        """Seat weight counted against a service window."""
        return LARGE_GROUP_SEATS if self.large_group else self.party_size


class BlockedDay(Base):
    __tablename__ = "blocked_days"

    date: Mapped[dt.date] = mapped_column(Date, primary_key=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)
