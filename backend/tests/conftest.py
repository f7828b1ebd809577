from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tablebook.config import Settings
from tablebook.database import init_db
from tablebook.domain.rate_limiter import RateLimiter
from tablebook.infrastructure.repositories import SqlAlchemyBlockedDayRepository, SqlAlchemyReservationStore
from tablebook.models import LARGE_GROUP_SEATS, Reservation, ReservationStatus
from tablebook.usecases.reservations import BookingWorkflow

# Monday 2026-10-19, 12:00 in Madrid.
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
# Friday of the same week.
FUTURE_DAY = date(2026, 10, 23)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def future_day() -> date:
    return FUTURE_DAY


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(engine, expire_on_commit=False, class_=Session)
    with factory() as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings(auth_secret="testsecret")


@pytest.fixture
def store(session: Session) -> SqlAlchemyReservationStore:
    return SqlAlchemyReservationStore(session)


@pytest.fixture
def blocked_days(session: Session) -> SqlAlchemyBlockedDayRepository:
    return SqlAlchemyBlockedDayRepository(session)


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter()


@pytest.fixture
def workflow(
    store: SqlAlchemyReservationStore,
    blocked_days: SqlAlchemyBlockedDayRepository,
    limiter: RateLimiter,
    settings: Settings,
) -> BookingWorkflow:
    return BookingWorkflow(store, blocked_days, limiter, settings)


@pytest.fixture
def make_reservation(store: SqlAlchemyReservationStore) -> Callable[..., Reservation]:
    counter = iter(range(1, 10_000))

    def _make(
        *,
        day: date = FUTURE_DAY,
        time: str = "13:30",
        party_size: int | str = 2,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
        created_at: datetime | None = None,
        name: str = "Ana Ruiz",
    ) -> Reservation:
        large = party_size == "large"
        reservation = Reservation(
            id=f"r{next(counter)}",
            name=name,
            phone="612345678",
            date=day,
            time=time,
            party_size=LARGE_GROUP_SEATS if large else int(party_size),
            large_group=large,
            notes=None,
            status=status,
            created_at=(created_at or NOW - timedelta(hours=1)).astimezone(timezone.utc).replace(tzinfo=None),
        )
        return store.add(reservation)

    return _make
