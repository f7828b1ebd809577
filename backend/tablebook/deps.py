from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import session_factory
from .domain.rate_limiter import RateLimiter
from .infrastructure.menu import MenuCatalog
from .infrastructure.repositories import SqlAlchemyBlockedDayRepository, SqlAlchemyReservationStore
from .usecases.reservations import BookingWorkflow
from .utils.auth import decode_access_token


async def get_session() -> AsyncIterator[Session]:
    with session_factory() as session:
        yield session


@lru_cache
def get_rate_limiter() -> RateLimiter:
    # One limiter per process; callers keep their keys apart.
    return RateLimiter()


async def get_workflow(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> BookingWorkflow:
    return BookingWorkflow(
        SqlAlchemyReservationStore(session),
        SqlAlchemyBlockedDayRepository(session),
        rate_limiter,
        settings,
    )


async def get_menu_catalog(request: Request) -> MenuCatalog:
    catalog = getattr(request.app.state, "menu_catalog", None)
    if catalog is None:
        settings = get_settings()
        catalog = MenuCatalog(settings.menu_source_url, max_active=settings.max_active_menus)
        request.app.state.menu_catalog = catalog
    return catalog


async def require_admin(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    if authorization is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(token, secret=settings.auth_secret, algorithms=[settings.auth_algorithm])
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
