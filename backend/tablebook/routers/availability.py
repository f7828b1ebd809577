from datetime import date

from fastapi import APIRouter, Depends, Query

from ..deps import get_menu_catalog, get_workflow
from ..domain.errors import BookingError
from ..infrastructure.menu import MenuCatalog
from ..schemas import DayAvailability, MenuRead, SlotCheckRead, WindowAvailability
from ..usecases import availability as availability_usecase
from ..usecases.reservations import BookingWorkflow
from ..utils.time import utc_now
from .errors import http_error

router = APIRouter(prefix="", tags=["availability"])


@router.get("/availability/check", response_model=SlotCheckRead)
async def check_slot(
    day: date = Query(..., alias="date", description="ISO date YYYY-MM-DD"),
    time: str = Query(..., description="HH:MM slot"),
    party_size: str = Query(..., description="1-8 or 'large'"),
    workflow: BookingWorkflow = Depends(get_workflow),
) -> SlotCheckRead:
    try:
        check = availability_usecase.check_slot(
            workflow, day=day, time=time, party_size=party_size, now=utc_now()
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return SlotCheckRead.from_check(check)


@router.get("/availability/{day}", response_model=DayAvailability)
async def day_availability(
    day: date,
    workflow: BookingWorkflow = Depends(get_workflow),
) -> DayAvailability:
    snapshots = availability_usecase.day_overview(workflow, day=day)
    return DayAvailability(
        date=day,
        open=workflow.is_day_bookable(day, now=utc_now()),
        windows=[WindowAvailability.from_snapshot(snapshot) for snapshot in snapshots],
    )


@router.get("/menu", response_model=MenuRead)
async def active_menu(catalog: MenuCatalog = Depends(get_menu_catalog)) -> MenuRead:
    return MenuRead(images=catalog.active_images(), warning=catalog.warning, refreshed_at=catalog.refreshed_at)
