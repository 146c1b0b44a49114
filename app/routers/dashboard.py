from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from app.cache import get_stats_cache, set_stats_cache
from app.crud import account_crud, booking_crud
from app.deps import CurrentUser, require_staff, require_super_admin
from app.models import BookingStatus
from app.roles import AccountRole
from app.schemas import (
    AdminConversionStats,
    BookingResponse,
    CalendarEvent,
    SuperAdminOverview,
)
from app.stats import (
    average_conversion_rate,
    calendar_events,
    month_bounds,
    total_revenue,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


async def _admin_stats() -> list[AdminConversionStats]:
    cached = await get_stats_cache()
    if cached is not None:
        logger.debug("Cache hit for admin conversion stats")
        return [AdminConversionStats(**s) for s in cached]

    logger.debug("Cache miss for admin conversion stats")
    stats = await booking_crud.admin_conversion_stats()
    await set_stats_cache([s.model_dump(mode="json") for s in stats])
    return stats


def _parse_month(month: str | None) -> tuple[int, int]:
    if month is None:
        today = date.today()
        return today.year, today.month
    year, _, mon = month.partition("-")
    if int(year) < date.min.year or not (1 <= int(mon) <= 12):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="month must be in YYYY-MM format",
        )
    return int(year), int(mon)


@router.get("/admin", response_model=list[BookingResponse])
async def admin_dashboard(
    booking_status: BookingStatus = Query(default=BookingStatus.INQUIRY, alias="status"),
    current_user: CurrentUser = Depends(require_staff),
) -> list[BookingResponse]:
    """One tab of the admin dashboard: bookings in a given status."""
    return await booking_crud.list_dashboard_bookings(current_user, booking_status)


@router.get("/calendar", response_model=list[CalendarEvent])
async def calendar(
    booking_status: BookingStatus = Query(default=BookingStatus.INQUIRY, alias="status"),
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    current_user: CurrentUser = Depends(require_staff),
) -> list[CalendarEvent]:
    year, mon = _parse_month(month)
    start, end = month_bounds(year, mon)
    bookings = await booking_crud.list_dashboard_bookings(
        current_user, booking_status, start=start, end=end
    )
    staff = await account_crud.list_staff()
    return calendar_events(bookings, {a.id: a for a in staff})


@router.get(
    "/stats",
    response_model=list[AdminConversionStats],
    dependencies=[Depends(require_super_admin)],
)
async def admin_conversion_stats() -> list[AdminConversionStats]:
    return await _admin_stats()


@router.get(
    "/overview",
    response_model=SuperAdminOverview,
    dependencies=[Depends(require_super_admin)],
)
async def super_admin_overview() -> SuperAdminOverview:
    stats = await _admin_stats()
    unassigned = await booking_crud.list_unassigned_inquiries()
    staff = await account_crud.list_staff()
    converted = await booking_crud.list_converted()

    return SuperAdminOverview(
        total_admins=sum(1 for a in staff if a.role == AccountRole.ADMIN),
        unassigned_inquiries=unassigned,
        average_conversion_rate=average_conversion_rate(stats),
        total_revenue=total_revenue(converted),
        admin_stats=stats,
    )
