from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from uuid import UUID

from app.models import Account, Booking, BookingStatus
from app.schemas import (
    TIME_SLOTS,
    AccountResponse,
    AdminConversionStats,
    BookingResponse,
    CalendarEvent,
)

_CONVERTED = {BookingStatus.CONFIRMED, BookingStatus.CLEARED}

DEFAULT_INQUIRY_COLOR = "#6B7280"
DEFAULT_CONFIRMED_COLOR = "#10B981"
CLEARED_COLOR = "#8B5CF6"


def conversion_stats(
    admin: Account, bookings: Iterable[Booking]
) -> AdminConversionStats:
    """
    Aggregate one admin's assigned bookings.

    conversion_rate is confirmed-or-cleared over everything ever assigned,
    as a percentage with one decimal. avg_response_time is the mean of
    (updated_at - created_at) in hours. Both are 0 when nothing is assigned.
    """
    total = 0
    open_inquiries = 0
    converted = 0
    response_seconds = 0.0

    for b in bookings:
        total += 1
        if b.status == BookingStatus.INQUIRY:
            open_inquiries += 1
        elif b.status in _CONVERTED:
            converted += 1
        response_seconds += (b.updated_at - b.created_at).total_seconds()

    if total:
        conversion_rate = round(converted / total * 100, 1)
        avg_response_time = response_seconds / total / 3600
    else:
        conversion_rate = 0.0
        avg_response_time = 0.0

    return AdminConversionStats(
        admin_id=admin.id,
        admin_name=admin.name,
        admin_color=admin.admin_color,
        inquiries_assigned=open_inquiries,
        confirmed_bookings=converted,
        conversion_rate=conversion_rate,
        avg_response_time=avg_response_time,
    )


def average_conversion_rate(stats: list[AdminConversionStats]) -> float:
    if not stats:
        return 0.0
    return round(sum(s.conversion_rate for s in stats) / len(stats), 1)


def total_revenue(bookings: Iterable[BookingResponse]) -> Decimal:
    """Sum of recorded spend on confirmed and cleared bookings."""
    return sum(
        (
            b.total_spend
            for b in bookings
            if b.status in _CONVERTED and b.total_spend is not None
        ),
        Decimal("0.00"),
    )


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def status_color(status: BookingStatus, admin_color: str | None) -> str:
    if status == BookingStatus.INQUIRY:
        return admin_color or DEFAULT_INQUIRY_COLOR
    if status == BookingStatus.CONFIRMED:
        return admin_color or DEFAULT_CONFIRMED_COLOR
    return CLEARED_COLOR


def calendar_events(
    bookings: Iterable[BookingResponse], admins: Mapping[UUID, AccountResponse]
) -> list[CalendarEvent]:
    events = []
    for b in bookings:
        admin = admins.get(b.assigned_admin_id) if b.assigned_admin_id else None
        events.append(
            CalendarEvent(
                id=f"{b.id}:{b.event_date.isoformat()}",
                booking_id=b.id,
                title=f"{b.client_name} - {b.facility}",
                event_date=b.event_date,
                time_slot=b.time_slot,
                status=b.status,
                color=status_color(b.status, admin.admin_color if admin else None),
                admin_name=admin.name if admin else None,
            )
        )
    events.sort(key=lambda e: (e.event_date, _slot_order(e.time_slot)))
    return events


def _slot_order(time_slot: str) -> int:
    try:
        return TIME_SLOTS.index(time_slot)
    except ValueError:
        return len(TIME_SLOTS)
