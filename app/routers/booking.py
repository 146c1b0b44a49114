from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app import policies
from app.cache import invalidate_stats_cache
from app.crud import account_crud, booking_crud
from app.deps import CurrentUser, get_current_user, require_super_admin
from app.models import BookingStatus
from app.schemas import (
    BookingAssignment,
    BookingCreate,
    BookingFilters,
    BookingResponse,
    BookingStatusUpdate,
    ReceiptsUpdate,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Transition guard helpers
# ---------------------------------------------------------------------------

_VALID_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.INQUIRY: {BookingStatus.CONFIRMED},
    BookingStatus.CONFIRMED: {BookingStatus.CLEARED},
    BookingStatus.CLEARED: set(),
}

# Target statuses only a super-admin may move a booking into
_SUPER_ADMIN_STATUSES = {BookingStatus.CLEARED}


def _assert_transition(
    old_status: BookingStatus,
    new_status: BookingStatus,
    current_user: CurrentUser,
) -> None:
    """
    Raise HTTP 400/403 if the transition is invalid or the caller lacks the role.

    Rules:
      inquiry   → confirmed : assigned admin, OR super_admin
      confirmed → cleared   : super_admin
    Nothing ever moves backwards.
    """
    if new_status not in _VALID_TRANSITIONS.get(old_status, set()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Cannot transition from '{old_status}' to '{new_status}'. "
                "Allowed: "
                f"{[s.value for s in _VALID_TRANSITIONS.get(old_status, set())]}"
            ),
        )

    if new_status in _SUPER_ADMIN_STATUSES and not current_user.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only a super admin can move a booking to '{new_status}'.",
        )


async def _get_updatable(booking_id: UUID, current_user: CurrentUser) -> BookingResponse:
    """
    Load a booking the caller can see and check the update rule on it.
    Invisible rows are 404; visible rows the caller may not change are 403.
    """
    booking = await booking_crud.get_booking(current_user, booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    if not policies.can_update_booking(current_user, booking):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the assigned admin or a super admin can update this booking",
        )
    return booking


def _not_found_if_none(booking: BookingResponse | None) -> BookingResponse:
    # The scoped update matched no row, e.g. the booking vanished in between
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return booking


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    filters: BookingFilters = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
) -> list[BookingResponse]:
    return await booking_crud.list_bookings(current_user, filters=filters)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    if not policies.can_insert_booking(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Cannot submit bookings"
        )
    booking = await booking_crud.create_booking(current_user, payload)
    logger.info("Booking {} submitted by {}", booking.id, current_user.id)
    await invalidate_stats_cache()
    return booking


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking = await booking_crud.get_booking(current_user, booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return booking


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    payload: BookingStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking = await _get_updatable(booking_id, current_user)
    _assert_transition(booking.status, payload.status, current_user)

    updated = await booking_crud.update_booking_status(
        current_user, booking_id, payload.status, expected_status=booking.status
    )
    if updated is None:
        # Either the row is gone or its status moved after it was read
        _not_found_if_none(await booking_crud.get_booking(current_user, booking_id))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Booking status changed meanwhile, reload and retry",
        )
    logger.info(
        "Booking {} moved {} -> {} by {}",
        booking_id,
        booking.status,
        payload.status,
        current_user.id,
    )
    await invalidate_stats_cache()
    return updated


@router.patch("/{booking_id}/assignment", response_model=BookingResponse)
async def assign_booking(
    booking_id: UUID,
    payload: BookingAssignment,
    current_user: CurrentUser = Depends(require_super_admin),
) -> BookingResponse:
    await _get_updatable(booking_id, current_user)

    if payload.assigned_admin_id is not None:
        admin = await account_crud.get_staff_member(payload.assigned_admin_id)
        if admin is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Bookings can only be assigned to an admin or super admin",
            )

    updated = _not_found_if_none(
        await booking_crud.assign_booking(
            current_user, booking_id, payload.assigned_admin_id
        )
    )
    logger.info(
        "Booking {} assigned to {} by {}",
        booking_id,
        payload.assigned_admin_id,
        current_user.id,
    )
    await invalidate_stats_cache()
    return updated


@router.patch("/{booking_id}/receipts", response_model=BookingResponse)
async def update_receipts(
    booking_id: UUID,
    payload: ReceiptsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
) -> BookingResponse:
    booking = await _get_updatable(booking_id, current_user)

    if booking.status != BookingStatus.CONFIRMED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Receipts can only be recorded while a booking is confirmed",
        )

    if payload.receipts_approved is not None:
        if not current_user.is_super_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only a super admin can approve receipts",
            )
        uploaded = (
            payload.receipts_uploaded
            if payload.receipts_uploaded is not None
            else booking.receipts_uploaded
        )
        if payload.receipts_approved and not uploaded:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Receipts must be uploaded before they can be approved",
            )

    # Withdrawn receipts cannot stay approved
    if payload.receipts_uploaded is False and payload.receipts_approved is None:
        payload = payload.model_copy(update={"receipts_approved": False})

    return _not_found_if_none(
        await booking_crud.update_receipts(current_user, booking_id, payload)
    )
