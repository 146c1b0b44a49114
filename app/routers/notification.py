from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from app import policies
from app.crud import notification_crud
from app.deps import CurrentUser, get_current_user
from app.schemas import NotificationCreate, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    unread: bool = False,
    current_user: CurrentUser = Depends(get_current_user),
) -> list[NotificationResponse]:
    return await notification_crud.list_notifications(current_user, unread_only=unread)


@router.post(
    "/", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED
)
async def create_notification(
    payload: NotificationCreate,
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationResponse:
    if not policies.can_insert_notification(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Cannot create notifications"
        )
    notification = await notification_crud.create_notification(payload)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Target account or booking not found",
        )
    return notification


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationResponse:
    # Someone else's notification matches zero rows and reads as not found
    notification = await notification_crud.mark_read(current_user, notification_id)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    return notification
