"""Notification API endpoints; callers only ever see their own."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Query

from campusgig.api.dependencies import CurrentUserDep, NotificationDispatcherDep
from campusgig.api.schemas.common import CountResponse
from campusgig.api.schemas.notification import NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    user_id: CurrentUserDep,
    dispatcher: NotificationDispatcherDep,
    unread_only: bool = False,
    limit: Annotated[Optional[int], Query(ge=1, le=200)] = None,
):
    notifications = await dispatcher.list_for_user(
        user_id, unread_only=unread_only, limit=limit
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(user_id: CurrentUserDep, dispatcher: NotificationDispatcherDep):
    return CountResponse(count=await dispatcher.unread_count(user_id))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(user_id: CurrentUserDep, dispatcher: NotificationDispatcherDep):
    """Mark every unread notification read; returns how many changed."""
    return CountResponse(count=await dispatcher.mark_all_read(user_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    user_id: CurrentUserDep,
    dispatcher: NotificationDispatcherDep,
):
    notification = await dispatcher.mark_read(notification_id, user_id)
    return NotificationResponse.model_validate(notification)
