"""Notification endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from haulbook.api.deps import CurrentActor, get_notification_inbox
from haulbook.schemas.common import ApiResponse, Page
from haulbook.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from haulbook.services.notification_service import NotificationInbox

router = APIRouter()

Inbox = Annotated[NotificationInbox, Depends(get_notification_inbox)]


@router.get("", response_model=ApiResponse[Page[NotificationResponse]])
async def get_notifications(
    actor: CurrentActor,
    inbox: Inbox,
    is_read: bool | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> ApiResponse[Page[NotificationResponse]]:
    """Get user's notifications."""
    notifications, total = await inbox.list_notifications(
        actor.user_id, is_read, (page - 1) * limit, limit
    )
    return ApiResponse[Page[NotificationResponse]](
        message="Notifications retrieved successfully",
        data=Page[NotificationResponse].build(
            [NotificationResponse.model_validate(n) for n in notifications], total, page, limit
        ),
    )


@router.get("/unread-count", response_model=ApiResponse[UnreadCountResponse])
async def get_unread_count(
    actor: CurrentActor,
    inbox: Inbox,
) -> ApiResponse[UnreadCountResponse]:
    count = await inbox.unread_count(actor.user_id)
    return ApiResponse[UnreadCountResponse](
        message="Unread count retrieved successfully",
        data=UnreadCountResponse(unread_count=count),
    )


@router.put("/mark-all-read", response_model=ApiResponse[MarkAllReadResponse])
async def mark_all_as_read(
    actor: CurrentActor,
    inbox: Inbox,
) -> ApiResponse[MarkAllReadResponse]:
    updated = await inbox.mark_all_read(actor.user_id)
    return ApiResponse[MarkAllReadResponse](
        message="All notifications marked as read",
        data=MarkAllReadResponse(updated=updated),
    )


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_as_read(
    notification_id: UUID,
    actor: CurrentActor,
    inbox: Inbox,
) -> ApiResponse[NotificationResponse]:
    notification = await inbox.mark_read(actor.user_id, notification_id)
    return ApiResponse[NotificationResponse](
        message="Notification marked as read",
        data=NotificationResponse.model_validate(notification),
    )


@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    notification_id: UUID,
    actor: CurrentActor,
    inbox: Inbox,
) -> ApiResponse[None]:
    await inbox.delete(actor.user_id, notification_id)
    return ApiResponse[None](message="Notification deleted successfully")
