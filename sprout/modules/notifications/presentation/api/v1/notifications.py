# 📄 File: sprout/modules/notifications/presentation/api/v1/notifications.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the notification bell talks to: list my notifications, how many are
# new, and mark them all as seen.
# 🧪 Purpose (Technical Summary):
# FastAPI router for the caller's notifications.
# 🔗 Dependencies:
# FastAPI, NotificationService, shared auth dependencies
# 🔄 Connected Modules / Calls From:
# sprout.api.v1.router

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.notifications.presentation.api.schemas.notification_schemas import (
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List my notifications",
    description="Notifications for the caller, newest first",
)
async def get_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: CurrentUser = Depends(get_current_user),
    notification_service: NotificationService = Depends(),
) -> NotificationListResponse:
    notifications = await notification_service.get_notifications_for_user(current_user.user_id, limit)
    unread = await notification_service.get_unread_count(current_user.user_id)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_domain(n) for n in notifications],
        unread_count=unread,
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Count unread notifications")
async def get_unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    notification_service: NotificationService = Depends(),
) -> UnreadCountResponse:
    return UnreadCountResponse(
        unread_count=await notification_service.get_unread_count(current_user.user_id)
    )


@router.post("/read", response_model=MarkReadResponse, summary="Mark all notifications as read")
async def mark_notifications_read(
    current_user: CurrentUser = Depends(get_current_user),
    notification_service: NotificationService = Depends(),
) -> MarkReadResponse:
    updated = await notification_service.mark_user_notifications_as_read(current_user.user_id)
    return MarkReadResponse(updated=updated)
