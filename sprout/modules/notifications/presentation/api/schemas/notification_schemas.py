"""
Notification API schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sprout.modules.notifications.domain.models.notification import Notification


class NotificationResponse(BaseModel):
    id: str
    type: str
    message: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            message=notification.message,
            link=notification.link,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int = Field(..., ge=0)


class UnreadCountResponse(BaseModel):
    unread_count: int = Field(..., ge=0)


class MarkReadResponse(BaseModel):
    updated: int = Field(..., ge=0, description="Notifications switched to read")
