# 📄 File: sprout/modules/notifications/domain/services/notification_service.py
# 🧭 Purpose (Layman Explanation):
# Drops a note in someone's notification bell when they get a message, a sale, a comment
# or a new follower, and clears the bell when they have looked.
# 🧪 Purpose (Technical Summary):
# Domain service over NotificationRepository used by other modules as a side effect of
# their own operations, and by the notifications API.
# 🔗 Dependencies:
# NotificationRepository
# 🔄 Connected Modules / Calls From:
# notifications API, ChatService, OrderService, ForumService, UserService (follows)

from typing import List, Optional

from fastapi import Depends

from sprout.modules.notifications.domain.models.notification import Notification, NotificationType
from sprout.modules.notifications.domain.repositories.notification_repository import (
    NotificationRepository,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Domain service for user notifications."""

    def __init__(self, notification_repository: NotificationRepository = Depends()):
        self.notification_repository = notification_repository

    async def create_notification(
        self,
        user_id: str,
        type: NotificationType,
        message: str,
        link: Optional[str] = None,
    ) -> Notification:
        notification = await self.notification_repository.create(
            Notification(user_id=user_id, type=type, message=message, link=link)
        )
        logger.debug(f"Notification {notification.type} created for {user_id}")
        return notification

    async def get_notifications_for_user(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[Notification]:
        return await self.notification_repository.list_for_user(user_id, limit)

    async def get_unread_count(self, user_id: str) -> int:
        return await self.notification_repository.count_unread(user_id)

    async def mark_user_notifications_as_read(self, user_id: str) -> int:
        """
        Mark every unread notification as read.

        Returns:
            Number of notifications updated; nothing is written when all are read
        """
        if await self.notification_repository.count_unread(user_id) == 0:
            return 0
        updated = await self.notification_repository.mark_all_read(user_id)
        logger.info(f"Marked {updated} notifications as read", user_id=user_id)
        return updated
