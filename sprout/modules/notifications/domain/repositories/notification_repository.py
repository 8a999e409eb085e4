"""
Repository interface for notifications.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.notification import Notification


class NotificationRepository(ABC):

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[Notification]:
        """Newest first."""
        pass

    @abstractmethod
    async def count_unread(self, user_id: str) -> int:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        """Mark unread notifications read. Returns how many changed."""
        pass
