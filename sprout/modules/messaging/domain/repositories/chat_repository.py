"""
Repository interface for chats and their messages.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models.chat import Chat, Message


class ChatRepository(ABC):

    @abstractmethod
    async def get_by_id(self, chat_id: str) -> Optional[Chat]:
        pass

    @abstractmethod
    async def create(self, chat: Chat) -> Chat:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[Chat]:
        """Chats the user takes part in, most recent activity first."""
        pass

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        """Store the message and make it the chat's last message."""
        pass

    @abstractmethod
    async def list_messages(self, chat_id: str, since: Optional[datetime] = None) -> List[Message]:
        """Messages oldest first; with `since`, only those strictly after it."""
        pass

    @abstractmethod
    async def mark_read(self, chat_id: str, receiver_id: str) -> int:
        """Mark messages received by `receiver_id` as read. Returns how many changed."""
        pass
