# 📄 File: sprout/modules/messaging/domain/services/chat_service.py
# 🧭 Purpose (Layman Explanation):
# Lets two members talk privately: opens (or reopens) their conversation, sends messages,
# shows new messages and clears the unread marker.
# 🧪 Purpose (Technical Summary):
# Domain service for one-to-one chats. Chat ids are derived from the participant pair,
# every operation is restricted to participants, and new messages notify the receiver.
# Clients poll get_messages with `since` for incremental updates.
# 🔗 Dependencies:
# ChatRepository, UserRepository, NotificationService
# 🔄 Connected Modules / Calls From:
# messaging API

from datetime import datetime
from typing import List, Optional

from fastapi import Depends

from sprout.modules.messaging.domain.models.chat import (
    CHAT_STARTED_MESSAGE,
    Chat,
    Message,
    ParticipantDetails,
    get_chat_document_id,
)
from sprout.modules.messaging.domain.repositories.chat_repository import ChatRepository
from sprout.modules.notifications.domain.models.notification import NotificationType
from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.user_management.domain.models.user import User
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    ChatNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from sprout.shared.utils.helpers import ensure_utc, utc_now
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 2000
NOTIFICATION_PREVIEW_LENGTH = 50


class ChatService:
    """
    Domain service for private messaging.

    Business rules:
    - A chat has exactly two participants and its id is derived from them
    - Only participants can read or write a chat
    - Members cannot chat with themselves
    """

    def __init__(
        self,
        chat_repository: ChatRepository = Depends(),
        user_repository: UserRepository = Depends(),
        notification_service: NotificationService = Depends(),
    ):
        self.chat_repository = chat_repository
        self.user_repository = user_repository
        self.notification_service = notification_service

    async def create_or_get_chat(self, user_id: str, other_user_id: str) -> Chat:
        """
        Return the chat between the two users, creating it on first contact.

        Raises:
            BusinessRuleViolationError: Chatting with yourself
            UserNotFoundError: The other user does not exist
            ValidationError: A user id cannot form a chat id
        """
        if user_id == other_user_id:
            raise BusinessRuleViolationError("You cannot start a chat with yourself", rule="no_self_chat")

        try:
            chat_id = get_chat_document_id(user_id, other_user_id)
        except ValueError as e:
            raise ValidationError(str(e), field="other_user_id", constraint="chat_id") from e
        existing = await self.chat_repository.get_by_id(chat_id)
        if existing is not None:
            return existing

        other = await self.user_repository.get_by_id(other_user_id)
        if other is None:
            raise UserNotFoundError(other_user_id)
        me = await self.user_repository.get_by_id(user_id)

        now = utc_now()
        chat = await self.chat_repository.create(
            Chat(
                id=chat_id,
                participants=[user_id, other_user_id],
                participant_details={
                    user_id: self._details(me, fallback="User 1"),
                    other_user_id: self._details(other, fallback="User 2"),
                },
                last_message=CHAT_STARTED_MESSAGE,
                last_message_timestamp=now,
                created_at=now,
            )
        )
        logger.log_user_action("start_chat", user_id, resource=f"chat:{chat_id}")
        return chat

    async def get_chat(self, chat_id: str, user_id: str) -> Chat:
        """
        Raises:
            NotFoundError, AuthorizationError
        """
        chat = await self.chat_repository.get_by_id(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        if not chat.has_participant(user_id):
            raise AuthorizationError(
                "You are not a participant of this chat",
                resource_type="chat",
                resource_id=chat_id,
                required_action="read",
                user_id=user_id,
            )
        return chat

    async def send_message(self, chat_id: str, sender_id: str, text: str) -> Message:
        """Send `text` to the other participant and notify them."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message cannot be empty", field="text", constraint="min_length")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters", field="text", constraint="max_length"
            )

        chat = await self.get_chat(chat_id, sender_id)
        receiver_id = chat.other_participant(sender_id)

        message = await self.chat_repository.add_message(
            Message(chat_id=chat_id, sender_id=sender_id, receiver_id=receiver_id, text=text)
        )

        sender_name = chat.participant_details.get(sender_id)
        preview = text if len(text) <= NOTIFICATION_PREVIEW_LENGTH else f"{text[:NOTIFICATION_PREVIEW_LENGTH]}..."
        await self.notification_service.create_notification(
            user_id=receiver_id,
            type=NotificationType.MESSAGE,
            message=f"New message from {sender_name.username if sender_name else 'a member'}: {preview}",
            link=f"/messages/{chat_id}",
        )
        return message

    async def get_messages(
        self, chat_id: str, user_id: str, since: Optional[datetime] = None
    ) -> List[Message]:
        await self.get_chat(chat_id, user_id)
        return await self.chat_repository.list_messages(chat_id, since=ensure_utc(since))

    async def get_user_chats(self, user_id: str) -> List[Chat]:
        return await self.chat_repository.list_for_user(user_id)

    async def get_other_participant_profile(self, chat_id: str, user_id: str) -> User:
        chat = await self.get_chat(chat_id, user_id)
        other_id = chat.other_participant(user_id)
        other = await self.user_repository.get_by_id(other_id) if other_id else None
        if other is None:
            raise UserNotFoundError(other_id or "")
        return other

    async def mark_chat_read(self, chat_id: str, user_id: str) -> int:
        await self.get_chat(chat_id, user_id)
        return await self.chat_repository.mark_read(chat_id, user_id)

    @staticmethod
    def _details(user: Optional[User], fallback: str) -> ParticipantDetails:
        if user is None:
            return ParticipantDetails(username=fallback)
        return ParticipantDetails(username=user.username, avatar_url=user.avatar_url)
