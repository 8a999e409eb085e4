# 📄 File: sprout/modules/messaging/infrastructure/database/chat_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves conversations and messages and reads them back in the right order.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of ChatRepository. Adding a message and bumping the chat's
# last message happen in the same flush.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, ChatModel, MessageModel
#
# 🔄 Connected Modules / Calls From:
# - ChatService via FastAPI dependency overrides

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.messaging.domain.models.chat import Chat, Message, ParticipantDetails
from sprout.modules.messaging.domain.repositories.chat_repository import ChatRepository
from sprout.modules.messaging.infrastructure.database.models import ChatModel, MessageModel
from sprout.shared.core.exceptions import RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class ChatRepositoryImpl(ChatRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def get_by_id(self, chat_id: str) -> Optional[Chat]:
        model = await self._session.get(ChatModel, chat_id)
        return self._chat_to_domain(model) if model else None

    async def create(self, chat: Chat) -> Chat:
        user_a, user_b = sorted(chat.participants)
        model = ChatModel(
            id=chat.id,
            user_a=user_a,
            user_b=user_b,
            participant_details={uid: d.model_dump() for uid, d in chat.participant_details.items()},
            last_message=chat.last_message,
            last_message_timestamp=chat.last_message_timestamp,
            created_at=chat.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        logger.info(f"Created chat {chat.id}")
        return self._chat_to_domain(model)

    async def list_for_user(self, user_id: str) -> List[Chat]:
        result = await self._session.execute(
            select(ChatModel)
            .where(or_(ChatModel.user_a == user_id, ChatModel.user_b == user_id))
            .order_by(ChatModel.last_message_timestamp.desc())
        )
        return [self._chat_to_domain(m) for m in result.scalars().all()]

    async def add_message(self, message: Message) -> Message:
        chat = await self._session.get(ChatModel, message.chat_id)
        if chat is None:
            raise RepositoryError(
                f"Cannot add message to missing chat {message.chat_id}", operation="add_message", entity="chat"
            )

        model = MessageModel(
            id=message.id,
            chat_id=message.chat_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            text=message.text,
            timestamp=message.timestamp,
            read=message.read,
        )
        self._session.add(model)
        chat.last_message = message.text
        chat.last_message_timestamp = message.timestamp
        await self._session.flush()
        return self._message_to_domain(model)

    async def list_messages(self, chat_id: str, since: Optional[datetime] = None) -> List[Message]:
        stmt = select(MessageModel).where(MessageModel.chat_id == chat_id)
        if since is not None:
            stmt = stmt.where(MessageModel.timestamp > since)
        stmt = stmt.order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())

        result = await self._session.execute(stmt)
        return [self._message_to_domain(m) for m in result.scalars().all()]

    async def mark_read(self, chat_id: str, receiver_id: str) -> int:
        result = await self._session.execute(
            update(MessageModel)
            .where(
                MessageModel.chat_id == chat_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        return result.rowcount

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _chat_to_domain(self, model: ChatModel) -> Chat:
        return Chat(
            id=model.id,
            participants=[model.user_a, model.user_b],
            participant_details={
                uid: ParticipantDetails(**details) for uid, details in (model.participant_details or {}).items()
            },
            last_message=model.last_message,
            last_message_timestamp=ensure_utc(model.last_message_timestamp),
            created_at=ensure_utc(model.created_at),
        )

    def _message_to_domain(self, model: MessageModel) -> Message:
        return Message(
            id=model.id,
            chat_id=model.chat_id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            text=model.text,
            timestamp=ensure_utc(model.timestamp),
            read=bool(model.read),
        )
