"""
Request/response schemas for chats and messages.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sprout.modules.messaging.domain.models.chat import Chat, Message


class ChatCreateRequest(BaseModel):
    other_user_id: str = Field(..., min_length=1, description="Member to chat with")


class MessageCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class ParticipantDetailsResponse(BaseModel):
    username: str
    avatar_url: Optional[str] = None


class ChatResponse(BaseModel):
    id: str
    participants: List[str]
    participant_details: Dict[str, ParticipantDetailsResponse]
    last_message: str
    last_message_timestamp: datetime
    created_at: datetime

    @classmethod
    def from_domain(cls, chat: Chat) -> "ChatResponse":
        return cls(**chat.model_dump())


class ChatListResponse(BaseModel):
    chats: List[ChatResponse]


class MessageResponse(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    receiver_id: str
    text: str
    timestamp: datetime
    read: bool

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls(**message.model_dump())


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]


class MarkReadResponse(BaseModel):
    updated: int
