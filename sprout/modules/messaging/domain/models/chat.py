# 📄 File: sprout/modules/messaging/domain/models/chat.py
# 🧭 Purpose (Layman Explanation):
# A private conversation between two members and the messages inside it.
# 🧪 Purpose (Technical Summary):
# Chat and Message domain models. A chat's id is derived from its two participant ids
# (sorted and joined with "_"), so both members always land in the same chat.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# chat_service.py, chat_repository.py, messaging schemas

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sprout.shared.utils.helpers import generate_id, utc_now

CHAT_STARTED_MESSAGE = "Chat started!"


CHAT_ID_SEPARATOR = "_"


def get_chat_document_id(user_id_1: str, user_id_2: str) -> str:
    """
    Chat id for a pair of users; the argument order does not matter.

    Auth uids are UUIDs and never contain the separator. Ids that do are
    rejected, since "a_b" + "c" and "a" + "b_c" would share a chat.

    Raises:
        ValueError: If either id contains the separator
    """
    for user_id in (user_id_1, user_id_2):
        if CHAT_ID_SEPARATOR in user_id:
            raise ValueError(f"User id {user_id!r} cannot contain {CHAT_ID_SEPARATOR!r}")
    return CHAT_ID_SEPARATOR.join(sorted([user_id_1, user_id_2]))


class ParticipantDetails(BaseModel):
    username: str
    avatar_url: Optional[str] = None


class Chat(BaseModel):
    id: str
    participants: List[str] = Field(..., min_length=2, max_length=2)
    participant_details: Dict[str, ParticipantDetails] = Field(default_factory=dict)
    last_message: str = CHAT_STARTED_MESSAGE
    last_message_timestamp: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> Optional[str]:
        others = [p for p in self.participants if p != user_id]
        return others[0] if others else None


class Message(BaseModel):
    id: str = Field(default_factory=generate_id)
    chat_id: str
    sender_id: str
    receiver_id: str
    text: str
    timestamp: datetime = Field(default_factory=utc_now)
    read: bool = False
