# 📄 File: sprout/modules/messaging/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the tables for conversations and the messages sent in them.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for chats (deterministic id, sorted participant columns) and
# messages (chat-scoped, time-ordered).
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - sprout.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - chat_repository_impl.py
# - migrations/versions

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, String, Text, func

from sprout.shared.infrastructure.database.connection import Base


class ChatModel(Base):
    """SQLAlchemy model for chats."""
    __tablename__ = "chats"

    id = Column(String(257), primary_key=True)
    # Participants sorted, so user_a < user_b
    user_a = Column(String(128), nullable=False, index=True)
    user_b = Column(String(128), nullable=False, index=True)
    participant_details = Column(JSON, nullable=False, default=dict)
    last_message = Column(Text, nullable=False, default="")
    last_message_timestamp = Column(DateTime(timezone=True), nullable=False, default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    def __repr__(self) -> str:
        return f"<ChatModel(id={self.id})>"


class MessageModel(Base):
    """SQLAlchemy model for chat messages."""
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True)
    chat_id = Column(
        String(257),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False
    )
    sender_id = Column(String(128), nullable=False)
    receiver_id = Column(String(128), nullable=False)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=func.now())
    read = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_messages_chat_timestamp", "chat_id", "timestamp"),
        Index("ix_messages_receiver_read", "receiver_id", "read"),
    )

    def __repr__(self) -> str:
        return f"<MessageModel(id={self.id}, chat_id={self.chat_id})>"
