# 📄 File: sprout/modules/notifications/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# The table behind the notification bell.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for per-user notifications with an unread lookup index.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM, shared Base
#
# 🔄 Connected Modules / Calls From:
# - notification_repository_impl.py, migrations/versions

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, func

from sprout.shared.infrastructure.database.connection import Base


class NotificationModel(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False
    )
    type = Column(String(20), nullable=False)
    message = Column(String(500), nullable=False)
    link = Column(String(500), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
        Index("ix_notifications_user_unread", "user_id", "is_read"),
    )
