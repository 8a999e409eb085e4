# 📄 File: sprout/modules/rewards/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# The table of point receipts: every earn and every spend, per member.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for RewardTransaction rows keyed to users.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM, shared Base
#
# 🔄 Connected Modules / Calls From:
# - reward_repository_impl.py, migrations/versions

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, func

from sprout.shared.infrastructure.database.connection import Base


class RewardTransactionModel(Base):
    __tablename__ = "reward_transactions"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False
    )
    type = Column(String(10), nullable=False)
    points = Column(Integer, nullable=False)
    description = Column(String(255), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        CheckConstraint("points > 0", name="ck_reward_transactions_points_positive"),
        CheckConstraint("type IN ('earn', 'spend')", name="ck_reward_transactions_type"),
        Index("ix_reward_transactions_user_timestamp", "user_id", "timestamp"),
    )
