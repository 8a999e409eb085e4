# 📄 File: sprout/modules/user_management/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the "users" table: one row per marketplace member with their profile,
# counters, wishlist and payment account references.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the User aggregate. List-valued fields are JSON columns and
# the subscription is flattened into two columns.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - sprout.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - user_repository_impl.py (CRUD operations)
# - migrations/versions (schema generation)

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    func,
)

from sprout.shared.infrastructure.database.connection import Base


class UserModel(Base):
    """
    SQLAlchemy model for marketplace members.

    The primary key is the auth provider uid, not a generated value.
    """
    __tablename__ = "users"

    user_id = Column(String(128), primary_key=True, comment="Auth provider uid")

    # Public profile
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    location = Column(String(255), nullable=True)

    joined_date = Column(DateTime(timezone=True), nullable=False, default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now())

    # Counters
    plants_listed = Column(Integer, nullable=False, default=0)
    plants_traded = Column(Integer, nullable=False, default=0)
    reward_points = Column(Integer, nullable=False, default=0)

    # Set-like lists of ids
    favorite_plants = Column(JSON, nullable=False, default=list, comment="Wishlisted listing ids")
    followers = Column(JSON, nullable=False, default=list)
    following = Column(JSON, nullable=False, default=list)

    # Subscription
    subscription_status = Column(String(10), nullable=False, default="free")
    subscription_expiry = Column(DateTime(timezone=True), nullable=True)

    # Stripe
    stripe_account_id = Column(String(255), nullable=True, comment="Connect account for payouts")
    stripe_details_submitted = Column(Boolean, nullable=False, default=False)
    stripe_customer_id = Column(String(255), nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("reward_points >= 0", name="ck_users_reward_points_non_negative"),
        CheckConstraint("subscription_status IN ('free', 'pro')", name="ck_users_subscription_status"),
    )

    def __repr__(self) -> str:
        return f"<UserModel(user_id={self.user_id}, username={self.username})>"
