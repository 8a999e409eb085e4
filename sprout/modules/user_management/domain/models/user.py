# 📄 File: sprout/modules/user_management/domain/models/user.py
# 🧭 Purpose (Layman Explanation):
# Describes a marketplace member: their public profile, their wishlist of plants, who they
# follow, how many points they have collected and whether they pay for the Pro plan.
# 🧪 Purpose (Technical Summary):
# Domain model for the User aggregate with wishlist and follow-list set semantics,
# subscription state and Stripe account references.
# 🔗 Dependencies:
# pydantic, sprout.shared.utils.helpers
# 🔄 Connected Modules / Calls From:
# user_service.py, user_repository.py, plant listing owner denormalization,
# commerce webhooks (subscription updates), rewards service

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import utc_now


class SubscriptionStatus(str, Enum):
    """Plan a user is on."""
    FREE = "free"
    PRO = "pro"


class Subscription(BaseModel):
    """Subscription state stored on the user."""
    status: SubscriptionStatus = SubscriptionStatus.FREE
    expiry_date: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

    def is_active_pro(self, now: Optional[datetime] = None) -> bool:
        if self.status != SubscriptionStatus.PRO.value:
            return False
        if self.expiry_date is None:
            return True
        return self.expiry_date > (now or utc_now())


class User(BaseModel):
    """
    User domain model.

    The id equals the uid issued by the managed auth provider, so a profile
    is created on the first authenticated call instead of at sign-up.

    Lists (wishlist, followers, following) behave like sets: adding an id that
    is already present is a no-op, removing a missing id is a no-op.
    """

    user_id: str
    username: str
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    location: Optional[str] = None

    joined_date: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    plants_listed: int = 0
    plants_traded: int = 0
    reward_points: int = 0

    favorite_plants: List[str] = Field(default_factory=list)
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)

    subscription: Subscription = Field(default_factory=Subscription)

    stripe_account_id: Optional[str] = None
    stripe_details_submitted: bool = False
    stripe_customer_id: Optional[str] = None

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def create_new(cls, user_id: str, username: str, email: Optional[str] = None) -> "User":
        """Starting values for a brand new member."""
        now = utc_now()
        return cls(
            user_id=user_id,
            username=username,
            email=email,
            joined_date=now,
            updated_at=now,
        )

    # =========================================================================
    # WISHLIST
    # =========================================================================

    def add_to_wishlist(self, plant_id: str) -> bool:
        """Array-union. Returns False when the plant was already there."""
        if plant_id in self.favorite_plants:
            return False
        self.favorite_plants = [*self.favorite_plants, plant_id]
        self.touch()
        return True

    def remove_from_wishlist(self, plant_id: str) -> bool:
        if plant_id not in self.favorite_plants:
            return False
        self.favorite_plants = [p for p in self.favorite_plants if p != plant_id]
        self.touch()
        return True

    # =========================================================================
    # FOLLOWS
    # =========================================================================

    def add_following(self, user_id: str) -> bool:
        if user_id in self.following:
            return False
        self.following = [*self.following, user_id]
        return True

    def remove_following(self, user_id: str) -> bool:
        if user_id not in self.following:
            return False
        self.following = [u for u in self.following if u != user_id]
        return True

    def add_follower(self, user_id: str) -> bool:
        if user_id in self.followers:
            return False
        self.followers = [*self.followers, user_id]
        return True

    def remove_follower(self, user_id: str) -> bool:
        if user_id not in self.followers:
            return False
        self.followers = [u for u in self.followers if u != user_id]
        return True

    # =========================================================================
    # SUBSCRIPTION
    # =========================================================================

    @property
    def is_pro(self) -> bool:
        return self.subscription.is_active_pro()

    def upgrade_to_pro(self, days: int, expiry_date: Optional[datetime] = None) -> None:
        """Set Pro until expiry_date, or for `days` from now."""
        self.subscription = Subscription(
            status=SubscriptionStatus.PRO,
            expiry_date=expiry_date or utc_now() + timedelta(days=days),
        )
        self.touch()

    def downgrade_to_free(self) -> None:
        self.subscription = Subscription(status=SubscriptionStatus.FREE, expiry_date=None)
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()
