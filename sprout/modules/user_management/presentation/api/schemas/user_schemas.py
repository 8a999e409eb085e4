# 📄 File: sprout/modules/user_management/presentation/api/schemas/user_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of profile information going in and out of the app: the private view a member
# sees of themselves and the public view everyone else sees.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for profile creation, partial updates and
# owner-versus-public profile serialization.
#
# 🔗 Dependencies:
# - pydantic
# - User domain model
#
# 🔄 Connected Modules / Calls From:
# - sprout.modules.user_management.presentation.api.v1.users

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.modules.user_management.domain.models.user import User


class ProfileCreateRequest(BaseModel):
    """First-use profile setup; the email comes from the access token."""

    username: str = Field(..., min_length=3, max_length=30, description="Public display name")

    model_config = ConfigDict(json_schema_extra={"example": {"username": "fern_fanatic"}})


class ProfileUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(
        json_schema_extra={"example": {"bio": "Collector of rare aroids", "location": "Austin, TX"}}
    )


class SubscriptionResponse(BaseModel):
    status: str
    expiry_date: Optional[datetime] = None


class PublicProfileResponse(BaseModel):
    """Profile as seen by other members."""

    user_id: str
    username: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    joined_date: datetime
    plants_listed: int
    plants_traded: int
    reward_points: int
    followers_count: int
    following_count: int
    is_pro: bool

    @classmethod
    def from_domain(cls, user: User) -> "PublicProfileResponse":
        return cls(
            user_id=user.user_id,
            username=user.username,
            bio=user.bio,
            avatar_url=user.avatar_url,
            location=user.location,
            joined_date=user.joined_date,
            plants_listed=user.plants_listed,
            plants_traded=user.plants_traded,
            reward_points=user.reward_points,
            followers_count=len(user.followers),
            following_count=len(user.following),
            is_pro=user.is_pro,
        )


class ProfileResponse(PublicProfileResponse):
    """The caller's own profile."""

    email: Optional[str] = None
    updated_at: datetime
    favorite_plants: List[str]
    followers: List[str]
    following: List[str]
    subscription: SubscriptionResponse
    stripe_account_id: Optional[str] = None
    stripe_details_submitted: bool

    @classmethod
    def from_domain(cls, user: User) -> "ProfileResponse":
        public = PublicProfileResponse.from_domain(user).model_dump()
        return cls(
            **public,
            email=user.email,
            updated_at=user.updated_at,
            favorite_plants=user.favorite_plants,
            followers=user.followers,
            following=user.following,
            subscription=SubscriptionResponse(
                status=user.subscription.status,
                expiry_date=user.subscription.expiry_date,
            ),
            stripe_account_id=user.stripe_account_id,
            stripe_details_submitted=user.stripe_details_submitted,
        )


class WishlistResponse(BaseModel):
    favorite_plants: List[str]


class FollowResponse(BaseModel):
    following: List[str]
