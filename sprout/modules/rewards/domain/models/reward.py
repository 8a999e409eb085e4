# 📄 File: sprout/modules/rewards/domain/models/reward.py
# 🧭 Purpose (Layman Explanation):
# Describes reward points: each time points are earned or spent a receipt is kept,
# and members climb growth tiers as their balance grows.
# 🧪 Purpose (Technical Summary):
# RewardTransaction model and the tier ladder with progress computation.
# 🔗 Dependencies:
# pydantic, sprout.shared.utils.helpers
# 🔄 Connected Modules / Calls From:
# reward_service.py, reward repository, rewards API

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import generate_id, utc_now


class TransactionType(str, Enum):
    EARN = "earn"
    SPEND = "spend"


class RewardTransaction(BaseModel):
    """One entry in a user's points history."""

    id: str = Field(default_factory=generate_id)
    user_id: str
    type: TransactionType
    points: int = Field(..., gt=0)
    description: str
    timestamp: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(use_enum_values=True)


class RewardTier(BaseModel):
    name: str
    min_points: int


# Ordered lowest to highest
REWARD_TIERS: List[RewardTier] = [
    RewardTier(name="Sproutling", min_points=0),
    RewardTier(name="Seedling", min_points=100),
    RewardTier(name="Grower", min_points=250),
    RewardTier(name="Cultivator", min_points=500),
    RewardTier(name="Botanist", min_points=1000),
]


class TierInfo(BaseModel):
    current_tier: RewardTier
    next_tier: Optional[RewardTier] = None
    progress: int
    points_for_next_tier: int


def get_tier_info(points: int) -> TierInfo:
    """
    Place a balance on the tier ladder.

    Progress is the rounded percentage of the way from the current tier's
    threshold to the next one; the top tier always reports 100.
    """
    points = max(points, 0)
    current = REWARD_TIERS[0]
    next_tier: Optional[RewardTier] = None

    for index, tier in enumerate(REWARD_TIERS):
        if points >= tier.min_points:
            current = tier
            next_tier = REWARD_TIERS[index + 1] if index + 1 < len(REWARD_TIERS) else None

    if next_tier is None:
        return TierInfo(current_tier=current, next_tier=None, progress=100, points_for_next_tier=0)

    span = next_tier.min_points - current.min_points
    progress = round((points - current.min_points) / span * 100)
    return TierInfo(
        current_tier=current,
        next_tier=next_tier,
        progress=progress,
        points_for_next_tier=next_tier.min_points - points,
    )
