"""
Reward points API schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.modules.rewards.domain.models.reward import RewardTransaction, TierInfo


class RedeemPointsRequest(BaseModel):
    points: int = Field(..., gt=0, description="Points to spend")
    description: str = Field(..., min_length=1, max_length=255, description="What the points were spent on")

    model_config = ConfigDict(
        json_schema_extra={"example": {"points": 100, "description": "Redeemed for $5 off coupon"}}
    )


class RewardTransactionResponse(BaseModel):
    id: str
    type: str
    points: int
    description: str
    timestamp: datetime

    @classmethod
    def from_domain(cls, transaction: RewardTransaction) -> "RewardTransactionResponse":
        return cls(
            id=transaction.id,
            type=transaction.type,
            points=transaction.points,
            description=transaction.description,
            timestamp=transaction.timestamp,
        )


class TierResponse(BaseModel):
    name: str
    min_points: int


class TierInfoResponse(BaseModel):
    current_tier: TierResponse
    next_tier: Optional[TierResponse] = None
    progress: int = Field(..., ge=0, le=100)
    points_for_next_tier: int

    @classmethod
    def from_domain(cls, info: TierInfo) -> "TierInfoResponse":
        return cls(
            current_tier=TierResponse(**info.current_tier.model_dump()),
            next_tier=TierResponse(**info.next_tier.model_dump()) if info.next_tier else None,
            progress=info.progress,
            points_for_next_tier=info.points_for_next_tier,
        )


class RewardBalanceResponse(BaseModel):
    reward_points: int
    tier: TierInfoResponse


class RewardTransactionListResponse(BaseModel):
    transactions: List[RewardTransactionResponse]
