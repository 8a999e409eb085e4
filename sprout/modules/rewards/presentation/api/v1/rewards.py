# 📄 File: sprout/modules/rewards/presentation/api/v1/rewards.py
# 🧭 Purpose (Layman Explanation):
# Lets members see their points balance and tier, browse their points history,
# and spend points.
# 🧪 Purpose (Technical Summary):
# FastAPI router over RewardService for the authenticated caller.
# 🔗 Dependencies:
# FastAPI, RewardService, reward schemas, shared auth dependencies
# 🔄 Connected Modules / Calls From:
# sprout.api.v1.router

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sprout.modules.rewards.domain.models.reward import get_tier_info
from sprout.modules.rewards.domain.services.reward_service import RewardService
from sprout.modules.rewards.presentation.api.schemas.reward_schemas import (
    RedeemPointsRequest,
    RewardBalanceResponse,
    RewardTransactionListResponse,
    RewardTransactionResponse,
    TierInfoResponse,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/rewards", tags=["Rewards"])


@router.get(
    "",
    response_model=RewardBalanceResponse,
    summary="Get my points balance",
    responses={404: {"description": "Profile not created yet"}},
)
async def get_reward_balance(
    current_user: CurrentUser = Depends(get_current_user),
    reward_service: RewardService = Depends(),
) -> RewardBalanceResponse:
    balance = await reward_service.get_balance(current_user.user_id)
    return RewardBalanceResponse(
        reward_points=balance,
        tier=TierInfoResponse.from_domain(get_tier_info(balance)),
    )


@router.get("/tier", response_model=TierInfoResponse, summary="Get my reward tier")
async def get_reward_tier(
    current_user: CurrentUser = Depends(get_current_user),
    reward_service: RewardService = Depends(),
) -> TierInfoResponse:
    return TierInfoResponse.from_domain(await reward_service.get_tier_for_user(current_user.user_id))


@router.get(
    "/transactions",
    response_model=RewardTransactionListResponse,
    summary="List my points history",
    description="Earn and spend entries, newest first",
)
async def get_reward_transactions(
    limit: Optional[int] = Query(None, ge=1, le=200),
    current_user: CurrentUser = Depends(get_current_user),
    reward_service: RewardService = Depends(),
) -> RewardTransactionListResponse:
    transactions = await reward_service.get_reward_transactions(current_user.user_id, limit)
    return RewardTransactionListResponse(
        transactions=[RewardTransactionResponse.from_domain(t) for t in transactions]
    )


@router.post(
    "/redeem",
    response_model=RewardBalanceResponse,
    summary="Spend points",
    responses={422: {"description": "Balance too low or invalid amount"}},
)
async def redeem_points(
    request: RedeemPointsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    reward_service: RewardService = Depends(),
) -> RewardBalanceResponse:
    balance = await reward_service.redeem_reward_points(
        current_user.user_id, request.points, request.description
    )
    return RewardBalanceResponse(
        reward_points=balance,
        tier=TierInfoResponse.from_domain(get_tier_info(balance)),
    )
