# 📄 File: sprout/modules/rewards/domain/services/reward_service.py
# 🧭 Purpose (Layman Explanation):
# Hands out points when members list plants, buy, sell, post or comment, lets them spend
# points, and tells them which growth tier they have reached.
# 🧪 Purpose (Technical Summary):
# Domain service for the reward ledger: atomic balance changes on the user row plus a
# transaction record per change, in the caller's database transaction.
# 🔗 Dependencies:
# UserRepository, RewardTransactionRepository, reward models
# 🔄 Connected Modules / Calls From:
# rewards API, PlantListingService, OrderService, ForumService

from typing import List, Optional

from fastapi import Depends

from sprout.modules.rewards.domain.models.reward import (
    RewardTransaction,
    TierInfo,
    TransactionType,
    get_tier_info,
)
from sprout.modules.rewards.domain.repositories.reward_repository import RewardTransactionRepository
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.core.exceptions import (
    InsufficientPointsError,
    UserNotFoundError,
    ValidationError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class RewardService:
    """
    Domain service for reward points.

    The balance lives on the user row and is only changed through single
    UPDATE statements; every change also appends a RewardTransaction.
    """

    def __init__(
        self,
        user_repository: UserRepository = Depends(),
        transaction_repository: RewardTransactionRepository = Depends(),
    ):
        self.user_repository = user_repository
        self.transaction_repository = transaction_repository

    async def award_reward_points(self, user_id: str, points: int, description: str) -> int:
        """
        Add points to a user's balance.

        Args:
            user_id: Recipient
            points: Strictly positive amount
            description: Shown in the user's history

        Returns:
            New balance

        Raises:
            ValidationError: If points is not positive
            UserNotFoundError: If the user has no profile
        """
        if points <= 0:
            raise ValidationError("Points must be greater than zero", field="points", value=points)

        balance = await self.user_repository.add_reward_points(user_id, points)
        if balance is None:
            raise UserNotFoundError(user_id)

        await self.transaction_repository.create(
            RewardTransaction(
                user_id=user_id,
                type=TransactionType.EARN,
                points=points,
                description=description,
            )
        )

        logger.log_business_event(
            "reward_points_awarded",
            f"Awarded {points} points to {user_id}: {description}",
            entity_id=user_id,
            entity_type="user",
            extra={"points": points, "balance": balance},
        )
        return balance

    async def redeem_reward_points(self, user_id: str, points: int, description: str) -> int:
        """
        Spend points. The balance never goes below zero.

        Raises:
            ValidationError: If points is not positive
            UserNotFoundError: If the user has no profile
            InsufficientPointsError: If the balance is below `points`
        """
        if points <= 0:
            raise ValidationError("Points must be greater than zero", field="points", value=points)

        balance = await self.user_repository.deduct_reward_points(user_id, points)
        if balance is None:
            user = await self.user_repository.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            raise InsufficientPointsError(balance=user.reward_points, requested=points)

        await self.transaction_repository.create(
            RewardTransaction(
                user_id=user_id,
                type=TransactionType.SPEND,
                points=points,
                description=description,
            )
        )

        logger.log_business_event(
            "reward_points_redeemed",
            f"User {user_id} redeemed {points} points: {description}",
            entity_id=user_id,
            entity_type="user",
            extra={"points": points, "balance": balance},
        )
        return balance

    async def get_reward_transactions(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[RewardTransaction]:
        return await self.transaction_repository.list_for_user(user_id, limit)

    async def get_balance(self, user_id: str) -> int:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.reward_points

    async def get_tier_for_user(self, user_id: str) -> TierInfo:
        return get_tier_info(await self.get_balance(user_id))
