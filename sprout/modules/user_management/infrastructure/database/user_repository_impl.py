# 📄 File: sprout/modules/user_management/infrastructure/database/user_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves and looks up marketplace members in the database, and adds or takes away
# reward points safely even when several things happen at once.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of UserRepository with domain/model mapping and single-statement
# counter and balance updates.
#
# 🔗 Dependencies:
# - sprout.modules.user_management.domain (User, UserRepository)
# - sprout.modules.user_management.infrastructure.database.models (UserModel)
# - SQLAlchemy async session
#
# 🔄 Connected Modules / Calls From:
# - FastAPI dependency overrides in sprout.main
# - Background maintenance tasks (constructed with an explicit session)

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.user_management.domain.models.user import Subscription, User
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.modules.user_management.infrastructure.database.models import UserModel
from sprout.shared.core.exceptions import DuplicateResourceError, RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class UserRepositoryImpl(UserRepository):
    """
    SQLAlchemy implementation of the UserRepository interface.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, user: User) -> User:
        try:
            model = self._domain_to_model(user)
            self._session.add(model)
            await self._session.flush()
            logger.info(f"Created user profile: {user.user_id}")
            return self._model_to_domain(model)

        except IntegrityError as e:
            logger.warning(f"User creation failed - id or username taken: {user.user_id}")
            raise DuplicateResourceError(
                "User profile already exists",
                resource_type="user",
                field="username",
                value=user.username
            ) from e

        except SQLAlchemyError as e:
            logger.error(f"Database error during user creation: {e}")
            raise RepositoryError("Failed to create user", operation="create", entity="user") from e

    async def get_by_id(self, user_id: str) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return self._model_to_domain(model) if model else None

    async def get_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        result = await self._session.execute(
            select(UserModel).where(UserModel.user_id.in_(user_ids))
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self._session.execute(
            select(UserModel).where(func.lower(UserModel.username) == username.lower())
        )
        model = result.scalars().first()
        return self._model_to_domain(model) if model else None

    async def get_by_stripe_customer_id(self, customer_id: str) -> Optional[User]:
        result = await self._session.execute(
            select(UserModel).where(UserModel.stripe_customer_id == customer_id)
        )
        model = result.scalars().first()
        return self._model_to_domain(model) if model else None

    async def update(self, user: User) -> User:
        model = await self._session.get(UserModel, user.user_id)
        if model is None:
            raise RepositoryError(
                f"Cannot update missing user {user.user_id}", operation="update", entity="user"
            )

        model.username = user.username
        model.email = user.email
        model.bio = user.bio
        model.avatar_url = user.avatar_url
        model.location = user.location
        model.updated_at = user.updated_at
        model.favorite_plants = list(user.favorite_plants)
        model.followers = list(user.followers)
        model.following = list(user.following)
        model.subscription_status = user.subscription.status
        model.subscription_expiry = user.subscription.expiry_date
        model.stripe_account_id = user.stripe_account_id
        model.stripe_details_submitted = user.stripe_details_submitted
        model.stripe_customer_id = user.stripe_customer_id

        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateResourceError(
                "Username is already taken",
                resource_type="user",
                field="username",
                value=user.username
            ) from e

        logger.debug(f"Updated user: {user.user_id}")
        return self._model_to_domain(model)

    async def increment_counters(
        self,
        user_id: str,
        plants_listed: int = 0,
        plants_traded: int = 0
    ) -> None:
        await self._session.execute(
            update(UserModel)
            .where(UserModel.user_id == user_id)
            .values(
                plants_listed=UserModel.plants_listed + plants_listed,
                plants_traded=UserModel.plants_traded + plants_traded,
                updated_at=utc_now(),
            )
        )

    async def add_reward_points(self, user_id: str, points: int) -> Optional[int]:
        result = await self._session.execute(
            update(UserModel)
            .where(UserModel.user_id == user_id)
            .values(reward_points=UserModel.reward_points + points)
        )
        if result.rowcount == 0:
            return None
        return await self._current_points(user_id)

    async def deduct_reward_points(self, user_id: str, points: int) -> Optional[int]:
        # The WHERE clause keeps the balance from going negative
        result = await self._session.execute(
            update(UserModel)
            .where(UserModel.user_id == user_id, UserModel.reward_points >= points)
            .values(reward_points=UserModel.reward_points - points)
        )
        if result.rowcount == 0:
            return None
        return await self._current_points(user_id)

    async def list_expired_pro(self, now: datetime) -> List[User]:
        result = await self._session.execute(
            select(UserModel).where(
                UserModel.subscription_status == "pro",
                UserModel.subscription_expiry.is_not(None),
                UserModel.subscription_expiry < now,
            )
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def _current_points(self, user_id: str) -> int:
        result = await self._session.execute(
            select(UserModel.reward_points).where(UserModel.user_id == user_id)
        )
        return result.scalar_one()

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _domain_to_model(self, user: User) -> UserModel:
        return UserModel(
            user_id=user.user_id,
            username=user.username,
            email=user.email,
            bio=user.bio,
            avatar_url=user.avatar_url,
            location=user.location,
            joined_date=user.joined_date,
            updated_at=user.updated_at,
            plants_listed=user.plants_listed,
            plants_traded=user.plants_traded,
            reward_points=user.reward_points,
            favorite_plants=list(user.favorite_plants),
            followers=list(user.followers),
            following=list(user.following),
            subscription_status=user.subscription.status,
            subscription_expiry=user.subscription.expiry_date,
            stripe_account_id=user.stripe_account_id,
            stripe_details_submitted=user.stripe_details_submitted,
            stripe_customer_id=user.stripe_customer_id,
        )

    def _model_to_domain(self, model: UserModel) -> User:
        return User(
            user_id=model.user_id,
            username=model.username,
            email=model.email,
            bio=model.bio,
            avatar_url=model.avatar_url,
            location=model.location,
            joined_date=ensure_utc(model.joined_date),
            updated_at=ensure_utc(model.updated_at),
            plants_listed=model.plants_listed or 0,
            plants_traded=model.plants_traded or 0,
            reward_points=model.reward_points or 0,
            favorite_plants=list(model.favorite_plants or []),
            followers=list(model.followers or []),
            following=list(model.following or []),
            subscription=Subscription(
                status=model.subscription_status or "free",
                expiry_date=ensure_utc(model.subscription_expiry),
            ),
            stripe_account_id=model.stripe_account_id,
            stripe_details_submitted=bool(model.stripe_details_submitted),
            stripe_customer_id=model.stripe_customer_id,
        )
