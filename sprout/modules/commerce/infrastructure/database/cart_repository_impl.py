# 📄 File: sprout/modules/commerce/infrastructure/database/cart_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves and reads the plants in each shopper's basket.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of CartRepository. The (user_id, plant_id) unique
# constraint turns a double add into DuplicateResourceError.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, CartItemModel
#
# 🔄 Connected Modules / Calls From:
# - CartService via FastAPI dependency overrides

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.commerce.domain.models.cart import CartItem
from sprout.modules.commerce.domain.repositories.cart_repository import CartRepository
from sprout.modules.commerce.infrastructure.database.models import CartItemModel
from sprout.shared.core.exceptions import DuplicateResourceError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class CartRepositoryImpl(CartRepository):

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def list_items(self, user_id: str) -> List[CartItem]:
        result = await self._session.execute(
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.added_at, CartItemModel.id)
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def get_item(self, user_id: str, plant_id: str) -> Optional[CartItem]:
        model = await self._get_model(user_id, plant_id)
        return self._model_to_domain(model) if model else None

    async def add_item(self, item: CartItem) -> CartItem:
        model = CartItemModel(
            user_id=item.user_id,
            plant_id=item.plant_id,
            quantity=item.quantity,
            added_at=item.added_at,
        )
        try:
            self._session.add(model)
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateResourceError(
                "This plant is already in your cart",
                resource_type="cart_item",
                field="plant_id",
                value=item.plant_id,
            ) from e

        logger.debug(f"Added {item.plant_id} x{item.quantity} to cart of {item.user_id}")
        return self._model_to_domain(model)

    async def set_quantity(self, user_id: str, plant_id: str, quantity: int) -> Optional[CartItem]:
        model = await self._get_model(user_id, plant_id)
        if model is None:
            return None
        model.quantity = quantity
        await self._session.flush()
        return self._model_to_domain(model)

    async def remove_item(self, user_id: str, plant_id: str) -> bool:
        result = await self._session.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.plant_id == plant_id,
            )
        )
        return result.rowcount > 0

    async def clear(self, user_id: str) -> int:
        result = await self._session.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    async def _get_model(self, user_id: str, plant_id: str) -> Optional[CartItemModel]:
        result = await self._session.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.plant_id == plant_id,
            )
        )
        return result.scalar_one_or_none()

    def _model_to_domain(self, model: CartItemModel) -> CartItem:
        return CartItem(
            user_id=model.user_id,
            plant_id=model.plant_id,
            quantity=model.quantity,
            added_at=ensure_utc(model.added_at),
        )
