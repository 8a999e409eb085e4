# 📄 File: sprout/modules/commerce/infrastructure/database/order_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Stores paid orders and finds them again for buyers, sellers and the payment webhook.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of OrderRepository. Order lines load eagerly through the
# selectin relationship; seller lookup joins on order_items.seller_id.
#
# 🔗 Dependencies:
# - SQLAlchemy async session, OrderModel, OrderItemModel
#
# 🔄 Connected Modules / Calls From:
# - OrderService via FastAPI dependency overrides

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sprout.modules.commerce.domain.models.order import Order, OrderItem
from sprout.modules.commerce.domain.repositories.order_repository import OrderRepository
from sprout.modules.commerce.infrastructure.database.models import OrderItemModel, OrderModel
from sprout.shared.core.exceptions import DuplicateResourceError, RepositoryError
from sprout.shared.infrastructure.database.session import get_db_session
from sprout.shared.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class OrderRepositoryImpl(OrderRepository):
    """
    SQLAlchemy implementation of the OrderRepository interface.
    """

    def __init__(self, session: AsyncSession = Depends(get_db_session)):
        self._session = session

    async def create(self, order: Order) -> Order:
        model = OrderModel(
            id=order.id,
            buyer_id=order.buyer_id,
            seller_ids=list(order.seller_ids),
            total_amount=order.total_amount,
            status=order.status,
            stripe_session_id=order.stripe_session_id,
            created_at=order.created_at,
            tracking_number=order.tracking_number,
            label_url=order.label_url,
            shipped_at=order.shipped_at,
            items=[
                OrderItemModel(
                    plant_id=item.plant_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    image_url=item.image_url,
                    seller_id=item.seller_id,
                )
                for item in order.items
            ],
        )
        try:
            # Savepoint keeps the outer transaction usable after a duplicate session id
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as e:
            logger.warning(f"Order for session {order.stripe_session_id} already exists")
            raise DuplicateResourceError(
                "Order already recorded for this checkout session",
                resource_type="order",
                field="stripe_session_id",
                value=order.stripe_session_id,
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error creating order: {e}")
            raise RepositoryError("Failed to create order", operation="create", entity="order") from e

        logger.info(f"Created order {order.id} for buyer {order.buyer_id}")
        return self._model_to_domain(model)

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        model = await self._session.get(OrderModel, order_id)
        return self._model_to_domain(model) if model else None

    async def get_by_stripe_session_id(self, session_id: str) -> Optional[Order]:
        result = await self._session.execute(
            select(OrderModel).where(OrderModel.stripe_session_id == session_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_domain(model) if model else None

    async def list_for_buyer(self, buyer_id: str) -> List[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.buyer_id == buyer_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def list_for_seller(self, seller_id: str) -> List[Order]:
        seller_orders = select(OrderItemModel.order_id).where(OrderItemModel.seller_id == seller_id)
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.id.in_(seller_orders))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return [self._model_to_domain(m) for m in result.scalars().all()]

    async def update(self, order: Order) -> Order:
        model = await self._session.get(OrderModel, order.id)
        if model is None:
            raise RepositoryError(f"Cannot update missing order {order.id}", operation="update", entity="order")

        model.status = order.status
        model.tracking_number = order.tracking_number
        model.label_url = order.label_url
        model.shipped_at = order.shipped_at
        await self._session.flush()
        return self._model_to_domain(model)

    def _model_to_domain(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            buyer_id=model.buyer_id,
            items=[
                OrderItem(
                    plant_id=item.plant_id,
                    name=item.name,
                    price=float(item.price),
                    quantity=item.quantity,
                    image_url=item.image_url,
                    seller_id=item.seller_id,
                )
                for item in model.items
            ],
            seller_ids=list(model.seller_ids or []),
            total_amount=float(model.total_amount),
            status=model.status,
            stripe_session_id=model.stripe_session_id,
            created_at=ensure_utc(model.created_at),
            tracking_number=model.tracking_number,
            label_url=model.label_url,
            shipped_at=ensure_utc(model.shipped_at),
        )
