"""
Tests for order recording when two deliveries of one checkout session race.
"""

from typing import Optional

import pytest

from sprout.modules.commerce.domain.models.order import Order, OrderItem
from sprout.modules.commerce.domain.services.order_service import OrderService
from sprout.modules.commerce.infrastructure.database.order_repository_impl import OrderRepositoryImpl
from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import DuplicateResourceError

ITEM = OrderItem(plant_id="p1", name="Hoya", price=8.0, quantity=1, seller_id="seller")


class RacingOrderRepository:
    """Misses the order on the first lookup, as if another delivery inserted it just after."""

    def __init__(self, recorded: Order):
        self.recorded = recorded
        self.lookups = 0

    async def get_by_stripe_session_id(self, session_id: str) -> Optional[Order]:
        self.lookups += 1
        return None if self.lookups == 1 else self.recorded

    async def create(self, order: Order) -> Order:
        raise DuplicateResourceError("Order already recorded for this checkout session")


def order_service(repository) -> OrderService:
    return OrderService(
        order_repository=repository,
        listing_repository=None,
        user_repository=None,
        reward_service=None,
        notification_service=None,
        cart_service=None,
        settings=get_settings(),
    )


class TestConcurrentDelivery:
    async def test_losing_delivery_returns_recorded_order(self) -> None:
        recorded = Order.from_checkout("buyer", [ITEM], "cs_race")
        repository = RacingOrderRepository(recorded)

        order = await order_service(repository).create_order("buyer", [ITEM.model_dump()], "cs_race")

        assert order.id == recorded.id
        assert repository.lookups == 2

    async def test_duplicate_insert_keeps_session_usable(self, session_factory) -> None:
        async with session_factory() as session:
            repository = OrderRepositoryImpl(session)
            first = await repository.create(Order.from_checkout("buyer", [ITEM], "cs_race"))

            with pytest.raises(DuplicateResourceError):
                await repository.create(Order.from_checkout("buyer", [ITEM], "cs_race"))

            found = await repository.get_by_stripe_session_id("cs_race")
            await session.commit()

        assert found is not None
        assert found.id == first.id
