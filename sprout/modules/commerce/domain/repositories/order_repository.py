"""
Repository interface for orders.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.order import Order


class OrderRepository(ABC):

    @abstractmethod
    async def create(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_stripe_session_id(self, session_id: str) -> Optional[Order]:
        """Lookup used to make checkout fulfilment idempotent."""
        pass

    @abstractmethod
    async def list_for_buyer(self, buyer_id: str) -> List[Order]:
        """Buyer's orders, newest first."""
        pass

    @abstractmethod
    async def list_for_seller(self, seller_id: str) -> List[Order]:
        """Orders with at least one item sold by `seller_id`, newest first, all items included."""
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """Persist status and shipping fields."""
        pass
