"""
Repository interface for shopping carts.
One row per (user, plant); the cart itself is the set of a user's rows.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    async def list_items(self, user_id: str) -> List[CartItem]:
        """Items in the order they were added."""
        pass

    @abstractmethod
    async def get_item(self, user_id: str, plant_id: str) -> Optional[CartItem]:
        pass

    @abstractmethod
    async def add_item(self, item: CartItem) -> CartItem:
        """
        Insert a new item.

        Raises:
            DuplicateResourceError: If the plant is already in the cart
        """
        pass

    @abstractmethod
    async def set_quantity(self, user_id: str, plant_id: str, quantity: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    async def remove_item(self, user_id: str, plant_id: str) -> bool:
        pass

    @abstractmethod
    async def clear(self, user_id: str) -> int:
        """Remove every item. Returns how many were removed."""
        pass
