# 📄 File: sprout/modules/commerce/domain/services/cart_service.py
# 🧭 Purpose (Layman Explanation):
# Runs the shopping basket: adding plants, changing how many, removing them, and quietly
# fixing the basket when a seller sold out or lowered the stock in the meantime.
# 🧪 Purpose (Technical Summary):
# Domain service for the server-side cart. Every read goes through reconcile_cart, which
# compares each item with the live listing stock, drops unavailable items, clamps
# over-stock quantities and reports each change as a CartAdjustment.
# 🔗 Dependencies:
# CartRepository, PlantListingRepository
# 🔄 Connected Modules / Calls From:
# cart API, CheckoutService, OrderService (clears the cart after payment)

from typing import List

from fastapi import Depends

from sprout.modules.commerce.domain.models.cart import (
    AdjustmentReason,
    Cart,
    CartAdjustment,
    CartItem,
    CartLine,
)
from sprout.modules.commerce.domain.repositories.cart_repository import CartRepository
from sprout.modules.plant_listings.domain.models.plant_listing import PlantListing
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import (
    PlantListingRepository,
)
from sprout.shared.core.exceptions import (
    BusinessRuleViolationError,
    DuplicateResourceError,
    InsufficientStockError,
    ListingNotFoundError,
    NotFoundError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Domain service for shopping carts.

    Business rules:
    - Sellers cannot buy their own plants
    - Only available, priced, non trade-only listings can be added
    - A cart quantity never exceeds the listing stock once reconciled
    """

    def __init__(
        self,
        cart_repository: CartRepository = Depends(),
        listing_repository: PlantListingRepository = Depends(),
    ):
        self.cart_repository = cart_repository
        self.listing_repository = listing_repository

    async def add_to_cart(self, user_id: str, plant_id: str, quantity: int = 1) -> Cart:
        """
        Put a plant in the caller's cart.

        Raises:
            ListingNotFoundError: Unknown plant
            BusinessRuleViolationError: Own, unavailable or not-for-sale listing
            DuplicateResourceError: Plant already in the cart
            InsufficientStockError: Quantity above stock
        """
        listing = await self.listing_repository.get_by_id(plant_id)
        if listing is None:
            raise ListingNotFoundError(plant_id)

        if listing.owner_id == user_id:
            raise BusinessRuleViolationError(
                "You cannot add your own plant to your cart", rule="no_self_purchase"
            )
        if not listing.is_purchasable:
            raise BusinessRuleViolationError(
                "This plant is not available for purchase",
                rule="listing_purchasable",
                context={"plant_id": plant_id},
            )

        if await self.cart_repository.get_item(user_id, plant_id) is not None:
            raise DuplicateResourceError(
                "This plant is already in your cart",
                resource_type="cart_item",
                field="plant_id",
                value=plant_id,
            )

        self._check_stock(listing, quantity)
        await self.cart_repository.add_item(CartItem(user_id=user_id, plant_id=plant_id, quantity=quantity))

        logger.log_user_action("add_to_cart", user_id, resource=f"plant_listing:{plant_id}")
        return await self.get_cart(user_id)

    async def update_cart_item(self, user_id: str, plant_id: str, quantity: int) -> Cart:
        """Set an item's quantity; zero removes it."""
        if quantity <= 0:
            return await self.remove_from_cart(user_id, plant_id)

        if await self.cart_repository.get_item(user_id, plant_id) is None:
            raise NotFoundError("Item is not in your cart", resource_type="cart_item", resource_id=plant_id)

        listing = await self.listing_repository.get_by_id(plant_id)
        if listing is None:
            raise ListingNotFoundError(plant_id)
        self._check_stock(listing, quantity)

        await self.cart_repository.set_quantity(user_id, plant_id, quantity)
        return await self.get_cart(user_id)

    async def remove_from_cart(self, user_id: str, plant_id: str) -> Cart:
        await self.cart_repository.remove_item(user_id, plant_id)
        return await self.get_cart(user_id)

    async def clear_cart(self, user_id: str) -> int:
        removed = await self.cart_repository.clear(user_id)
        logger.debug(f"Cleared {removed} cart items", user_id=user_id)
        return removed

    async def get_cart(self, user_id: str) -> Cart:
        return await self.reconcile_cart(user_id)

    async def reconcile_cart(self, user_id: str) -> Cart:
        """
        Bring the cart in line with current stock.

        Items whose listing is gone, unavailable or out of stock are removed; quantities
        above stock are lowered to the stock. Each change is returned as an adjustment.
        """
        items = await self.cart_repository.list_items(user_id)
        listings = await self.listing_repository.get_by_ids([i.plant_id for i in items])
        by_id = {listing.id: listing for listing in listings}

        lines: List[CartLine] = []
        adjustments: List[CartAdjustment] = []

        for item in items:
            listing = by_id.get(item.plant_id)

            if listing is None or not listing.is_available or listing.quantity <= 0:
                await self.cart_repository.remove_item(user_id, item.plant_id)
                adjustments.append(
                    CartAdjustment(
                        plant_id=item.plant_id,
                        old_quantity=item.quantity,
                        new_quantity=0,
                        reason=AdjustmentReason.UNAVAILABLE,
                    )
                )
                continue

            if item.quantity > listing.quantity:
                adjustments.append(
                    CartAdjustment(
                        plant_id=item.plant_id,
                        old_quantity=item.quantity,
                        new_quantity=listing.quantity,
                        reason=AdjustmentReason.CLAMPED,
                    )
                )
                item = await self.cart_repository.set_quantity(user_id, item.plant_id, listing.quantity)

            lines.append(CartLine(item=item, listing=listing))

        if adjustments:
            logger.info(
                f"Reconciled cart with {len(adjustments)} adjustments",
                user_id=user_id,
                adjustments=[a.model_dump() for a in adjustments],
            )

        return Cart(user_id=user_id, lines=lines, adjustments=adjustments)

    @staticmethod
    def _check_stock(listing: PlantListing, quantity: int) -> None:
        if quantity > listing.quantity:
            raise InsufficientStockError(listing.id, requested=quantity, available=listing.quantity)
