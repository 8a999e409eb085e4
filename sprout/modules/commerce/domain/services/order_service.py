# 📄 File: sprout/modules/commerce/domain/services/order_service.py
# 🧭 Purpose (Layman Explanation):
# Turns a finished payment into an order: takes the plants out of stock, credits the
# sellers, gives everyone their reward points, tells the sellers and empties the basket.
# Also shows buyers and sellers their orders and sales numbers.
# 🧪 Purpose (Technical Summary):
# Domain service for orders. create_order is idempotent on the Stripe checkout session id
# so webhook redeliveries never move stock or points twice. All side effects share the
# request's database transaction.
# 🔗 Dependencies:
# OrderRepository, PlantListingRepository, UserRepository, RewardService,
# NotificationService, CartService, settings
# 🔄 Connected Modules / Calls From:
# StripeWebhookService, orders API, ShippingService (labels)

from typing import Any, Dict, List, Union

from fastapi import Depends

from sprout.modules.commerce.domain.models.order import Order, OrderItem, OrderStatus
from sprout.modules.commerce.domain.repositories.order_repository import OrderRepository
from sprout.modules.commerce.domain.services.cart_service import CartService
from sprout.modules.notifications.domain.models.notification import NotificationType
from sprout.modules.notifications.domain.services.notification_service import NotificationService
from sprout.modules.plant_listings.domain.repositories.plant_listing_repository import (
    PlantListingRepository,
)
from sprout.modules.rewards.domain.services.reward_service import RewardService
from sprout.modules.user_management.domain.repositories.user_repository import UserRepository
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    DuplicateResourceError,
    OrderNotFoundError,
    SubscriptionError,
    ValidationError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """Domain service for checkout fulfilment and order history."""

    def __init__(
        self,
        order_repository: OrderRepository = Depends(),
        listing_repository: PlantListingRepository = Depends(),
        user_repository: UserRepository = Depends(),
        reward_service: RewardService = Depends(),
        notification_service: NotificationService = Depends(),
        cart_service: CartService = Depends(),
        settings: Settings = Depends(get_settings),
    ):
        self.order_repository = order_repository
        self.listing_repository = listing_repository
        self.user_repository = user_repository
        self.reward_service = reward_service
        self.notification_service = notification_service
        self.cart_service = cart_service
        self.settings = settings

    # =========================================================================
    # FULFILMENT
    # =========================================================================

    async def create_order(
        self,
        buyer_id: str,
        items: List[Union[OrderItem, Dict[str, Any]]],
        stripe_session_id: str,
    ) -> Order:
        """
        Record a paid checkout.

        If an order for `stripe_session_id` already exists it is returned unchanged and
        nothing else happens. Otherwise stock is decremented, seller trade counters and
        reward points are updated, sellers are notified and the buyer's cart is cleared.

        Raises:
            ValidationError: If there are no items
        """
        existing = await self.order_repository.get_by_stripe_session_id(stripe_session_id)
        if existing is not None:
            logger.info(f"Order for session {stripe_session_id} already recorded", order_id=existing.id)
            return existing

        order_items = [i if isinstance(i, OrderItem) else OrderItem(**i) for i in items]
        if not order_items:
            raise ValidationError("An order needs at least one item", field="items")

        try:
            order = await self.order_repository.create(
                Order.from_checkout(buyer_id, order_items, stripe_session_id)
            )
        except DuplicateResourceError:
            # A concurrent delivery of the same session recorded it first
            existing = await self.order_repository.get_by_stripe_session_id(stripe_session_id)
            if existing is None:
                raise
            logger.info(f"Order for session {stripe_session_id} recorded concurrently", order_id=existing.id)
            return existing

        for item in order.items:
            listing = await self.listing_repository.get_by_id(item.plant_id)
            if listing is None:
                logger.warning(f"Listing {item.plant_id} from order {order.id} no longer exists")
                continue
            listing.decrement_stock(item.quantity)
            await self.listing_repository.update(listing)

        sold_per_seller: Dict[str, int] = {}
        for item in order.items:
            sold_per_seller[item.seller_id] = sold_per_seller.get(item.seller_id, 0) + item.quantity

        await self.reward_service.award_reward_points(
            buyer_id,
            self.settings.REWARD_POINTS_PURCHASE,
            f"Purchase completed (order {order.id[:8]})",
        )

        for seller_id, quantity in sold_per_seller.items():
            await self.user_repository.increment_counters(seller_id, plants_traded=quantity)
            await self.reward_service.award_reward_points(
                seller_id,
                self.settings.REWARD_POINTS_SALE,
                f"Sold {quantity} plant(s) (order {order.id[:8]})",
            )
            await self.notification_service.create_notification(
                user_id=seller_id,
                type=NotificationType.ORDER,
                message=f"You have a new order for {quantity} plant(s)!",
                link="/seller/orders",
            )

        await self.cart_service.clear_cart(buyer_id)

        logger.log_business_event(
            "order_created",
            f"Order {order.id} paid by {buyer_id}",
            entity_id=order.id,
            entity_type="order",
            extra={"total_amount": order.total_amount, "sellers": order.seller_ids},
        )
        return order

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_order(self, order_id: str) -> Order:
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def get_orders_for_buyer(self, buyer_id: str) -> List[Order]:
        return await self.order_repository.list_for_buyer(buyer_id)

    async def get_orders_for_seller(self, seller_id: str) -> List[Order]:
        """Orders containing the seller's plants, with other sellers' lines removed."""
        orders = await self.order_repository.list_for_seller(seller_id)
        return [o.model_copy(update={"items": o.items_for_seller(seller_id)}) for o in orders]

    async def get_seller_stats(self, seller_id: str) -> Dict[str, Any]:
        """
        Sales summary for the seller dashboard, a Pro feature.

        Returns:
            Dict with revenue, sales, active_listings and top_plants (name -> quantity sold)

        Raises:
            SubscriptionError: If the seller is not on an active Pro plan
        """
        seller = await self.user_repository.get_by_id(seller_id)
        if seller is None or not seller.is_pro:
            raise SubscriptionError(
                "Sales statistics are part of Sprout Pro",
                feature="seller_stats",
                subscription_status=seller.subscription.status if seller else None,
            )

        revenue = 0.0
        sales = 0
        top_plants: Dict[str, int] = {}

        for order in await self.get_orders_for_seller(seller_id):
            for item in order.items:
                revenue += item.line_total
                sales += item.quantity
                top_plants[item.name] = top_plants.get(item.name, 0) + item.quantity

        return {
            "revenue": round(revenue, 2),
            "sales": sales,
            "active_listings": await self.listing_repository.count_available_by_owner(seller_id),
            "top_plants": dict(sorted(top_plants.items(), key=lambda kv: kv[1], reverse=True)),
        }

    # =========================================================================
    # SHIPPING
    # =========================================================================

    async def get_order_for_seller(self, order_id: str, seller_id: str) -> Order:
        """
        Fetch an order the seller may ship.

        Raises:
            NotFoundError, AuthorizationError
        """
        order = await self.get_order(order_id)
        if not order.is_sold_only_by(seller_id):
            raise AuthorizationError(
                "Only the seller of every item in this order can ship it",
                resource_type="order",
                resource_id=order_id,
                required_action="ship",
                user_id=seller_id,
            )
        return order

    @staticmethod
    def ensure_not_shipped(order: Order) -> None:
        if order.status == OrderStatus.SHIPPED:
            raise BusinessRuleViolationError(
                f"Order {order.id} has already shipped",
                rule="ship_once",
                context={"tracking_number": order.tracking_number},
            )

    async def mark_order_shipped(
        self,
        order_id: str,
        seller_id: str,
        tracking_number: str,
        label_url: str,
    ) -> Order:
        order = await self.get_order_for_seller(order_id, seller_id)
        self.ensure_not_shipped(order)
        order.mark_shipped(tracking_number, label_url)
        updated = await self.order_repository.update(order)

        await self.notification_service.create_notification(
            user_id=order.buyer_id,
            type=NotificationType.ORDER,
            message=f"Your order has shipped! Tracking number: {tracking_number}",
            link="/orders",
        )
        logger.log_user_action("ship_order", seller_id, resource=f"order:{order_id}")
        return updated
