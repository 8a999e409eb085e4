# 📄 File: sprout/modules/commerce/domain/services/checkout_service.py
# 🧭 Purpose (Layman Explanation):
# Sends the shopper to Stripe's payment page with everything in their basket, or with
# the Pro plan when they upgrade.
# 🧪 Purpose (Technical Summary):
# Builds Stripe Checkout sessions. The cart is reconciled first, only purchasable lines
# become Stripe line items, and the cart snapshot travels in the session metadata so the
# webhook can create the order without trusting client input.
# 🔗 Dependencies:
# CartService, StripeGateway, settings
# 🔄 Connected Modules / Calls From:
# checkout API

import json
from typing import Any, Dict, List, Optional

from fastapi import Depends

from sprout.modules.commerce.domain.models.cart import CartLine
from sprout.modules.commerce.domain.services.cart_service import CartService
from sprout.modules.commerce.infrastructure.external.stripe_gateway import (
    StripeGateway,
    get_stripe_gateway,
)
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import BadRequestError, ServiceNotConfiguredError
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

PRO_SUBSCRIPTION_KIND = "pro_subscription"
MAX_DESCRIPTION_LENGTH = 100


class CheckoutService:
    """Creates Stripe Checkout sessions for carts and the Pro plan."""

    def __init__(
        self,
        cart_service: CartService = Depends(),
        gateway: StripeGateway = Depends(get_stripe_gateway),
        settings: Settings = Depends(get_settings),
    ):
        self.cart_service = cart_service
        self.gateway = gateway
        self.settings = settings

    async def create_checkout_session(
        self,
        user_id: str,
        success_url: str,
        cancel_url: str,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Start a payment for the caller's cart.

        Returns:
            Dict with session_id, url and any cart adjustments made on the way

        Raises:
            ServiceNotConfiguredError: Stripe keys missing (503)
            BadRequestError: Empty cart or nothing purchasable
            PaymentProviderError: Stripe rejected the request
        """
        self.gateway.require_configured()

        cart = await self.cart_service.reconcile_cart(user_id)
        if cart.is_empty:
            raise BadRequestError("No items in cart", error_code="EMPTY_CART")

        purchasable = [line for line in cart.lines if line.listing.is_purchasable]
        if not purchasable:
            raise BadRequestError(
                "Your cart contains no items available for purchase.",
                error_code="NOTHING_PURCHASABLE",
            )

        session = await self.gateway.create_checkout_session(
            mode="payment",
            line_items=[self._line_item(line) for line in purchasable],
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=email,
            metadata={
                "user_id": user_id,
                "cart_items": json.dumps(self._cart_snapshot(purchasable)),
            },
        )

        logger.log_user_action(
            "checkout_started",
            user_id,
            resource=f"checkout_session:{session['id']}",
            extra={"items": len(purchasable), "total": round(sum(l.line_total for l in purchasable), 2)},
        )
        return {"session_id": session["id"], "url": session["url"], "adjustments": cart.adjustments}

    async def create_subscription_checkout(
        self,
        user_id: str,
        success_url: str,
        cancel_url: str,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Start a Pro subscription payment."""
        self.gateway.require_configured()
        if not self.settings.STRIPE_PRO_PRICE_ID:
            raise ServiceNotConfiguredError(
                "Pro subscription price is not configured on the server.", service="stripe"
            )

        session = await self.gateway.create_checkout_session(
            mode="subscription",
            line_items=[{"price": self.settings.STRIPE_PRO_PRICE_ID, "quantity": 1}],
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=email,
            metadata={"user_id": user_id, "kind": PRO_SUBSCRIPTION_KIND},
            subscription_data={"metadata": {"user_id": user_id}},
        )

        logger.log_user_action("subscription_checkout_started", user_id, resource=f"checkout_session:{session['id']}")
        return {"session_id": session["id"], "url": session["url"]}

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _line_item(self, line: CartLine) -> Dict[str, Any]:
        listing = line.listing
        product_data: Dict[str, Any] = {"name": listing.name}
        if listing.description:
            product_data["description"] = listing.description[:MAX_DESCRIPTION_LENGTH]
        if line.image_url:
            product_data["images"] = [line.image_url]

        return {
            "price_data": {
                "currency": self.settings.CHECKOUT_CURRENCY,
                "product_data": product_data,
                "unit_amount": round(line.unit_price * 100),
            },
            "quantity": line.item.quantity,
        }

    @staticmethod
    def _cart_snapshot(lines: List[CartLine]) -> List[Dict[str, Any]]:
        return [
            {
                "plant_id": line.listing.id,
                "name": line.listing.name,
                "price": line.unit_price,
                "quantity": line.item.quantity,
                "image_url": line.image_url,
                "seller_id": line.listing.owner_id,
            }
            for line in lines
        ]
