# 📄 File: sprout/modules/commerce/domain/services/webhook_service.py
# 🧭 Purpose (Layman Explanation):
# Listens for Stripe telling us a payment went through, a subscription changed or a
# seller finished payout setup, and updates orders and profiles to match.
# 🧪 Purpose (Technical Summary):
# Verifies Stripe webhook signatures, then dispatches by event type:
# checkout.session.completed (orders or Pro upgrade), customer.subscription.updated and
# .deleted (plan status) and account.updated (Connect onboarding). Verified events that
# fail to apply raise WebhookProcessingError (500) so Stripe redelivers them; order
# creation is idempotent so a redelivery is harmless.
# 🔗 Dependencies:
# StripeGateway, OrderService, UserService, settings
# 🔄 Connected Modules / Calls From:
# webhooks API

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends

from sprout.modules.commerce.domain.services.checkout_service import PRO_SUBSCRIPTION_KIND
from sprout.modules.commerce.domain.services.order_service import OrderService
from sprout.modules.commerce.infrastructure.external.stripe_gateway import (
    ACTIVE_SUBSCRIPTION_STATUSES,
    StripeGateway,
    get_stripe_gateway,
)
from sprout.modules.user_management.domain.models.user import User
from sprout.modules.user_management.domain.services.user_service import UserService
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import BadRequestError, WebhookProcessingError
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

RECEIVED = {"received": True}


class StripeWebhookService:
    """Applies verified Stripe events to orders and user profiles."""

    def __init__(
        self,
        gateway: StripeGateway = Depends(get_stripe_gateway),
        order_service: OrderService = Depends(),
        user_service: UserService = Depends(),
        settings: Settings = Depends(get_settings),
    ):
        self.gateway = gateway
        self.order_service = order_service
        self.user_service = user_service
        self.settings = settings

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    async def handle_checkout_webhook(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Process a delivery to the checkout/subscription endpoint.

        Raises:
            ServiceNotConfiguredError: Secret or key missing (500)
            WebhookSignatureError: Bad or missing signature (400)
            BadRequestError: Checkout session without usable metadata (400)
            WebhookProcessingError: Anything else failed (500, Stripe retries)
        """
        event = self.gateway.verify_event(payload, sig_header, self.settings.STRIPE_CHECKOUT_WEBHOOK_SECRET)
        handlers = {
            "checkout.session.completed": self._on_checkout_completed,
            "customer.subscription.updated": self._on_subscription_updated,
            "customer.subscription.deleted": self._on_subscription_deleted,
        }
        return await self._dispatch(event, handlers)

    async def handle_connect_webhook(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """Process a delivery to the Connect endpoint."""
        event = self.gateway.verify_event(payload, sig_header, self.settings.STRIPE_CONNECT_WEBHOOK_SECRET)
        return await self._dispatch(event, {"account.updated": self._on_account_updated})

    async def _dispatch(self, event: Dict[str, Any], handlers: Dict[str, Any]) -> Dict[str, Any]:
        event_type = event.get("type")
        event_id = event.get("id")
        handler = handlers.get(event_type)
        if handler is None:
            logger.debug(f"Ignoring Stripe event {event_type}", event_id=event_id)
            return dict(RECEIVED)

        data_object = (event.get("data") or {}).get("object") or {}
        logger.info(f"Processing Stripe event {event_type}", event_id=event_id)

        try:
            return await handler(data_object)
        except BadRequestError:
            raise
        except Exception as e:
            logger.error(
                f"Stripe event {event_type} failed: {e}",
                event_id=event_id,
                error_type=type(e).__name__,
            )
            raise WebhookProcessingError(
                f"Webhook handler failed: {e}", event_type=event_type, event_id=event_id
            ) from e

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    async def _on_checkout_completed(self, session: Dict[str, Any]) -> Dict[str, Any]:
        metadata = session.get("metadata") or {}
        user_id = metadata.get("user_id")

        if metadata.get("kind") == PRO_SUBSCRIPTION_KIND:
            if not user_id:
                raise BadRequestError("Missing or invalid metadata", error_code="INVALID_METADATA")
            await self.user_service.update_user_subscription(
                user_id, stripe_customer_id=session.get("customer")
            )
            return dict(RECEIVED)

        items = self._parse_cart_items(metadata.get("cart_items"))
        if not user_id or not items:
            raise BadRequestError("Missing or invalid metadata", error_code="INVALID_METADATA")

        order = await self.order_service.create_order(user_id, items, stripe_session_id=session["id"])
        return {**RECEIVED, "order_id": order.id}

    @staticmethod
    def _parse_cart_items(raw: Optional[str]) -> Optional[List[Dict[str, Any]]]:
        if not raw:
            return None
        try:
            items = json.loads(raw)
        except (TypeError, ValueError):
            return None
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            return None
        return items

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    async def _on_subscription_updated(self, subscription: Dict[str, Any]) -> Dict[str, Any]:
        user = await self._resolve_subscriber(subscription)
        if user is None:
            return {**RECEIVED, "message": "No matching user."}

        if subscription.get("status") in ACTIVE_SUBSCRIPTION_STATUSES:
            await self.user_service.update_user_subscription(
                user.user_id,
                expiry_date=self._period_end(subscription),
                stripe_customer_id=subscription.get("customer"),
            )
        else:
            await self.user_service.downgrade_user_subscription(user.user_id)
        return dict(RECEIVED)

    async def _on_subscription_deleted(self, subscription: Dict[str, Any]) -> Dict[str, Any]:
        user = await self._resolve_subscriber(subscription)
        if user is None:
            return {**RECEIVED, "message": "No matching user."}
        await self.user_service.downgrade_user_subscription(user.user_id)
        return dict(RECEIVED)

    async def _resolve_subscriber(self, subscription: Dict[str, Any]) -> Optional[User]:
        user_id = (subscription.get("metadata") or {}).get("user_id")
        if user_id:
            return await self.user_service.get_user_profile(user_id)

        customer_id = subscription.get("customer")
        user = await self.user_service.find_by_stripe_customer(customer_id) if customer_id else None
        if user is None:
            logger.warning("Subscription event for unknown customer", customer_id=customer_id)
        return user

    @staticmethod
    def _period_end(subscription: Dict[str, Any]) -> Optional[datetime]:
        # Newer API versions report the period on the subscription items
        period_end = subscription.get("current_period_end")
        if period_end is None:
            items = (subscription.get("items") or {}).get("data") or []
            if items:
                period_end = items[0].get("current_period_end")
        if period_end is None:
            return None
        return datetime.fromtimestamp(int(period_end), tz=timezone.utc)

    # =========================================================================
    # CONNECT
    # =========================================================================

    async def _on_account_updated(self, account: Dict[str, Any]) -> Dict[str, Any]:
        user_id = (account.get("metadata") or {}).get("user_id")
        if not user_id:
            return {**RECEIVED, "message": "No userId in metadata."}

        user = await self.user_service.get_user_profile(user_id)
        user.stripe_account_id = user.stripe_account_id or account.get("id")
        user.stripe_details_submitted = bool(account.get("details_submitted"))
        await self.user_service.save(user)

        logger.log_business_event(
            "connect_account_updated",
            f"Connect account of {user_id} updated",
            entity_id=user_id,
            entity_type="user",
            extra={"details_submitted": user.stripe_details_submitted},
        )
        return dict(RECEIVED)
