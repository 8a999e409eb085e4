# 📄 File: sprout/modules/commerce/infrastructure/external/stripe_gateway.py
#
# 🧭 Purpose (Layman Explanation):
# The one place that talks to Stripe: it opens payment pages, sets up seller payout
# accounts and checks that webhook messages really came from Stripe.
#
# 🧪 Purpose (Technical Summary):
# Thin async wrapper over the synchronous `stripe` SDK. Calls run in Starlette's
# threadpool, SDK errors are mapped to PaymentProviderError and missing credentials to
# ServiceNotConfiguredError. Results are returned as plain dicts.
#
# 🔗 Dependencies:
# - stripe SDK
# - starlette.concurrency.run_in_threadpool
# - sprout.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - CheckoutService, ConnectService, StripeWebhookService, Pro expiry job
# - Tests override get_stripe_gateway with a fake

import json
from typing import Any, Callable, Dict, List, Optional

import stripe
from fastapi import Depends
from starlette.concurrency import run_in_threadpool

from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    PaymentProviderError,
    ServiceNotConfiguredError,
    WebhookSignatureError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

ACTIVE_SUBSCRIPTION_STATUSES = {"active", "trialing"}


class StripeGateway:
    """Async facade over the Stripe API."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return self.settings.stripe_enabled

    def require_configured(self, status_code: int = 503) -> None:
        if not self.is_configured:
            raise ServiceNotConfiguredError(
                "Stripe is not configured on the server.", service="stripe", status_code=status_code
            )

    async def _call(self, operation: str, func: Callable[..., Any], **params: Any) -> Any:
        self.require_configured()
        stripe.api_key = self.settings.STRIPE_SECRET_KEY
        if self.settings.STRIPE_API_VERSION:
            stripe.api_version = self.settings.STRIPE_API_VERSION

        try:
            return await run_in_threadpool(func, **params)
        except stripe.StripeError as e:
            logger.error(
                f"Stripe {operation} failed: {e.user_message or e}",
                operation=operation,
                stripe_code=getattr(e, "code", None),
            )
            raise PaymentProviderError(
                f"Stripe {operation} failed: {e.user_message or str(e)}",
                details={"operation": operation, "code": getattr(e, "code", None)},
            ) from e

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    async def create_checkout_session(
        self,
        mode: str,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
        subscription_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create a hosted Checkout session.

        Returns:
            Dict with `id` and `url` of the session
        """
        params: Dict[str, Any] = {
            "mode": mode,
            "payment_method_types": ["card"],
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        if customer_email:
            params["customer_email"] = customer_email
        if subscription_data:
            params["subscription_data"] = subscription_data

        session = await self._call("checkout_session", stripe.checkout.Session.create, **params)
        return {"id": session["id"], "url": session["url"]}

    async def has_live_subscription(self, customer_id: str) -> bool:
        """Whether the customer still has an active or trialing subscription."""
        subscriptions = await self._call(
            "subscription_list",
            stripe.Subscription.list,
            customer=customer_id,
            status="all",
            limit=10,
        )
        return any(s["status"] in ACTIVE_SUBSCRIPTION_STATUSES for s in subscriptions["data"])

    # =========================================================================
    # CONNECT
    # =========================================================================

    async def create_account(self, email: Optional[str], user_id: str) -> str:
        """Create an Express connected account and return its id."""
        account = await self._call(
            "account_create",
            stripe.Account.create,
            type="express",
            email=email,
            business_type="individual",
            capabilities={
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
            metadata={"user_id": user_id},
        )
        return account["id"]

    async def create_account_link(self, account_id: str, refresh_url: str, return_url: str) -> str:
        link = await self._call(
            "account_link",
            stripe.AccountLink.create,
            account=account_id,
            refresh_url=refresh_url,
            return_url=return_url,
            type="account_onboarding",
        )
        return link["url"]

    # =========================================================================
    # WEBHOOKS
    # =========================================================================

    def verify_event(self, payload: bytes, sig_header: Optional[str], secret: Optional[str]) -> Dict[str, Any]:
        """
        Verify a webhook delivery and return the event as a dict.

        Raises:
            ServiceNotConfiguredError: If the key or signing secret is missing (500)
            WebhookSignatureError: If the header is missing or does not match
        """
        if not self.is_configured or not secret:
            raise ServiceNotConfiguredError(
                "Stripe webhook is not configured on the server.", service="stripe", status_code=500
            )
        if not sig_header:
            raise WebhookSignatureError("Missing stripe-signature header")

        try:
            stripe.Webhook.construct_event(payload, sig_header, secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.warning(f"Stripe webhook signature failure: {e}")
            raise WebhookSignatureError(f"Webhook signature verification failed: {e}") from e

        return json.loads(payload)


# ============================================================================
# DEPENDENCY
# ============================================================================

async def get_stripe_gateway(settings: Settings = Depends(get_settings)) -> StripeGateway:
    return StripeGateway(settings)
