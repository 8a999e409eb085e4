# 📄 File: sprout/modules/commerce/presentation/api/v1/webhooks.py
# 🧭 Purpose (Layman Explanation):
# The addresses Stripe calls to tell us about payments, subscriptions and seller accounts.
#
# 🧪 Purpose (Technical Summary):
# Unauthenticated endpoints that hand the raw body and Stripe-Signature header to
# StripeWebhookService. The body is read raw because signature verification needs the
# exact bytes Stripe signed.
#
# 🔗 Dependencies:
# - FastAPI router, StripeWebhookService
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router (called by Stripe)

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request

from sprout.modules.commerce.domain.services.webhook_service import StripeWebhookService
from sprout.modules.commerce.presentation.api.schemas.checkout_schemas import WebhookAckResponse

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

WEBHOOK_RESPONSES = {
    400: {"description": "Missing or invalid signature, or invalid metadata"},
    500: {"description": "Not configured, or processing failed (Stripe retries)"},
}


@router.post(
    "/stripe",
    response_model=WebhookAckResponse,
    response_model_exclude_none=True,
    summary="Stripe checkout and subscription events",
    responses=WEBHOOK_RESPONSES,
)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    webhook_service: StripeWebhookService = Depends(),
) -> Dict[str, Any]:
    payload = await request.body()
    return await webhook_service.handle_checkout_webhook(payload, stripe_signature)


@router.post(
    "/stripe-connect",
    response_model=WebhookAckResponse,
    response_model_exclude_none=True,
    summary="Stripe Connect account events",
    responses=WEBHOOK_RESPONSES,
)
async def stripe_connect_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    webhook_service: StripeWebhookService = Depends(),
) -> Dict[str, Any]:
    payload = await request.body()
    return await webhook_service.handle_connect_webhook(payload, stripe_signature)
