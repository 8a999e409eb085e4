# 📄 File: sprout/modules/commerce/presentation/api/v1/checkout.py
# 🧭 Purpose (Layman Explanation):
# The "Pay now" and "Go Pro" buttons: each returns a Stripe page to send the member to.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over CheckoutService, rate limited per client address with slowapi.
#
# 🔗 Dependencies:
# - FastAPI router, slowapi limiter
# - CheckoutService, checkout schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, Request

from sprout.modules.commerce.domain.services.checkout_service import CheckoutService
from sprout.modules.commerce.presentation.api.schemas.cart_schemas import CartAdjustmentResponse
from sprout.modules.commerce.presentation.api.schemas.checkout_schemas import (
    CheckoutRequest,
    CheckoutSessionResponse,
)
from sprout.shared.config.settings import get_settings
from sprout.shared.core.dependencies import CurrentUser, get_current_user
from sprout.shared.core.rate_limiter import limiter

router = APIRouter(prefix="/checkout", tags=["Checkout"])

CHECKOUT_RATE_LIMIT = get_settings().CHECKOUT_RATE_LIMIT


@router.post(
    "",
    response_model=CheckoutSessionResponse,
    summary="Pay for my cart",
    responses={
        400: {"description": "Empty cart or nothing purchasable"},
        429: {"description": "Too many checkout attempts"},
        502: {"description": "Stripe error"},
        503: {"description": "Payments not configured"},
    },
)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def create_checkout_session(
    request: Request,
    checkout_request: CheckoutRequest,
    current_user: CurrentUser = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(),
) -> CheckoutSessionResponse:
    session = await checkout_service.create_checkout_session(
        current_user.user_id,
        success_url=str(checkout_request.success_url),
        cancel_url=str(checkout_request.cancel_url),
        email=current_user.email,
    )
    return CheckoutSessionResponse(
        session_id=session["session_id"],
        url=session["url"],
        adjustments=[CartAdjustmentResponse.from_domain(a) for a in session["adjustments"]],
    )


@router.post(
    "/subscription",
    response_model=CheckoutSessionResponse,
    summary="Subscribe to Pro",
    responses={429: {"description": "Too many checkout attempts"}, 503: {"description": "Payments not configured"}},
)
@limiter.limit(CHECKOUT_RATE_LIMIT)
async def create_subscription_checkout(
    request: Request,
    checkout_request: CheckoutRequest,
    current_user: CurrentUser = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(),
) -> CheckoutSessionResponse:
    session = await checkout_service.create_subscription_checkout(
        current_user.user_id,
        success_url=str(checkout_request.success_url),
        cancel_url=str(checkout_request.cancel_url),
        email=current_user.email,
    )
    return CheckoutSessionResponse(session_id=session["session_id"], url=session["url"])
