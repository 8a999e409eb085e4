"""
Stripe Connect onboarding endpoint for sellers.
"""

from fastapi import APIRouter, Depends

from sprout.modules.commerce.domain.services.connect_service import ConnectService
from sprout.modules.commerce.presentation.api.schemas.checkout_schemas import OnboardingLinkResponse
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/stripe/connect", tags=["Payouts"])


@router.post(
    "/onboarding-link",
    response_model=OnboardingLinkResponse,
    summary="Start payout onboarding",
    description="Creates the seller's Stripe account on first use and returns the onboarding URL",
    responses={503: {"description": "Stripe Connect not configured"}},
)
async def create_onboarding_link(
    current_user: CurrentUser = Depends(get_current_user),
    connect_service: ConnectService = Depends(),
) -> OnboardingLinkResponse:
    return OnboardingLinkResponse(url=await connect_service.create_onboarding_link(current_user.user_id))
