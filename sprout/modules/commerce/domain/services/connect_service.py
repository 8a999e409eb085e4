# 📄 File: sprout/modules/commerce/domain/services/connect_service.py
# 🧭 Purpose (Layman Explanation):
# Sets a seller up with a Stripe payout account and sends them to Stripe's sign-up form.
# 🧪 Purpose (Technical Summary):
# Creates the seller's Express account on first use, stores its id on the profile and
# issues an account_onboarding AccountLink.
# 🔗 Dependencies:
# StripeGateway, UserService, settings
# 🔄 Connected Modules / Calls From:
# connect API

from fastapi import Depends

from sprout.modules.commerce.infrastructure.external.stripe_gateway import (
    StripeGateway,
    get_stripe_gateway,
)
from sprout.modules.user_management.domain.services.user_service import UserService
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import ServiceNotConfiguredError
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class ConnectService:

    def __init__(
        self,
        gateway: StripeGateway = Depends(get_stripe_gateway),
        user_service: UserService = Depends(),
        settings: Settings = Depends(get_settings),
    ):
        self.gateway = gateway
        self.user_service = user_service
        self.settings = settings

    async def create_onboarding_link(self, user_id: str) -> str:
        """
        Return a Stripe onboarding URL for the seller.

        Raises:
            ServiceNotConfiguredError: Stripe key or onboarding URLs missing (503)
            UserNotFoundError: No profile yet
            PaymentProviderError: Stripe rejected the request
        """
        self.gateway.require_configured()
        if not (self.settings.STRIPE_CONNECT_RETURN_URL and self.settings.STRIPE_CONNECT_REFRESH_URL):
            raise ServiceNotConfiguredError(
                "Stripe Connect onboarding URLs are not configured on the server.", service="stripe"
            )

        user = await self.user_service.get_user_profile(user_id)

        if not user.stripe_account_id:
            user.stripe_account_id = await self.gateway.create_account(email=user.email, user_id=user_id)
            await self.user_service.save(user)
            logger.log_business_event(
                "connect_account_created",
                f"Stripe account created for {user_id}",
                entity_id=user_id,
                entity_type="user",
            )

        return await self.gateway.create_account_link(
            user.stripe_account_id,
            refresh_url=self.settings.STRIPE_CONNECT_REFRESH_URL,
            return_url=self.settings.STRIPE_CONNECT_RETURN_URL,
        )
