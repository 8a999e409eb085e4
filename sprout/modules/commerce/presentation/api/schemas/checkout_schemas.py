"""
Request/response schemas for checkout and seller payout onboarding.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from sprout.modules.commerce.presentation.api.schemas.cart_schemas import CartAdjustmentResponse


class CheckoutRequest(BaseModel):
    success_url: HttpUrl = Field(..., description="Where Stripe sends the buyer after paying")
    cancel_url: HttpUrl = Field(..., description="Where Stripe sends the buyer on cancel")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success_url": "https://sprout.example/checkout/success",
                "cancel_url": "https://sprout.example/cart",
            }
        }
    )


class CheckoutSessionResponse(BaseModel):
    session_id: str
    url: str
    adjustments: List[CartAdjustmentResponse] = Field(default_factory=list)


class OnboardingLinkResponse(BaseModel):
    url: str


class WebhookAckResponse(BaseModel):
    received: bool = True
    order_id: Optional[str] = None
    message: Optional[str] = None
