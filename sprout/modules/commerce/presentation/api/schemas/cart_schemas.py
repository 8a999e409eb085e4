# 📄 File: sprout/modules/commerce/presentation/api/schemas/cart_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of basket requests and of the basket the app shows, including notes about
# items that changed because stock ran low.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for the cart API.
#
# 🔗 Dependencies:
# - pydantic
# - Cart domain models
#
# 🔄 Connected Modules / Calls From:
# - commerce cart and checkout routers

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sprout.modules.commerce.domain.models.cart import Cart, CartAdjustment, CartLine


class CartAddRequest(BaseModel):
    plant_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=1000)


class CartUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=0, le=1000, description="0 removes the item")


class CartAdjustmentResponse(BaseModel):
    plant_id: str
    old_quantity: int
    new_quantity: int
    reason: str

    @classmethod
    def from_domain(cls, adjustment: CartAdjustment) -> "CartAdjustmentResponse":
        return cls(**adjustment.model_dump())


class CartItemResponse(BaseModel):
    plant_id: str
    name: str
    price: Optional[float] = None
    quantity: int
    available_quantity: int
    image_url: Optional[str] = None
    seller_id: str
    seller_username: str
    line_total: float
    added_at: datetime

    @classmethod
    def from_domain(cls, line: CartLine) -> "CartItemResponse":
        return cls(
            plant_id=line.listing.id,
            name=line.listing.name,
            price=line.listing.price,
            quantity=line.item.quantity,
            available_quantity=line.listing.quantity,
            image_url=line.image_url,
            seller_id=line.listing.owner_id,
            seller_username=line.listing.owner_username,
            line_total=line.line_total,
            added_at=line.item.added_at,
        )


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    total_price: float
    item_count: int
    adjustments: List[CartAdjustmentResponse]

    @classmethod
    def from_domain(cls, cart: Cart) -> "CartResponse":
        return cls(
            items=[CartItemResponse.from_domain(line) for line in cart.lines],
            total_price=cart.total_price,
            item_count=cart.item_count,
            adjustments=[CartAdjustmentResponse.from_domain(a) for a in cart.adjustments],
        )


class CartClearResponse(BaseModel):
    removed: int
