# 📄 File: sprout/modules/commerce/presentation/api/schemas/order_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of orders as buyers and sellers see them, the seller sales summary and the
# "mark as shipped" form.
#
# 🧪 Purpose (Technical Summary):
# Pydantic response schemas for orders and seller stats, and the manual ship request.
#
# 🔗 Dependencies:
# - pydantic
# - Order domain model
#
# 🔄 Connected Modules / Calls From:
# - commerce orders router, shipping labels router

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sprout.modules.commerce.domain.models.order import Order


class OrderItemResponse(BaseModel):
    plant_id: str
    name: str
    price: float
    quantity: int
    image_url: Optional[str] = None
    seller_id: str


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    items: List[OrderItemResponse]
    seller_ids: List[str]
    total_amount: float
    status: str
    created_at: datetime
    tracking_number: Optional[str] = None
    label_url: Optional[str] = None
    shipped_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        data = order.model_dump(exclude={"stripe_session_id"})
        return cls(**data)


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]


class SellerStatsResponse(BaseModel):
    revenue: float
    sales: int
    active_listings: int
    top_plants: Dict[str, int]


class MarkShippedRequest(BaseModel):
    tracking_number: str = Field(..., min_length=3, max_length=100)
    label_url: str = Field("", max_length=1024)
