# 📄 File: sprout/modules/commerce/domain/models/order.py
# 🧭 Purpose (Layman Explanation):
# A receipt for a paid checkout: who bought which plants from which sellers, for how
# much, and later the shipping label and tracking number.
# 🧪 Purpose (Technical Summary):
# Order aggregate with OrderItem lines, status enum, per-seller filtering and the
# shipped transition.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# order_service.py, order_repository.py, shipping label flow

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import generate_id, utc_now


class OrderStatus(str, Enum):
    PAID = "paid"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    """One purchased listing, frozen at checkout time."""

    plant_id: str
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image_url: Optional[str] = None
    seller_id: str

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


class Order(BaseModel):
    id: str = Field(default_factory=generate_id)
    buyer_id: str
    items: List[OrderItem]
    seller_ids: List[str] = Field(default_factory=list)
    total_amount: float = 0.0
    status: OrderStatus = OrderStatus.PAID
    stripe_session_id: str
    created_at: datetime = Field(default_factory=utc_now)

    tracking_number: Optional[str] = None
    label_url: Optional[str] = None
    shipped_at: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_checkout(cls, buyer_id: str, items: List[OrderItem], stripe_session_id: str) -> "Order":
        seller_ids: List[str] = []
        for item in items:
            if item.seller_id not in seller_ids:
                seller_ids.append(item.seller_id)
        return cls(
            buyer_id=buyer_id,
            items=items,
            seller_ids=seller_ids,
            total_amount=round(sum(i.line_total for i in items), 2),
            stripe_session_id=stripe_session_id,
        )

    def items_for_seller(self, seller_id: str) -> List[OrderItem]:
        return [i for i in self.items if i.seller_id == seller_id]

    def is_sold_only_by(self, seller_id: str) -> bool:
        return bool(self.items) and all(i.seller_id == seller_id for i in self.items)

    def mark_shipped(self, tracking_number: Optional[str], label_url: Optional[str]) -> None:
        self.status = OrderStatus.SHIPPED
        self.tracking_number = tracking_number
        self.label_url = label_url
        self.shipped_at = utc_now()
