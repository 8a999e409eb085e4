# 📄 File: sprout/modules/commerce/domain/models/cart.py
# 🧭 Purpose (Layman Explanation):
# A shopper's basket: which plants they picked and how many, shown together with the
# live price and stock, plus notes about anything that changed since they added it.
# 🧪 Purpose (Technical Summary):
# CartItem persistence model, CartLine (item joined with its listing), CartAdjustment
# produced by stock reconciliation and the aggregated Cart view.
# 🔗 Dependencies:
# pydantic, PlantListing
# 🔄 Connected Modules / Calls From:
# cart_service.py, checkout_service.py, cart schemas

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.modules.plant_listings.domain.models.plant_listing import PlantListing
from sprout.shared.utils.helpers import utc_now


class CartItem(BaseModel):
    user_id: str
    plant_id: str
    quantity: int = Field(1, ge=1)
    added_at: datetime = Field(default_factory=utc_now)


class AdjustmentReason(str, Enum):
    UNAVAILABLE = "unavailable"
    CLAMPED = "clamped"


class CartAdjustment(BaseModel):
    """A change made to the cart because stock moved under it."""

    plant_id: str
    old_quantity: int
    new_quantity: int
    reason: AdjustmentReason

    model_config = ConfigDict(use_enum_values=True)


class CartLine(BaseModel):
    """A cart item together with the listing it points at."""

    item: CartItem
    listing: PlantListing

    @property
    def unit_price(self) -> float:
        return self.listing.price or 0.0

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.item.quantity, 2)

    @property
    def image_url(self) -> Optional[str]:
        return self.listing.image_urls[0] if self.listing.image_urls else None


class Cart(BaseModel):
    user_id: str
    lines: List[CartLine] = Field(default_factory=list)
    adjustments: List[CartAdjustment] = Field(default_factory=list)

    @property
    def total_price(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines
