# 📄 File: sprout/modules/plant_listings/domain/models/plant_listing.py
# 🧭 Purpose (Layman Explanation):
# Describes a plant someone puts up for sale or trade: what it is, photos, price,
# how many are left, who is selling it and whether it is being promoted.
# 🧪 Purpose (Technical Summary):
# PlantListing domain model with listing-type rules, stock-driven availability and
# featured-window handling.
# 🔗 Dependencies:
# pydantic, sprout.shared.utils.helpers
# 🔄 Connected Modules / Calls From:
# plant_listing_service.py, plant_listing_repository.py, cart and order services,
# wishlist resolution in user_service.py

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import generate_id, utc_now


class ListingType(str, Enum):
    SALE = "sale"
    TRADE = "trade"
    SALE_TRADE = "sale_trade"


class PlantListing(BaseModel):
    """
    A plant offered on the marketplace.

    Owner display fields are copied from the owner's profile when the listing
    is created so catalog pages need no join.
    """

    id: str = Field(default_factory=generate_id)
    name: str
    description: str = ""
    image_urls: List[str] = Field(default_factory=list)

    price: Optional[float] = Field(None, ge=0)
    trade_only: bool = False
    listing_type: ListingType = ListingType.SALE

    is_available: bool = True
    quantity: int = Field(1, ge=0)

    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None

    owner_id: str
    owner_username: str
    owner_avatar_url: Optional[str] = None

    listed_date: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    is_featured: bool = False
    featured_until: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    def apply_listing_type_rules(self) -> None:
        """
        Enforce price/trade rules for the listing type.

        Raises:
            ValueError: If a sale listing has no price
        """
        if self.listing_type == ListingType.TRADE.value:
            self.trade_only = True
        else:
            self.trade_only = False
            if self.price is None:
                raise ValueError("A price is required for sale listings")

    def sync_availability(self) -> None:
        """Availability follows stock: a listing with nothing left is not available."""
        self.is_available = self.quantity > 0

    @property
    def is_purchasable(self) -> bool:
        return (
            self.is_available
            and self.quantity > 0
            and not self.trade_only
            and self.price is not None
            and self.price > 0
        )

    def is_featured_now(self, now: Optional[datetime] = None) -> bool:
        if not self.is_featured or self.featured_until is None:
            return False
        return self.featured_until > (now or utc_now())

    def feature(self, days: int, now: Optional[datetime] = None) -> None:
        """
        Feature for `days`. An active feature is extended from its current end.
        """
        now = now or utc_now()
        start = self.featured_until if self.is_featured_now(now) else now
        self.is_featured = True
        self.featured_until = start + timedelta(days=days)
        self.updated_at = now

    def decrement_stock(self, quantity: int) -> int:
        """Take `quantity` out of stock, floored at zero. Returns the new stock."""
        self.quantity = max(0, self.quantity - quantity)
        if self.quantity == 0:
            self.is_available = False
        self.updated_at = utc_now()
        return self.quantity
