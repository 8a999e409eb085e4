# 📄 File: sprout/modules/plant_listings/presentation/api/schemas/plant_listing_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of the forms a seller fills in to list a plant, and of the plant cards and
# catalog pages the app receives back.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for plant listings and the paginated catalog.
#
# 🔗 Dependencies:
# - pydantic
# - PlantListing domain model
#
# 🔄 Connected Modules / Calls From:
# - plant_listings API, users API (wishlist and profile listings), cart views

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sprout.modules.plant_listings.domain.models.plant_listing import ListingType, PlantListing

MAX_TAGS = 10

# Fields a PATCH may omit but never clear
REQUIRED_ON_UPDATE = ("name", "description", "listing_type", "quantity", "tags")


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag.lower() not in {t.lower() for t in cleaned}:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed")
    return cleaned


class PlantListingCreateRequest(BaseModel):
    """New listing form."""

    name: str = Field(..., min_length=2, max_length=120, description="Plant name")
    description: str = Field("", max_length=5000)
    price: Optional[float] = Field(None, ge=0, description="Required unless the listing is trade only")
    listing_type: ListingType = Field(ListingType.SALE, description="sale, trade or sale_trade")
    quantity: int = Field(1, ge=0, le=10000, description="Plants in stock")
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = Field(None, max_length=255)
    image_urls: List[str] = Field(default_factory=list, max_length=10)

    model_config = ConfigDict(
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "name": "Monstera deliciosa",
                "description": "Healthy, well rooted, 4 leaves",
                "price": 35.0,
                "listing_type": "sale",
                "quantity": 2,
                "tags": ["monstera", "aroid"],
                "location": "Portland, OR",
            }
        },
    )

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)


class PlantListingUpdateRequest(BaseModel):
    """Partial listing update; only provided fields change."""

    name: Optional[str] = Field(None, min_length=2, max_length=120)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[float] = Field(None, ge=0)
    listing_type: Optional[ListingType] = None
    quantity: Optional[int] = Field(None, ge=0, le=10000)
    tags: Optional[List[str]] = None
    location: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)

    @model_validator(mode="after")
    def reject_cleared_fields(self) -> "PlantListingUpdateRequest":
        cleared = [f for f in REQUIRED_ON_UPDATE if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class PlantListingResponse(BaseModel):
    id: str
    name: str
    description: str
    image_urls: List[str]
    price: Optional[float] = None
    trade_only: bool
    listing_type: str
    is_available: bool
    quantity: int
    tags: List[str]
    location: Optional[str] = None
    owner_id: str
    owner_username: str
    owner_avatar_url: Optional[str] = None
    listed_date: datetime
    updated_at: datetime
    is_featured: bool
    featured_until: Optional[datetime] = None

    @classmethod
    def from_domain(cls, listing: PlantListing) -> "PlantListingResponse":
        return cls(**listing.model_dump())


class PlantListingPageResponse(BaseModel):
    """One catalog page."""
    plants: List[PlantListingResponse]
    next_cursor: Optional[str] = Field(None, description="Pass back as `cursor` for the next page; null on the last page")


class PlantListingListResponse(BaseModel):
    plants: List[PlantListingResponse]


class PlantImageDeleteRequest(BaseModel):
    image_url: str = Field(..., min_length=1)
