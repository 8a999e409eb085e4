"""
Shipping label value objects: the addresses and parcel a seller enters, the rates
Shippo quotes, and the purchased label.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class ShippingAddress(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    street1: str = Field(..., min_length=1, max_length=200)
    street2: Optional[str] = Field(None, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=2)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: str) -> str:
        return v.upper()

    def to_shippo(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Parcel(BaseModel):
    length: float = Field(..., gt=0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    distance_unit: str = Field(default="in", pattern="^(in|cm)$")
    weight: float = Field(..., gt=0)
    mass_unit: str = Field(default="lb", pattern="^(lb|oz|kg|g)$")

    def to_shippo(self) -> Dict[str, Any]:
        # Shippo takes dimensions as strings
        return {
            "length": str(self.length),
            "width": str(self.width),
            "height": str(self.height),
            "distance_unit": self.distance_unit,
            "weight": str(self.weight),
            "mass_unit": self.mass_unit,
        }


class ShippingRate(BaseModel):
    object_id: str
    provider: str
    servicelevel_token: Optional[str] = None
    amount: Decimal
    currency: str = "USD"

    @classmethod
    def from_shippo(cls, data: Dict[str, Any]) -> Optional["ShippingRate"]:
        """Parse one Shippo rate; malformed entries yield None."""
        try:
            servicelevel = data.get("servicelevel") or {}
            return cls(
                object_id=data["object_id"],
                provider=data.get("provider", ""),
                servicelevel_token=servicelevel.get("token"),
                amount=Decimal(str(data.get("amount"))),
                currency=data.get("currency") or "USD",
            )
        except (KeyError, InvalidOperation, ValueError):
            return None


class ShippingLabel(BaseModel):
    label_url: str
    tracking_number: str
