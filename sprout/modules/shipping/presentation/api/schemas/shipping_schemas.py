"""
Shipping schemas: the country list, compliance answers and label requests.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from sprout.modules.shipping.domain.models.compliance import ComplianceRule, Country
from sprout.modules.shipping.domain.models.label import Parcel, ShippingAddress


class CountryListResponse(BaseModel):
    countries: List[Country]


class ComplianceResponse(BaseModel):
    rule: ComplianceRule


class CreateLabelRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    from_address: ShippingAddress
    to_address: ShippingAddress
    parcel: Parcel

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "order_id": "ord_123",
                "from_address": {
                    "name": "Shawn Ippotle",
                    "street1": "215 Clayton St.",
                    "city": "San Francisco",
                    "state": "CA",
                    "zip": "94117",
                    "country": "US",
                },
                "to_address": {
                    "name": "Mr Hippo",
                    "street1": "965 Mission St",
                    "city": "San Francisco",
                    "state": "CA",
                    "zip": "94103",
                    "country": "US",
                },
                "parcel": {"length": 10, "width": 5, "height": 5, "weight": 2},
            }
        }
    )


class LabelResponse(BaseModel):
    label_url: str
    tracking_number: str
