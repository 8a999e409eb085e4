# 📄 File: sprout/modules/shipping/presentation/api/v1/shipping.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for the shipping guide and for sellers buying postage labels.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over ShippingService. The country list and compliance lookup are
# public; label creation needs the signed-in seller of the order.
#
# 🔗 Dependencies:
# - FastAPI router, ShippingService, shipping schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, Query

from sprout.modules.shipping.domain.services.shipping_service import ShippingService
from sprout.modules.shipping.presentation.api.schemas.shipping_schemas import (
    ComplianceResponse,
    CountryListResponse,
    CreateLabelRequest,
    LabelResponse,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/shipping", tags=["Shipping"])


@router.get("/countries", response_model=CountryListResponse, summary="Supported countries")
async def get_countries() -> CountryListResponse:
    return CountryListResponse(countries=ShippingService.get_countries())


@router.get(
    "/compliance",
    response_model=ComplianceResponse,
    summary="Paperwork needed for a route and species",
    responses={404: {"description": "No specific compliance rules found"}},
)
async def get_compliance(
    from_country: str = Query(..., min_length=2, max_length=2, alias="from"),
    to_country: str = Query(..., min_length=2, max_length=2, alias="to"),
    species: str = Query(..., min_length=1, max_length=200),
    shipping_service: ShippingService = Depends(),
) -> ComplianceResponse:
    rule = shipping_service.get_compliance_requirements(from_country, to_country, species)
    return ComplianceResponse(rule=rule)


@router.post(
    "/labels",
    response_model=LabelResponse,
    summary="Buy a shipping label for an order",
    responses={
        400: {"description": "No rates or label purchase refused"},
        403: {"description": "Not the seller of this order"},
        500: {"description": "Shippo is not configured"},
    },
)
async def create_label(
    request: CreateLabelRequest,
    current_user: CurrentUser = Depends(get_current_user),
    shipping_service: ShippingService = Depends(),
) -> LabelResponse:
    label = await shipping_service.create_shipping_label(
        seller_id=current_user.user_id,
        order_id=request.order_id,
        from_address=request.from_address,
        to_address=request.to_address,
        parcel=request.parcel,
    )
    return LabelResponse(**label.model_dump())
