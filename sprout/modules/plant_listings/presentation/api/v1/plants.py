# 📄 File: sprout/modules/plant_listings/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for browsing the plant catalog and for sellers to manage their listings,
# photos and promotions.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over PlantListingService: cursor-paginated catalog with tag and name filters,
# featured section, owner-only CRUD, image upload/delete and featuring.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile
# - PlantListingService, plant listing schemas, shared auth and pagination dependencies
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from sprout.modules.plant_listings.domain.services.plant_listing_service import PlantListingService
from sprout.modules.plant_listings.presentation.api.schemas.plant_listing_schemas import (
    PlantImageDeleteRequest,
    PlantListingCreateRequest,
    PlantListingListResponse,
    PlantListingPageResponse,
    PlantListingResponse,
    PlantListingUpdateRequest,
)
from sprout.shared.core.dependencies import CurrentUser, PaginationParams, get_current_user

router = APIRouter(prefix="/plants", tags=["Plant Listings"])


# =============================================================================
# CATALOG
# =============================================================================

@router.get(
    "",
    response_model=PlantListingPageResponse,
    summary="Browse available plants",
    description="Available listings, newest first. Pass `next_cursor` back as `cursor` for the next page.",
    responses={422: {"description": "Malformed cursor"}},
)
async def get_available_plants(
    pagination: PaginationParams = Depends(),
    tag: Optional[str] = Query(None, max_length=50, description="Only listings with this tag"),
    q: Optional[str] = Query(None, max_length=100, description="Case-insensitive name search"),
    listing_service: PlantListingService = Depends(),
) -> PlantListingPageResponse:
    plants, next_cursor = await listing_service.get_available_plant_listings(
        limit=pagination.limit, cursor=pagination.cursor, tag=tag, query=q
    )
    return PlantListingPageResponse(
        plants=[PlantListingResponse.from_domain(p) for p in plants],
        next_cursor=next_cursor,
    )


@router.get("/featured", response_model=PlantListingListResponse, summary="Featured plants")
async def get_featured_plants(
    limit: int = Query(10, ge=1, le=50),
    listing_service: PlantListingService = Depends(),
) -> PlantListingListResponse:
    plants = await listing_service.get_featured_listings(limit)
    return PlantListingListResponse(plants=[PlantListingResponse.from_domain(p) for p in plants])


@router.get("/{plant_id}", response_model=PlantListingResponse, summary="Get a listing")
async def get_plant(
    plant_id: str,
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    return PlantListingResponse.from_domain(await listing_service.get_plant_listing(plant_id))


# =============================================================================
# SELLER OPERATIONS
# =============================================================================

@router.post(
    "",
    response_model=PlantListingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="List a plant",
    responses={404: {"description": "Seller profile not created"}, 422: {"description": "Invalid listing"}},
)
async def create_plant(
    request: PlantListingCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    listing = await listing_service.add_plant_listing(current_user.user_id, request.model_dump())
    return PlantListingResponse.from_domain(listing)


@router.patch(
    "/{plant_id}",
    response_model=PlantListingResponse,
    summary="Update a listing",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Listing not found"}},
)
async def update_plant(
    plant_id: str,
    request: PlantListingUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    listing = await listing_service.update_plant_listing(
        plant_id, current_user.user_id, request.model_dump(exclude_unset=True)
    )
    return PlantListingResponse.from_domain(listing)


@router.delete(
    "/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a listing",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Listing not found"}},
)
async def delete_plant(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> None:
    await listing_service.delete_plant_listing(plant_id, current_user.user_id)


@router.post(
    "/{plant_id}/images",
    response_model=PlantListingResponse,
    summary="Upload a listing photo",
    responses={413: {"description": "Image too large"}, 415: {"description": "Unsupported image type"}},
)
async def upload_plant_image(
    plant_id: str,
    file: UploadFile = File(...),
    index: Optional[int] = Form(None, ge=0, le=9),
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    data = await file.read()
    listing = await listing_service.upload_plant_image(
        plant_id,
        current_user.user_id,
        filename=file.filename or "plant",
        data=data,
        content_type=file.content_type or "application/octet-stream",
        index=index,
    )
    return PlantListingResponse.from_domain(listing)


@router.post(
    "/{plant_id}/images/delete",
    response_model=PlantListingResponse,
    summary="Remove a listing photo",
)
async def delete_plant_image(
    plant_id: str,
    request: PlantImageDeleteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    listing = await listing_service.delete_plant_image(plant_id, current_user.user_id, request.image_url)
    return PlantListingResponse.from_domain(listing)


@router.post(
    "/{plant_id}/feature",
    response_model=PlantListingResponse,
    summary="Feature a listing",
    description="Promotes the listing for the configured number of days; featuring again extends it",
)
async def feature_plant(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    listing_service: PlantListingService = Depends(),
) -> PlantListingResponse:
    return PlantListingResponse.from_domain(
        await listing_service.feature_listing(plant_id, current_user.user_id)
    )
