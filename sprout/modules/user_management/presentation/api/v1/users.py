# 📄 File: sprout/modules/user_management/presentation/api/v1/users.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for member profiles: set up and edit my profile, change my picture,
# look at someone else's page, keep a wishlist and follow other growers.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over UserService. Caller-scoped routes live under /users/me and are
# declared before the /users/{user_id} routes so they take precedence.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile
# - UserService, user and listing schemas, shared auth dependencies
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, File, UploadFile, status

from sprout.modules.plant_listings.presentation.api.schemas.plant_listing_schemas import (
    PlantListingListResponse,
    PlantListingResponse,
)
from sprout.modules.user_management.domain.services.user_service import UserService
from sprout.modules.user_management.presentation.api.schemas.user_schemas import (
    FollowResponse,
    ProfileCreateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    PublicProfileResponse,
    WishlistResponse,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


# =============================================================================
# MY PROFILE
# =============================================================================

@router.post(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create my profile",
    description="Called once after sign-up; the profile id is the auth uid",
    responses={409: {"description": "Profile exists or username taken"}},
)
async def create_my_profile(
    request: ProfileCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> ProfileResponse:
    user = await user_service.create_user_profile(
        user_id=current_user.user_id,
        email=current_user.email,
        username=request.username,
    )
    return ProfileResponse.from_domain(user)


@router.get("/me", response_model=ProfileResponse, summary="Get my profile")
async def get_my_profile(
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> ProfileResponse:
    return ProfileResponse.from_domain(await user_service.get_user_profile(current_user.user_id))


@router.patch("/me", response_model=ProfileResponse, summary="Update my profile")
async def update_my_profile(
    request: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> ProfileResponse:
    user = await user_service.update_user_data(
        current_user.user_id, request.model_dump(exclude_unset=True)
    )
    return ProfileResponse.from_domain(user)


@router.post(
    "/me/avatar",
    response_model=ProfileResponse,
    summary="Upload my profile picture",
    responses={
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
        503: {"description": "Storage not configured"},
    },
)
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> ProfileResponse:
    data = await file.read()
    user = await user_service.upload_profile_image(
        current_user.user_id,
        filename=file.filename or "avatar",
        data=data,
        content_type=file.content_type or "application/octet-stream",
    )
    return ProfileResponse.from_domain(user)


# =============================================================================
# WISHLIST
# =============================================================================

@router.get("/me/wishlist", response_model=PlantListingListResponse, summary="List my wishlisted plants")
async def get_my_wishlist(
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> PlantListingListResponse:
    plants = await user_service.get_wishlist_plants(current_user.user_id)
    return PlantListingListResponse(plants=[PlantListingResponse.from_domain(p) for p in plants])


@router.put(
    "/me/wishlist/{plant_id}",
    response_model=WishlistResponse,
    summary="Add a plant to my wishlist",
    description="Idempotent: adding a plant twice keeps a single entry",
)
async def add_to_wishlist(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> WishlistResponse:
    user = await user_service.add_plant_to_wishlist(current_user.user_id, plant_id)
    return WishlistResponse(favorite_plants=user.favorite_plants)


@router.delete("/me/wishlist/{plant_id}", response_model=WishlistResponse, summary="Remove a plant from my wishlist")
async def remove_from_wishlist(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> WishlistResponse:
    user = await user_service.remove_plant_from_wishlist(current_user.user_id, plant_id)
    return WishlistResponse(favorite_plants=user.favorite_plants)


# =============================================================================
# PUBLIC PROFILES
# =============================================================================

@router.get("/by-username/{username}", response_model=PublicProfileResponse, summary="Find a member by username")
async def get_user_by_username(
    username: str,
    user_service: UserService = Depends(),
) -> PublicProfileResponse:
    return PublicProfileResponse.from_domain(await user_service.get_user_by_username(username))


@router.get("/{user_id}", response_model=PublicProfileResponse, summary="Get a member's public profile")
async def get_user_profile(
    user_id: str,
    user_service: UserService = Depends(),
) -> PublicProfileResponse:
    return PublicProfileResponse.from_domain(await user_service.get_user_profile(user_id))


@router.get("/{user_id}/plants", response_model=PlantListingListResponse, summary="List a member's plants")
async def get_user_plants(
    user_id: str,
    user_service: UserService = Depends(),
) -> PlantListingListResponse:
    plants = await user_service.get_user_plant_listings(user_id)
    return PlantListingListResponse(plants=[PlantListingResponse.from_domain(p) for p in plants])


@router.post("/{user_id}/follow", response_model=FollowResponse, summary="Follow a member")
async def follow_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> FollowResponse:
    user = await user_service.follow_user(current_user.user_id, user_id)
    return FollowResponse(following=user.following)


@router.delete("/{user_id}/follow", response_model=FollowResponse, summary="Unfollow a member")
async def unfollow_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(),
) -> FollowResponse:
    user = await user_service.unfollow_user(current_user.user_id, user_id)
    return FollowResponse(following=user.following)
