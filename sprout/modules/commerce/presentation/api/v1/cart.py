# 📄 File: sprout/modules/commerce/presentation/api/v1/cart.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for the shopping basket.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over CartService. Every response is the reconciled cart, so stock
# changes since the last view show up as adjustments.
#
# 🔗 Dependencies:
# - FastAPI router, CartService, cart schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, status

from sprout.modules.commerce.domain.services.cart_service import CartService
from sprout.modules.commerce.presentation.api.schemas.cart_schemas import (
    CartAddRequest,
    CartClearResponse,
    CartResponse,
    CartUpdateRequest,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartResponse, summary="Get my cart")
async def get_cart(
    current_user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    return CartResponse.from_domain(await cart_service.get_cart(current_user.user_id))


@router.post(
    "/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a plant to my cart",
    responses={
        404: {"description": "Listing not found"},
        409: {"description": "Already in cart"},
        422: {"description": "Own listing, not for sale or not enough stock"},
    },
)
async def add_to_cart(
    request: CartAddRequest,
    current_user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    cart = await cart_service.add_to_cart(current_user.user_id, request.plant_id, request.quantity)
    return CartResponse.from_domain(cart)


@router.patch("/items/{plant_id}", response_model=CartResponse, summary="Change a cart quantity")
async def update_cart_item(
    plant_id: str,
    request: CartUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    cart = await cart_service.update_cart_item(current_user.user_id, plant_id, request.quantity)
    return CartResponse.from_domain(cart)


@router.delete("/items/{plant_id}", response_model=CartResponse, summary="Remove a plant from my cart")
async def remove_from_cart(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(),
) -> CartResponse:
    return CartResponse.from_domain(await cart_service.remove_from_cart(current_user.user_id, plant_id))


@router.delete("", response_model=CartClearResponse, summary="Empty my cart")
async def clear_cart(
    current_user: CurrentUser = Depends(get_current_user),
    cart_service: CartService = Depends(),
) -> CartClearResponse:
    return CartClearResponse(removed=await cart_service.clear_cart(current_user.user_id))
