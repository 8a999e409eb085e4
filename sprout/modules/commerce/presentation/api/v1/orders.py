# 📄 File: sprout/modules/commerce/presentation/api/v1/orders.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for "my purchases", "my sales", the seller dashboard numbers and
# marking an order as shipped.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over OrderService. Seller views only contain the caller's own lines.
#
# 🔗 Dependencies:
# - FastAPI router, OrderService, order schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends

from sprout.modules.commerce.domain.services.order_service import OrderService
from sprout.modules.commerce.presentation.api.schemas.order_schemas import (
    MarkShippedRequest,
    OrderListResponse,
    OrderResponse,
    SellerStatsResponse,
)
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=OrderListResponse, summary="My purchases")
async def get_my_orders(
    current_user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(),
) -> OrderListResponse:
    orders = await order_service.get_orders_for_buyer(current_user.user_id)
    return OrderListResponse(orders=[OrderResponse.from_domain(o) for o in orders])


@router.get("/sales", response_model=OrderListResponse, summary="My sales")
async def get_my_sales(
    current_user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(),
) -> OrderListResponse:
    orders = await order_service.get_orders_for_seller(current_user.user_id)
    return OrderListResponse(orders=[OrderResponse.from_domain(o) for o in orders])


@router.get(
    "/sales/stats",
    response_model=SellerStatsResponse,
    summary="My sales summary",
    responses={402: {"description": "Seller is not on the Pro plan"}},
)
async def get_my_sales_stats(
    current_user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(),
) -> SellerStatsResponse:
    return SellerStatsResponse(**await order_service.get_seller_stats(current_user.user_id))


@router.post(
    "/{order_id}/ship",
    response_model=OrderResponse,
    summary="Mark an order as shipped",
    responses={403: {"description": "Order contains other sellers' items"}, 404: {"description": "Order not found"}},
)
async def mark_order_shipped(
    order_id: str,
    request: MarkShippedRequest,
    current_user: CurrentUser = Depends(get_current_user),
    order_service: OrderService = Depends(),
) -> OrderResponse:
    order = await order_service.mark_order_shipped(
        order_id, current_user.user_id, request.tracking_number, request.label_url
    )
    return OrderResponse.from_domain(order)
