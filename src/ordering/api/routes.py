"""FastAPI routes for the Ordering domain — checkout and order lifecycle.

The acting user is taken from the ``X-Actor-Id`` header; authentication
happens upstream of this service.
"""

from fastapi import APIRouter, Depends, Header, Request

from ordering.api.schemas import (
    CancelOrderRequest,
    OrderResponse,
    PlaceOrdersRequest,
    PlaceOrdersResponse,
    UpdatePaymentStatusRequest,
    UpdateStatusRequest,
    VendorNotesRequest,
    VendorOrderStatsResponse,
)
from ordering.order.order import GuestInfo
from ordering.order.service import OrderService
from ordering.order.splitting import CartItem
from ordering.order.statistics import vendor_order_stats


def get_order_service(request: Request) -> OrderService:
    return OrderService(request.app.state.product_lookup)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrdersResponse)
async def place_orders(
    body: PlaceOrdersRequest,
    x_actor_id: str | None = Header(default=None),
    service: OrderService = Depends(get_order_service),
) -> PlaceOrdersResponse:
    """Split the cart into one order per vendor.

    A request with an ``X-Actor-Id`` header is placed for that patron;
    otherwise ``guest_info`` must be supplied.
    """
    guest_info = GuestInfo(**body.guest_info.model_dump()) if body.guest_info else None
    orders = service.place_orders(
        [CartItem(product_id=item.product_id, quantity=item.quantity) for item in body.items],
        patron_id=x_actor_id,
        guest_info=guest_info,
        payment_method=body.payment_method,
        delivery_method=body.delivery_method,
        delivery_address=body.delivery_address,
        notes=body.notes,
    )
    return PlaceOrdersResponse(orders=[OrderResponse.from_order(order) for order in orders])


@order_router.get("/artisan/stats", response_model=VendorOrderStatsResponse)
async def artisan_order_stats(
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> VendorOrderStatsResponse:
    stats = vendor_order_stats(service.vendor_orders(x_actor_id))
    return VendorOrderStatsResponse(
        total_orders=stats["total_orders"],
        by_status=stats["by_status"],
        delivered_revenue=float(stats["delivered_revenue"]),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_order(service.get_order(order_id, acting_user_id=x_actor_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.update_status(
        order_id, body.status, acting_vendor_id=x_actor_id, vendor_notes=body.vendor_notes
    )
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/payment", response_model=OrderResponse)
async def update_payment_status(
    order_id: str,
    body: UpdatePaymentStatusRequest,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.update_payment_status(order_id, body.payment_status, acting_user_id=x_actor_id)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.cancel(order_id, acting_user_id=x_actor_id, reason=body.reason)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/notes", response_model=OrderResponse)
async def update_vendor_notes(
    order_id: str,
    body: VendorNotesRequest,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.update_vendor_notes(order_id, body.vendor_notes, acting_vendor_id=x_actor_id)
    return OrderResponse.from_order(order)
