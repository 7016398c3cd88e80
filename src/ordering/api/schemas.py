"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the Order aggregate. Money is
exposed as floats, matching the aggregate's fields.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from ordering.order.order import DeliveryMethod, Order, OrderItem


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class GuestInfoSchema(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrdersRequest(BaseModel):
    items: list[CartItemSchema]
    guest_info: GuestInfoSchema | None = None
    payment_method: str | None = None
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    delivery_address: dict = Field(default_factory=dict)
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-bread", "quantity": 2},
                        {"product_id": "prod-jam", "quantity": 1},
                    ],
                    "payment_method": "card",
                    "delivery_method": "pickup",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str
    vendor_notes: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"status": "confirmed", "vendor_notes": "Glaze is drying"}]}}


class VendorNotesRequest(BaseModel):
    vendor_notes: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str

    model_config = {"json_schema_extra": {"examples": [{"payment_status": "paid"}]}}


class CancelOrderRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    product_type: str
    quantity: int
    unit_price: float
    line_total: float
    estimated_completion_date: date | None = None
    scheduled_pickup_date: date | None = None
    scheduled_pickup_time: str | None = None

    @classmethod
    def from_item(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            product_id=str(item.product_id),
            product_name=item.product_name or "",
            product_type=item.product_type,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.line_total,
            estimated_completion_date=item.estimated_completion_date,
            scheduled_pickup_date=item.scheduled_pickup_date,
            scheduled_pickup_time=item.scheduled_pickup_time,
        )


class RevenueResponse(BaseModel):
    gross_amount: float
    platform_commission: float
    artisan_earnings: float
    commission_rate: float
    status: str


class OrderResponse(BaseModel):
    id: str
    version: int
    vendor_id: str
    patron_id: str | None = None
    items: list[OrderItemResponse]
    total_amount: float
    status: str
    ready_to_ship_status: str | None = None
    made_to_order_status: str | None = None
    scheduled_order_status: str | None = None
    payment_status: str
    payment_method: str | None = None
    paid_at: datetime | None = None
    delivery_method: str
    delivery_address: dict = Field(default_factory=dict)
    revenue: RevenueResponse | None = None
    confirmed_at: datetime | None = None
    ready_at: datetime | None = None
    actual_delivery_time: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    buyer_notes: str | None = None
    vendor_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        revenue = None
        if order.revenue is not None:
            revenue = RevenueResponse(
                gross_amount=order.revenue.gross_amount,
                platform_commission=order.revenue.platform_commission,
                artisan_earnings=order.revenue.artisan_earnings,
                commission_rate=order.revenue.commission_rate,
                status=order.revenue.status,
            )

        return cls(
            id=str(order.id),
            version=order._version,
            vendor_id=str(order.vendor_id),
            patron_id=str(order.patron_id) if order.patron_id else None,
            items=[OrderItemResponse.from_item(item) for item in order.items],
            total_amount=order.total_amount,
            status=order.status,
            ready_to_ship_status=order.ready_to_ship_status,
            made_to_order_status=order.made_to_order_status,
            scheduled_order_status=order.scheduled_order_status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            paid_at=order.paid_at,
            delivery_method=order.delivery_method,
            delivery_address=order.address,
            revenue=revenue,
            confirmed_at=order.confirmed_at,
            ready_at=order.ready_at,
            actual_delivery_time=order.actual_delivery_time,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            buyer_notes=order.buyer_notes,
            vendor_notes=order.vendor_notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class PlaceOrdersResponse(BaseModel):
    orders: list[OrderResponse]


class VendorOrderStatsResponse(BaseModel):
    total_orders: int
    by_status: dict[str, int]
    delivered_revenue: float
