"""FastAPI routes for the Revenue domain — summaries and per-order breakdowns."""

from fastapi import APIRouter, Depends, Header, Query, Request
from ordering.api.routes import get_order_service
from ordering.order.service import OrderService
from shared.errors import ObjectNotFoundError

from revenue.api.schemas import (
    PlatformRevenueSummaryResponse,
    RevenueBreakdownResponse,
    RevenueSummaryResponse,
)
from revenue.commission import revenue_transparency
from revenue.summary import summarize_platform_revenue, summarize_vendor_revenue

revenue_router = APIRouter(prefix="/revenue", tags=["revenue"])


@revenue_router.get("/artisan/summary", response_model=RevenueSummaryResponse)
async def artisan_revenue_summary(
    request: Request,
    period: str = Query(default="month"),
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> RevenueSummaryResponse:
    summary = summarize_vendor_revenue(
        x_actor_id,
        period,
        service.vendor_orders(x_actor_id),
        request.app.state.promotion_pool.paid_records(vendor_id=x_actor_id),
    )
    return RevenueSummaryResponse.from_summary(summary)


@revenue_router.get("/platform/summary", response_model=PlatformRevenueSummaryResponse)
async def platform_revenue_summary(
    request: Request,
    period: str = Query(default="month"),
    service: OrderService = Depends(get_order_service),
) -> PlatformRevenueSummaryResponse:
    summary = summarize_platform_revenue(
        period,
        service.all_orders(),
        request.app.state.promotion_pool.paid_records(),
    )
    return PlatformRevenueSummaryResponse.from_summary(summary)


@revenue_router.get("/orders/{order_id}/breakdown", response_model=RevenueBreakdownResponse)
async def order_revenue_breakdown(
    order_id: str,
    x_actor_id: str = Header(),
    service: OrderService = Depends(get_order_service),
) -> RevenueBreakdownResponse:
    order = service.get_order(order_id, acting_user_id=x_actor_id)
    if order.revenue is None:
        raise ObjectNotFoundError({"revenue": [f"Order {order_id} has no revenue breakdown"]})
    return RevenueBreakdownResponse.from_breakdown(str(order.id), order.revenue, revenue_transparency(order.revenue))
