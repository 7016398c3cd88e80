"""Revenue recognition — keeps an order's revenue status in step with its lifecycle.

Revenue is pending while an order is open and only counts towards summaries
once the order is delivered.
"""

import structlog
from ordering.order.order import Order, OrderStatus, PaymentStatus

from revenue.commission import RevenueStatus, compute_order_revenue

logger = structlog.get_logger(__name__)


def expected_revenue_status(order: Order) -> RevenueStatus:
    payment_status = PaymentStatus(order.payment_status)
    status = OrderStatus(order.status)
    if payment_status is PaymentStatus.REFUNDED:
        return RevenueStatus.REFUNDED
    if status is OrderStatus.CANCELLED:
        if payment_status is PaymentStatus.PAID:
            return RevenueStatus.REFUNDED
        return RevenueStatus.FAILED
    if status is OrderStatus.DELIVERED:
        return RevenueStatus.COMPLETED
    return RevenueStatus.PENDING


def sync_revenue_status(order: Order) -> bool:
    """Update ``order.revenue.status``; returns True when it changed."""
    if order.revenue is None:
        return False

    target = expected_revenue_status(order)
    if order.revenue.status == target.value:
        return False

    logger.info(
        "Revenue status changed",
        order_id=str(order.id),
        previous_status=order.revenue.status,
        new_status=target.value,
    )
    order.revenue = order.revenue.with_status(target)
    return True


def recompute_revenue(order: Order, commission_rate=None) -> Order:
    """Overwrite the order's breakdown after an amount or rate correction."""
    breakdown = compute_order_revenue(order, commission_rate)
    order.revenue = breakdown.with_status(expected_revenue_status(order))
    return order
