"""Per-vendor order statistics for the artisan dashboard."""

from decimal import Decimal

from shared.money import ZERO, to_decimal

from ordering.order.order import Order, OrderStatus


def vendor_order_stats(orders: list[Order]) -> dict:
    """Count orders by status and total the value of delivered ones."""
    counts = {status.value: 0 for status in OrderStatus}
    delivered_revenue: Decimal = ZERO
    for order in orders:
        counts[order.status] += 1
        if order.status == OrderStatus.DELIVERED.value:
            delivered_revenue += to_decimal(order.total_amount)

    return {
        "total_orders": len(orders),
        "by_status": counts,
        "delivered_revenue": delivered_revenue,
    }
