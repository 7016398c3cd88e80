"""Order notification dispatch — forwards saved order events to the notification sink.

Delivery is fire-and-forget: a failing sink is logged and never undoes the
change that raised the event.
"""

import structlog
from protean import handle
from shared.domain import marketplace

from ordering.notification import get_notification_sink
from ordering.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Order)
class OrderNotificationDispatcher:
    """Notifies the sink after orders are placed or change status."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        self._deliver(
            "order_placed",
            event,
            lambda sink: sink.order_placed(
                str(event.order_id),
                str(event.vendor_id),
                str(event.patron_id) if event.patron_id else None,
                event.total_amount,
            ),
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        self._deliver(
            "order_status_changed",
            event,
            lambda sink: sink.order_status_changed(
                str(event.order_id), str(event.vendor_id), event.previous_status, event.new_status
            ),
        )

    @handle(PaymentStatusChanged)
    def on_payment_status_changed(self, event: PaymentStatusChanged) -> None:
        self._deliver(
            "payment_status_changed",
            event,
            lambda sink: sink.payment_status_changed(
                str(event.order_id), str(event.vendor_id), event.previous_status, event.new_status
            ),
        )

    def _deliver(self, kind: str, event, send) -> None:
        try:
            send(get_notification_sink())
        except Exception as e:
            logger.warning(
                "Order status notification failed",
                notification=kind,
                order_id=str(event.order_id),
                error=str(e),
            )
