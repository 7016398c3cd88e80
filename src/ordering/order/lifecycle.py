"""Order lifecycle — guarded status, payment and note mutations.

Each operation validates the actor and the requested value before touching
the order, so a rejected request leaves the order exactly as it was.
Persistence is the order service's job; notifications follow from the
events raised here once the order is saved.
"""

from datetime import UTC, datetime

import structlog
from protean import atomic_change
from shared.errors import ForbiddenError

from ordering.order.events import PaymentStatusChanged
from ordering.order.order import Order, OrderStatus, PaymentStatus, parse_status

logger = structlog.get_logger(__name__)


def apply_transition(order: Order, requested_status, acting_vendor_id, vendor_notes=None, now=None) -> Order:
    """Move ``order`` to ``requested_status`` on behalf of its vendor.

    Raises:
        ForbiddenError: ``acting_vendor_id`` does not own the order.
        ValidationError: ``requested_status`` is not a known status.
        InvalidTransitionError: the table does not allow the move.
    """
    if not order.is_vendor(acting_vendor_id):
        raise ForbiddenError({"vendor_id": ["Only the order's vendor may update its status"]})

    target = parse_status(requested_status, OrderStatus)
    previous = order.transition_to(target, changed_by=acting_vendor_id, now=now)
    if vendor_notes is not None:
        order.annotate(vendor_notes, now=now)

    logger.info(
        "Order status transitioned",
        order_id=str(order.id),
        previous_status=previous.value,
        new_status=target.value,
    )
    return order


def cancel_order(order: Order, acting_user_id, reason=None, now=None) -> Order:
    """Cancel an order on behalf of its buyer or vendor."""
    if not (order.is_buyer(acting_user_id) or order.is_vendor(acting_user_id)):
        raise ForbiddenError({"user_id": ["Only the order's buyer or vendor may cancel it"]})

    order.transition_to(OrderStatus.CANCELLED, changed_by=acting_user_id, now=now)
    order.cancellation_reason = reason

    logger.info("Order cancelled", order_id=str(order.id), cancelled_by=str(acting_user_id), reason=reason)
    return order


def update_vendor_notes(order: Order, vendor_notes, acting_vendor_id, now=None) -> Order:
    """Replace the vendor's notes without touching the status."""
    if not order.is_vendor(acting_vendor_id):
        raise ForbiddenError({"vendor_id": ["Only the order's vendor may write vendor notes"]})
    order.annotate(vendor_notes, now=now)
    return order


def set_payment_status(order: Order, new_status, acting_user_id, now=None) -> Order:
    """Record a payment status reported by the buyer or the vendor.

    Any of the enumerated payment values may follow any other; the only
    guards are who is asking and whether the value is known.
    """
    if not (order.is_buyer(acting_user_id) or order.is_vendor(acting_user_id)):
        raise ForbiddenError({"user_id": ["Only the order's buyer or vendor may update payment status"]})

    target = parse_status(new_status, PaymentStatus, field="payment_status")

    now = now or datetime.now(UTC)
    previous = PaymentStatus(order.payment_status)
    with atomic_change(order):
        order.payment_status = target.value
        order.updated_at = now
        if target is PaymentStatus.PAID:
            order.paid_at = now

    order.raise_(
        PaymentStatusChanged(
            order_id=str(order.id),
            vendor_id=str(order.vendor_id),
            previous_status=previous.value,
            new_status=target.value,
            changed_by=str(acting_user_id),
            changed_at=now,
        )
    )
    logger.info(
        "Payment status updated",
        order_id=str(order.id),
        previous_status=previous.value,
        new_status=target.value,
    )
    return order
