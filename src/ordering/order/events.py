"""Domain events for the Order aggregate.

Events are raised on the order while it is mutated. The repository hands
them to the registered event handlers when the order is saved; with
synchronous event processing that happens before ``add`` returns.
"""

from protean.fields import DateTime, Float, Identifier, String
from shared.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A per-vendor order was created from a checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    patron_id = Identifier()
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The overall lifecycle status moved along the state machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class PaymentStatusChanged:
    """Buyer or vendor recorded a new payment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)
