"""Order service — checkout and lifecycle operations over the Order repository.

Every mutating call follows the same shape: load the order, validate and
mutate it, then add it back to the repository. The repository rejects a
stale copy with ExpectedVersionError, and saving hands the raised events to
the notification dispatcher.
"""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain
from revenue.commission import compute_order_revenue
from revenue.recognition import recompute_revenue, sync_revenue_status
from shared.errors import ForbiddenError

from ordering.order.lifecycle import apply_transition, cancel_order, set_payment_status, update_vendor_notes
from ordering.order.order import DeliveryMethod, Order, validate_buyer
from ordering.order.splitting import split_cart

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(self, product_lookup):
        self.product_lookup = product_lookup

    @property
    def repository(self):
        return current_domain.repository_for(Order)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def place_orders(
        self,
        cart_items,
        patron_id=None,
        guest_info=None,
        payment_method=None,
        delivery_method=DeliveryMethod.PICKUP,
        delivery_address=None,
        notes=None,
        commission_rate=None,
        now=None,
    ) -> list[Order]:
        """Split a cart into per-vendor orders, price them and persist them.

        All orders are built and their revenue computed before the first one
        is stored, so a bad line or amount never leaves a partial checkout.
        """
        validate_buyer(patron_id, guest_info)
        now = now or datetime.now(UTC)

        orders = []
        for draft in split_cart(cart_items, self.product_lookup, now=now):
            order = Order.create(
                vendor_id=draft.vendor_id,
                items=draft.items,
                patron_id=patron_id,
                guest_info=guest_info,
                payment_method=payment_method,
                delivery_method=delivery_method,
                delivery_address=delivery_address,
                buyer_notes=notes,
                now=now,
            )
            order.revenue = compute_order_revenue(order, commission_rate)
            orders.append(order)

        repo = self.repository
        for order in orders:
            repo.add(order)

        logger.info(
            "Checkout split into vendor orders",
            order_ids=[str(order.id) for order in orders],
            vendor_count=len(orders),
            patron_id=patron_id,
        )
        return orders

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id, acting_user_id=None) -> Order:
        order = self.repository.get(order_id)
        if acting_user_id is not None and not (order.is_buyer(acting_user_id) or order.is_vendor(acting_user_id)):
            raise ForbiddenError({"user_id": ["Only the order's buyer or vendor may view it"]})
        return order

    def vendor_orders(self, vendor_id) -> list[Order]:
        return self.repository.for_vendor(vendor_id)

    def all_orders(self) -> list[Order]:
        return self.repository.all_orders()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def _save(self, order: Order) -> Order:
        self.repository.add(order)
        return order

    def update_status(self, order_id, requested_status, acting_vendor_id, vendor_notes=None, now=None) -> Order:
        order = self.repository.get(order_id)
        apply_transition(order, requested_status, acting_vendor_id, vendor_notes=vendor_notes, now=now)
        sync_revenue_status(order)
        return self._save(order)

    def update_vendor_notes(self, order_id, vendor_notes, acting_vendor_id, now=None) -> Order:
        order = self.repository.get(order_id)
        update_vendor_notes(order, vendor_notes, acting_vendor_id, now=now)
        return self._save(order)

    def cancel(self, order_id, acting_user_id, reason=None, now=None) -> Order:
        order = self.repository.get(order_id)
        cancel_order(order, acting_user_id, reason=reason, now=now)
        sync_revenue_status(order)
        return self._save(order)

    def update_payment_status(self, order_id, payment_status, acting_user_id, now=None) -> Order:
        order = self.repository.get(order_id)
        set_payment_status(order, payment_status, acting_user_id, now=now)
        sync_revenue_status(order)
        return self._save(order)

    def recompute_revenue(self, order_id, commission_rate=None) -> Order:
        """Corrective recompute: replaces the stored breakdown, never adds to it."""
        order = self.repository.get(order_id)
        recompute_revenue(order, commission_rate)
        saved = self._save(order)
        logger.info(
            "Order revenue recomputed",
            order_id=str(saved.id),
            gross_amount=saved.revenue.gross_amount,
            commission_rate=saved.revenue.commission_rate,
        )
        return saved
