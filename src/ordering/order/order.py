"""Order aggregate (CQRS) — one vendor's share of a checkout.

State Machine (7 states):
    PENDING → CONFIRMED → PREPARING → READY → DELIVERING → DELIVERED
    CANCELLED (from every non-terminal state)

DELIVERED and CANCELLED are terminal. When every line item shares one
product type, the matching shadow status field mirrors the overall status.
Mixed-type orders leave the shadow fields untouched.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from catalogue.product.product import ProductType
from protean import atomic_change, invariant
from protean.fields import (
    Date,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)
from revenue.commission import RevenueBreakdown
from shared.domain import marketplace
from shared.errors import InvalidTransitionError, ValidationError
from shared.money import ZERO, round2, to_decimal

from ordering.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERING = "delivering"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class DeliveryMethod(Enum):
    PICKUP = "pickup"
    PERSONAL_DELIVERY = "personal_delivery"
    PROFESSIONAL_DELIVERY = "professional_delivery"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERING, OrderStatus.CANCELLED},
    OrderStatus.DELIVERING: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)

# Milestone timestamp stamped when the order enters a status
_MILESTONES = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.DELIVERED: "actual_delivery_time",
    OrderStatus.CANCELLED: "cancelled_at",
}

_SHADOW_FIELDS = {
    ProductType.READY_TO_SHIP: "ready_to_ship_status",
    ProductType.MADE_TO_ORDER: "made_to_order_status",
    ProductType.SCHEDULED_ORDER: "scheduled_order_status",
}


def allowed_targets(status: OrderStatus) -> frozenset[OrderStatus]:
    return frozenset(_VALID_TRANSITIONS[status])


def parse_status(value, enum_cls=OrderStatus, field="status"):
    """Coerce a raw status string into ``enum_cls`` or raise ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(s.value for s in enum_cls)
        raise ValidationError({field: [f"Invalid {field} '{value}'. Must be one of: {valid}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class GuestInfo:
    """Contact details of a buyer checking out without an account."""

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """A line item with the unit price captured at checkout.

    The price is a snapshot: later catalogue price changes never touch it.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255, default="")
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)
    product_type = String(choices=ProductType, required=True)

    # made_to_order
    estimated_completion_date = Date()
    # scheduled_order
    scheduled_pickup_date = Date()
    scheduled_pickup_time = String(max_length=50)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    # Parties
    patron_id = Identifier()
    guest_info = ValueObject(GuestInfo)
    vendor_id = Identifier(required=True)

    # Lines
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)

    # Status
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    ready_to_ship_status = String(choices=OrderStatus)
    made_to_order_status = String(choices=OrderStatus)
    scheduled_order_status = String(choices=OrderStatus)

    # Payment
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(max_length=50)
    paid_at = DateTime()

    revenue = ValueObject(RevenueBreakdown)

    # Milestones
    confirmed_at = DateTime()
    ready_at = DateTime()
    actual_delivery_time = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = Text()

    buyer_notes = Text()
    vendor_notes = Text()

    delivery_method = String(choices=DeliveryMethod, default=DeliveryMethod.PICKUP.value)
    delivery_address = Text()  # JSON object

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def must_have_exactly_one_buyer(self):
        validate_buyer(self.patron_id, self.guest_info)

    @invariant.post
    def must_have_at_least_one_item(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    @invariant.post
    def line_totals_match_unit_prices(self):
        for index, item in enumerate(self.items):
            if to_decimal(item.line_total) != round2(to_decimal(item.unit_price) * item.quantity):
                raise ValidationError({"items": [f"Line {index} total does not match unit price × quantity"]})

    @invariant.post
    def total_is_sum_of_line_totals(self):
        expected = self.line_total_sum()
        if to_decimal(self.total_amount) != expected:
            raise ValidationError(
                {"total_amount": [f"Total amount {self.total_amount} does not equal sum of line totals {expected}"]}
            )

    @invariant.post
    def revenue_splits_the_total(self):
        if self.revenue is None:
            return
        if to_decimal(self.revenue.gross_amount) != to_decimal(self.total_amount):
            raise ValidationError({"revenue": ["Gross amount must equal total amount"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        vendor_id,
        items,
        patron_id=None,
        guest_info=None,
        payment_method=None,
        delivery_method=DeliveryMethod.PICKUP,
        delivery_address=None,
        buyer_notes=None,
        now=None,
    ):
        """Create a pending order for one vendor.

        ``items`` are line dicts as built by checkout. Exactly one of
        ``patron_id`` and ``guest_info`` must be given. The total is computed
        from the line items, never taken from the caller.
        """
        validate_buyer(patron_id, guest_info)
        if not items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = now or datetime.now(UTC)
        if isinstance(guest_info, dict):
            guest_info = GuestInfo(**guest_info)

        lines = [OrderItem(**_line_fields(item)) for item in items]
        total = sum((to_decimal(line.line_total) for line in lines), ZERO)

        order = cls(
            patron_id=patron_id,
            guest_info=guest_info,
            vendor_id=vendor_id,
            items=lines,
            total_amount=float(total),
            payment_method=payment_method,
            delivery_method=DeliveryMethod(delivery_method).value,
            delivery_address=json.dumps(delivery_address or {}),
            buyer_notes=buyer_notes,
            created_at=now,
            updated_at=now,
        )
        order.sync_shadow_status()

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                vendor_id=str(order.vendor_id),
                patron_id=str(patron_id) if patron_id else None,
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES

    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def _assert_can_transition(self, target_status: OrderStatus):
        """Validate that the current state allows transition to target."""
        if not self.can_transition_to(target_status):
            raise InvalidTransitionError(self.status, target_status.value)

    def product_types(self) -> set[ProductType]:
        return {ProductType(item.product_type) for item in self.items}

    def sync_shadow_status(self):
        """Mirror the overall status onto the shadow field of a single-type order."""
        types = self.product_types()
        if len(types) != 1:
            return
        setattr(self, _SHADOW_FIELDS[types.pop()], self.status)

    def transition_to(self, target_status: OrderStatus, changed_by, now=None) -> OrderStatus:
        """Move to ``target_status``, stamping milestones and re-deriving shadow status."""
        self._assert_can_transition(target_status)

        now = now or datetime.now(UTC)
        previous = OrderStatus(self.status)
        with atomic_change(self):
            self.status = target_status.value
            self.updated_at = now
            if target_status in _MILESTONES:
                setattr(self, _MILESTONES[target_status], now)
            self.sync_shadow_status()

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                vendor_id=str(self.vendor_id),
                previous_status=previous.value,
                new_status=target_status.value,
                changed_by=str(changed_by),
                changed_at=now,
            )
        )
        return previous

    # -------------------------------------------------------------------
    # Notes and amounts
    # -------------------------------------------------------------------
    def annotate(self, vendor_notes, now=None):
        """Replace the vendor's free-text notes on the order."""
        self.vendor_notes = vendor_notes
        self.updated_at = now or datetime.now(UTC)

    def line_total_sum(self) -> Decimal:
        return sum((to_decimal(item.line_total) for item in self.items), ZERO)

    @property
    def address(self) -> dict:
        return json.loads(self.delivery_address) if self.delivery_address else {}

    # -------------------------------------------------------------------
    # Parties
    # -------------------------------------------------------------------
    def is_buyer(self, user_id) -> bool:
        return self.patron_id is not None and str(user_id) == str(self.patron_id)

    def is_vendor(self, user_id) -> bool:
        return str(user_id) == str(self.vendor_id)


def _line_fields(item) -> dict:
    fields = dict(item)
    product_type = fields.get("product_type")
    if isinstance(product_type, ProductType):
        fields["product_type"] = product_type.value
    for money_field in ("unit_price", "line_total"):
        if isinstance(fields.get(money_field), Decimal):
            fields[money_field] = float(fields[money_field])
    return fields


def validate_buyer(patron_id, guest_info):
    """Exactly one of a registered patron or guest details identifies the buyer."""
    if patron_id and guest_info:
        raise ValidationError({"buyer": ["Cannot have both patron_id and guest_info"]})
    if not patron_id and not guest_info:
        raise ValidationError({"buyer": ["Either patron_id or guest_info must be provided"]})
