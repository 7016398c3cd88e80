"""Order splitting — turns a multi-vendor cart into one draft order per vendor.

Drafts come out in the order each vendor first appears in the cart, and line
items keep their cart order within a vendor, so the same cart always splits
the same way.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from catalogue.product.product import Product, ProductType
from shared.errors import NoVendorError, ObjectNotFoundError, ValidationError
from shared.money import ZERO


@dataclass(frozen=True)
class CartItem:
    product_id: str
    quantity: int = 1


@dataclass
class DraftOrder:
    """Unpersisted order lines for a single vendor."""

    vendor_id: str
    items: list[dict] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((item["line_total"] for item in self.items), ZERO)


def _coerce_cart_item(raw, index) -> CartItem:
    if isinstance(raw, CartItem):
        item = raw
    elif isinstance(raw, dict):
        item = CartItem(product_id=raw.get("product_id"), quantity=raw.get("quantity", 1))
    else:
        raise ValidationError({"items": [f"Cart item {index} is not a product reference"]})

    if not item.product_id:
        raise ValidationError({"items": [f"Cart item {index} has no product_id"]})
    if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity < 1:
        raise ValidationError({"quantity": [f"Quantity for product {item.product_id} must be at least 1"]})
    return item


def build_line(product: Product, quantity: int, ordered_at: datetime) -> dict:
    """Snapshot the product's price and scheduling data onto a line item."""
    unit_price = product.price
    line = {
        "product_id": product.id,
        "product_name": product.name,
        "quantity": quantity,
        "unit_price": unit_price,
        "line_total": unit_price * quantity,
        "product_type": product.product_type,
    }
    if product.product_type is ProductType.MADE_TO_ORDER:
        line["estimated_completion_date"] = product.estimated_completion(ordered_at)
    elif product.product_type is ProductType.SCHEDULED_ORDER:
        line["scheduled_pickup_date"] = product.next_available_date
        line["scheduled_pickup_time"] = product.pickup_time
    return line


def _check_orderable(product: Product, requested: int) -> None:
    """Inactive products and ready-to-ship products short on stock cannot be ordered."""
    if not product.is_active:
        raise ObjectNotFoundError({"product_id": [f"Product {product.id} not found or inactive"]})
    if not product.vendor_id:
        raise NoVendorError({"product_id": [f"Product {product.id} has no vendor"]})
    if (
        product.product_type is ProductType.READY_TO_SHIP
        and product.stock_level is not None
        and product.stock_level < requested
    ):
        raise ValidationError(
            {
                "quantity": [
                    f"Insufficient quantity for product {product.id}: "
                    f"{product.stock_level} available, {requested} requested"
                ]
            }
        )


def split_cart(cart_items, lookup_product, now=None) -> list[DraftOrder]:
    """Group cart lines by owning vendor.

    Stock is checked against the total quantity of a product across the
    whole cart, so a product listed on two lines cannot oversell.

    Args:
        cart_items: Sequence of CartItem or ``{"product_id", "quantity"}`` dicts.
        lookup_product: Callable returning a Product for an id; raises
            ObjectNotFoundError for unknown ids.
        now: Order time used for made-to-order completion estimates.

    Raises:
        ValidationError: empty cart, malformed line or insufficient stock.
        ObjectNotFoundError: a product id cannot be resolved or is inactive.
        NoVendorError: a resolved product has no vendor.
    """
    if not cart_items:
        raise ValidationError({"items": ["Order items are required"]})

    now = now or datetime.now(UTC)
    lines = [_coerce_cart_item(raw, index) for index, raw in enumerate(cart_items)]
    requested = Counter()
    for line in lines:
        requested[line.product_id] += line.quantity

    drafts: dict[str, DraftOrder] = {}
    for cart_item in lines:
        product = lookup_product(cart_item.product_id)
        _check_orderable(product, requested[cart_item.product_id])

        draft = drafts.get(product.vendor_id)
        if draft is None:
            draft = drafts[product.vendor_id] = DraftOrder(vendor_id=product.vendor_id)
        draft.items.append(build_line(product, cart_item.quantity, now))

    return list(drafts.values())
