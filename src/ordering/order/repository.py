"""Repository for the Order aggregate.

The base repository provides ``add`` and ``get``; ``add`` rejects a stale
copy with ExpectedVersionError when another save bumped the stored version.
"""

from shared.domain import marketplace

from ordering.order.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    def for_vendor(self, vendor_id) -> list[Order]:
        """All orders owned by ``vendor_id``, in the order they were stored."""
        return self._dao.query.filter(vendor_id=str(vendor_id)).all().items

    def all_orders(self) -> list[Order]:
        return self._dao.query.all().items
