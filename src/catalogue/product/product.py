"""Product read model consumed by checkout and promotional ranking.

Products are owned by the catalogue service; the engine only reads them.
The type-specific fields drive the scheduling data copied onto order lines.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

from shared.errors import ValidationError
from shared.money import ZERO, to_decimal


class ProductType(Enum):
    READY_TO_SHIP = "ready_to_ship"
    MADE_TO_ORDER = "made_to_order"
    SCHEDULED_ORDER = "scheduled_order"


class LeadTimeUnit(Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


_DAYS_PER_UNIT = {
    LeadTimeUnit.DAYS: 1,
    LeadTimeUnit.WEEKS: 7,
    LeadTimeUnit.MONTHS: 30,
}


@dataclass(frozen=True)
class Product:
    id: str
    vendor_id: str | None = None
    name: str = ""
    price: Decimal = ZERO
    product_type: ProductType = ProductType.READY_TO_SHIP
    category: str | None = None
    is_active: bool = True

    # ready_to_ship
    stock_level: int | None = None

    # made_to_order
    lead_time: int | None = None
    lead_time_unit: LeadTimeUnit = LeadTimeUnit.DAYS

    # scheduled_order
    next_available_date: date | None = None
    pickup_time: str | None = None

    def __post_init__(self):
        price = to_decimal(self.price)
        if price < ZERO:
            raise ValidationError({"price": [f"Product {self.id} price must not be negative"]})
        if self.lead_time is not None and self.lead_time < 0:
            raise ValidationError({"lead_time": [f"Product {self.id} lead time must not be negative"]})
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "product_type", ProductType(self.product_type))
        object.__setattr__(self, "lead_time_unit", LeadTimeUnit(self.lead_time_unit))

    def lead_time_days(self) -> int:
        if not self.lead_time:
            return 0
        return self.lead_time * _DAYS_PER_UNIT[self.lead_time_unit]

    def estimated_completion(self, ordered_at: datetime) -> date | None:
        """Completion date for a made-to-order product ordered at ``ordered_at``."""
        if self.product_type is not ProductType.MADE_TO_ORDER or self.lead_time is None:
            return None
        return (ordered_at + timedelta(days=self.lead_time_days())).date()
