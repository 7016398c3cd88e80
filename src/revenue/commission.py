"""Commission calculator — splits an order's gross amount between platform and vendor.

The platform commission is rounded to cents and the vendor earnings are the
remainder, so the two always add back up to the gross amount exactly. The
arithmetic is done in Decimal; the stored breakdown holds cent-exact floats.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum

import structlog
from protean import invariant
from protean.fields import Float, String
from shared.config import get_settings
from shared.domain import marketplace
from shared.errors import InvalidAmountError, ValidationError
from shared.money import ZERO, format_amount, percentage, round2, to_decimal

logger = structlog.get_logger(__name__)


class RevenueStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


@marketplace.value_object(part_of="Order")
class RevenueBreakdown:
    """Gross/commission/earnings split stored on an order."""

    gross_amount = Float(required=True, min_value=0.0)
    platform_commission = Float(required=True, min_value=0.0)
    artisan_earnings = Float(required=True, min_value=0.0)
    commission_rate = Float(required=True, min_value=0.0, max_value=1.0)
    status = String(choices=RevenueStatus, default=RevenueStatus.PENDING.value)

    @invariant.post
    def parts_add_up_to_gross(self):
        if self.gross_amount is None or self.platform_commission is None or self.artisan_earnings is None:
            return
        if to_decimal(self.platform_commission) + to_decimal(self.artisan_earnings) != to_decimal(self.gross_amount):
            raise ValidationError({"revenue": ["Commission and earnings must sum to gross amount"]})

    @property
    def commission_percentage(self) -> str:
        return percentage(self.commission_rate)

    @property
    def earnings_percentage(self) -> str:
        return percentage(Decimal("1") - to_decimal(self.commission_rate))

    def with_status(self, status: RevenueStatus) -> "RevenueBreakdown":
        return RevenueBreakdown(**{**self.to_dict(), "status": status.value})


def _validated_rate(commission_rate) -> Decimal:
    try:
        rate = to_decimal(commission_rate)
    except (InvalidOperation, ValueError):
        raise ValidationError({"commission_rate": [f"Invalid commission rate: {commission_rate!r}"]}) from None
    if not ZERO <= rate <= Decimal("1"):
        raise ValidationError({"commission_rate": [f"Commission rate must be between 0 and 1, got {rate}"]})
    return rate


def compute_order_revenue(order, commission_rate=None) -> RevenueBreakdown:
    """Compute the revenue breakdown for ``order``.

    Args:
        order: Anything with ``id`` and ``total_amount`` attributes.
        commission_rate: Fraction in [0, 1]; defaults to the configured rate.

    Raises:
        InvalidAmountError: total amount missing, unparseable or not positive.
        ValidationError: commission rate outside [0, 1].
    """
    rate = _validated_rate(get_settings().commission_rate if commission_rate is None else commission_rate)

    raw_amount = getattr(order, "total_amount", None)
    try:
        gross = to_decimal(raw_amount)
    except (InvalidOperation, ValueError):
        gross = None

    if gross is None or not gross.is_finite() or gross <= ZERO:
        logger.error(
            "Rejected order with invalid amount",
            order_id=str(getattr(order, "id", None)),
            total_amount=str(raw_amount),
        )
        raise InvalidAmountError({"total_amount": [f"Order amount must be positive, got {raw_amount}"]})

    commission = round2(gross * rate)
    return RevenueBreakdown(
        gross_amount=float(gross),
        platform_commission=float(commission),
        artisan_earnings=float(gross - commission),
        commission_rate=float(rate),
    )


def revenue_transparency(breakdown: RevenueBreakdown) -> dict:
    """Human-readable explanation of how a breakdown was derived."""
    return {
        "platform_commission": f"{breakdown.commission_percentage} of sale goes to platform maintenance and development",
        "artisan_earnings": f"{breakdown.earnings_percentage} of sale goes directly to the artisan",
        "calculation": (
            f"{format_amount(breakdown.gross_amount)} × {breakdown.commission_percentage}"
            f" = {format_amount(breakdown.platform_commission)}"
        ),
    }
