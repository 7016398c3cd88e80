"""Money helpers — all amounts are ``Decimal`` rounded to cents."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert an int, float, str or Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidOperation(f"Not a monetary amount: {value!r}")
    return Decimal(str(value))


def round2(value) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(rate) -> str:
    """Render a 0..1 rate as a one-decimal percentage string, e.g. ``"10.0%"``."""
    return f"{to_decimal(rate) * 100:.1f}%"


def format_amount(value) -> str:
    return f"${round2(value)}"
