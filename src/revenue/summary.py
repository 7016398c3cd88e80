"""Revenue summaries — period totals for one vendor or the whole platform.

Aggregation is tolerant of bad data: an order or promotion without a usable
amount or with a timezone-less timestamp is skipped and counted rather than
failing the whole summary.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

import structlog
from shared.money import ZERO, round2, to_decimal
from shared.periods import PeriodWindow, is_aware, period_window

from revenue.commission import RevenueStatus

logger = structlog.get_logger(__name__)

_PAID = "paid"


@dataclass(frozen=True)
class RevenueSummary:
    period: str
    start_date: datetime
    end_date: datetime
    total_gross_amount: Decimal = ZERO
    total_commission: Decimal = ZERO
    total_earnings: Decimal = ZERO
    order_count: int = 0
    average_order_value: Decimal = ZERO
    promotional_spend: Decimal = ZERO
    promotional_feature_count: int = 0
    net_earnings: Decimal = ZERO
    skipped_records: int = 0


@dataclass(frozen=True)
class PlatformRevenueSummary(RevenueSummary):
    total_platform_revenue: Decimal = ZERO


def _enum_value(value):
    return getattr(value, "value", value)


def _usable_amount(value) -> Decimal | None:
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    return amount if amount.is_finite() else None


class _Totals:
    def __init__(self):
        self.gross = ZERO
        self.commission = ZERO
        self.earnings = ZERO
        self.order_count = 0
        self.promotional_spend = ZERO
        self.promotional_count = 0
        self.skipped = 0


def _same_vendor(record, vendor_id) -> bool:
    return vendor_id is None or str(getattr(record, "vendor_id", None)) == str(vendor_id)


def _naive(moment) -> bool:
    return isinstance(moment, datetime) and not is_aware(moment)


def _add_orders(totals: _Totals, orders, window: PeriodWindow, vendor_id=None) -> None:
    for order in orders:
        if not _same_vendor(order, vendor_id):
            continue
        created_at = getattr(order, "created_at", None)
        if _naive(created_at):
            totals.skipped += 1
            continue
        if not window.contains(created_at):
            continue

        revenue = getattr(order, "revenue", None)
        if revenue is None:
            totals.skipped += 1
            continue
        if _enum_value(getattr(revenue, "status", None)) != RevenueStatus.COMPLETED.value:
            continue

        gross = _usable_amount(getattr(revenue, "gross_amount", None))
        commission = _usable_amount(getattr(revenue, "platform_commission", None))
        earnings = _usable_amount(getattr(revenue, "artisan_earnings", None))
        if gross is None or commission is None or earnings is None or gross <= ZERO:
            totals.skipped += 1
            continue

        totals.gross += gross
        totals.commission += commission
        totals.earnings += earnings
        totals.order_count += 1


def _add_promotions(totals: _Totals, promotions, window: PeriodWindow, vendor_id=None) -> None:
    for promotion in promotions:
        if not _same_vendor(promotion, vendor_id):
            continue
        if _enum_value(getattr(promotion, "payment_status", None)) != _PAID:
            continue
        payment_date = getattr(promotion, "payment_date", None)
        if _naive(payment_date):
            totals.skipped += 1
            continue
        if not window.contains(payment_date):
            continue

        price = _usable_amount(getattr(promotion, "price", None))
        if price is None or price < ZERO:
            totals.skipped += 1
            continue

        totals.promotional_spend += price
        totals.promotional_count += 1


def _summary_fields(totals: _Totals, window: PeriodWindow) -> dict:
    average = round2(totals.gross / totals.order_count) if totals.order_count else ZERO
    return {
        "period": window.period.value,
        "start_date": window.start,
        "end_date": window.end,
        "total_gross_amount": totals.gross,
        "total_commission": totals.commission,
        "total_earnings": totals.earnings,
        "order_count": totals.order_count,
        "average_order_value": average,
        "promotional_spend": totals.promotional_spend,
        "promotional_feature_count": totals.promotional_count,
        "net_earnings": totals.earnings - totals.promotional_spend,
        "skipped_records": totals.skipped,
    }


def _warn_skipped(totals: _Totals, scope: str, window: PeriodWindow) -> None:
    if totals.skipped:
        logger.warning(
            "Skipped malformed records while summarizing revenue",
            scope=scope,
            period=window.period.value,
            skipped_records=totals.skipped,
        )


def summarize_vendor_revenue(vendor_id, period, completed_orders, paid_promotions, now=None) -> RevenueSummary:
    """Summarize one vendor's recognized revenue and promotional spend.

    ``net_earnings`` is earnings minus promotional spend and may be negative.
    """
    window = period_window(period, now)
    totals = _Totals()
    _add_orders(totals, completed_orders, window, vendor_id=vendor_id)
    _add_promotions(totals, paid_promotions, window, vendor_id=vendor_id)
    _warn_skipped(totals, f"vendor:{vendor_id}", window)
    return RevenueSummary(**_summary_fields(totals, window))


def summarize_platform_revenue(period, all_completed_orders, all_paid_promotions, now=None) -> PlatformRevenueSummary:
    """Platform-wide variant of :func:`summarize_vendor_revenue` for admin reporting."""
    window = period_window(period, now)
    totals = _Totals()
    _add_orders(totals, all_completed_orders, window)
    _add_promotions(totals, all_paid_promotions, window)
    _warn_skipped(totals, "platform", window)
    return PlatformRevenueSummary(
        **_summary_fields(totals, window),
        total_platform_revenue=totals.commission + totals.promotional_spend,
    )
