"""Tests for vendor and platform revenue summaries."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from revenue.commission import RevenueBreakdown, RevenueStatus
from revenue.summary import summarize_platform_revenue, summarize_vendor_revenue
from shared.errors import ValidationError
from structlog.testing import capture_logs

NOW = datetime(2026, 3, 20, 15, 0, tzinfo=UTC)
IN_MONTH = datetime(2026, 3, 5, 10, 0, tzinfo=UTC)
LAST_MONTH = datetime(2026, 2, 27, 10, 0, tzinfo=UTC)


def _order(vendor_id, gross, created_at=IN_MONTH, status=RevenueStatus.COMPLETED, rate="0.10"):
    gross = Decimal(gross)
    commission = (gross * Decimal(rate)).quantize(Decimal("0.01"))
    revenue = RevenueBreakdown(
        gross_amount=float(gross),
        platform_commission=float(commission),
        artisan_earnings=float(gross - commission),
        commission_rate=float(rate),
        status=status.value,
    )
    return SimpleNamespace(vendor_id=vendor_id, created_at=created_at, revenue=revenue)


def _promotion(vendor_id, price, payment_date=IN_MONTH, payment_status="paid"):
    return SimpleNamespace(vendor_id=vendor_id, price=price, payment_date=payment_date, payment_status=payment_status)


class TestVendorSummary:
    def test_totals_for_completed_orders_in_window(self):
        orders = [
            _order("vendor-a", "100.00"),
            _order("vendor-a", "50.00"),
            _order("vendor-a", "999.00", created_at=LAST_MONTH),
            _order("vendor-a", "999.00", status=RevenueStatus.PENDING),
            _order("vendor-b", "999.00"),
        ]

        summary = summarize_vendor_revenue("vendor-a", "month", orders, [], now=NOW)

        assert summary.order_count == 2
        assert summary.total_gross_amount == Decimal("150.00")
        assert summary.total_commission == Decimal("15.00")
        assert summary.total_earnings == Decimal("135.00")
        assert summary.average_order_value == Decimal("75.00")
        assert summary.start_date == datetime(2026, 3, 1, tzinfo=UTC)
        assert summary.end_date == NOW
        assert summary.skipped_records == 0

    def test_average_is_rounded_to_cents(self):
        orders = [_order("vendor-a", "10.00"), _order("vendor-a", "10.00"), _order("vendor-a", "0.01")]
        summary = summarize_vendor_revenue("vendor-a", "month", orders, [], now=NOW)
        assert summary.average_order_value == Decimal("6.67")

    def test_no_orders_gives_zero_average(self):
        summary = summarize_vendor_revenue("vendor-a", "week", [], [], now=NOW)
        assert summary.order_count == 0
        assert summary.average_order_value == Decimal("0")

    def test_promotional_spend_reduces_net_earnings(self):
        orders = [_order("vendor-a", "100.00")]
        promotions = [
            _promotion("vendor-a", Decimal("25.00")),
            _promotion("vendor-a", Decimal("5.00"), payment_status="pending"),
            _promotion("vendor-a", Decimal("5.00"), payment_date=LAST_MONTH),
            _promotion("vendor-b", Decimal("5.00")),
        ]

        summary = summarize_vendor_revenue("vendor-a", "month", orders, promotions, now=NOW)

        assert summary.promotional_spend == Decimal("25.00")
        assert summary.promotional_feature_count == 1
        assert summary.net_earnings == Decimal("65.00")

    def test_net_earnings_may_be_negative(self):
        summary = summarize_vendor_revenue(
            "vendor-a", "month", [_order("vendor-a", "10.00")], [_promotion("vendor-a", Decimal("50.00"))], now=NOW
        )
        assert summary.net_earnings == Decimal("-41.00")

    def test_malformed_records_are_skipped_and_counted(self):
        broken_revenue = SimpleNamespace(vendor_id="vendor-a", created_at=IN_MONTH, revenue=None)
        bad_promotion = _promotion("vendor-a", "not-a-price")

        with capture_logs() as logs:
            summary = summarize_vendor_revenue(
                "vendor-a",
                "month",
                [_order("vendor-a", "20.00"), broken_revenue],
                [bad_promotion],
                now=NOW,
            )

        assert summary.order_count == 1
        assert summary.skipped_records == 2
        warnings = [log for log in logs if log["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["skipped_records"] == 2

    def test_window_excludes_now(self):
        summary = summarize_vendor_revenue("vendor-a", "month", [_order("vendor-a", "10.00", created_at=NOW)], [], now=NOW)
        assert summary.order_count == 0

    def test_week_is_rolling_seven_days(self):
        orders = [
            _order("vendor-a", "10.00", created_at=NOW - timedelta(days=6, hours=23)),
            _order("vendor-a", "10.00", created_at=NOW - timedelta(days=7, minutes=1)),
        ]
        summary = summarize_vendor_revenue("vendor-a", "week", orders, [], now=NOW)
        assert summary.order_count == 1

    def test_unknown_period(self):
        with pytest.raises(ValidationError):
            summarize_vendor_revenue("vendor-a", "fortnight", [], [], now=NOW)


class TestPlatformSummary:
    def test_aggregates_all_vendors(self):
        orders = [_order("vendor-a", "100.00"), _order("vendor-b", "40.00")]
        promotions = [_promotion("vendor-a", Decimal("20.00")), _promotion("vendor-b", Decimal("10.00"))]

        summary = summarize_platform_revenue("month", orders, promotions, now=NOW)

        assert summary.order_count == 2
        assert summary.total_gross_amount == Decimal("140.00")
        assert summary.total_commission == Decimal("14.00")
        assert summary.promotional_spend == Decimal("30.00")
        assert summary.total_platform_revenue == Decimal("44.00")

    def test_quarter_window(self):
        orders = [
            _order("vendor-a", "10.00", created_at=datetime(2026, 1, 2, tzinfo=UTC)),
            _order("vendor-a", "10.00", created_at=datetime(2025, 12, 31, tzinfo=UTC)),
        ]
        summary = summarize_platform_revenue("quarter", orders, [], now=NOW)
        assert summary.order_count == 1
        assert summary.start_date == datetime(2026, 1, 1, tzinfo=UTC)


class TestTimezoneLessRecords:
    def test_naive_order_timestamp_is_skipped_and_counted(self):
        orders = [
            _order("vendor-a", "40.00"),
            _order("vendor-a", "60.00", created_at=IN_MONTH.replace(tzinfo=None)),
        ]

        with capture_logs() as logs:
            summary = summarize_vendor_revenue("vendor-a", "month", orders, [], now=NOW)

        assert summary.order_count == 1
        assert summary.total_gross_amount == Decimal("40.00")
        assert summary.skipped_records == 1
        assert any(log["event"] == "Skipped malformed records while summarizing revenue" for log in logs)

    def test_naive_payment_date_is_skipped_and_counted(self):
        promotions = [
            _promotion("vendor-a", Decimal("10.00")),
            _promotion("vendor-b", Decimal("15.00"), payment_date=IN_MONTH.replace(tzinfo=None)),
        ]

        summary = summarize_platform_revenue("month", [], promotions, now=NOW)

        assert summary.promotional_spend == Decimal("10.00")
        assert summary.promotional_feature_count == 1
        assert summary.skipped_records == 1

    def test_naive_now_is_read_as_utc(self):
        summary = summarize_vendor_revenue(
            "vendor-a", "month", [_order("vendor-a", "10.00")], [], now=NOW.replace(tzinfo=None)
        )
        assert summary.order_count == 1
        assert summary.end_date == NOW
