"""Pydantic response schemas for the Revenue API."""

from dataclasses import asdict
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from revenue.commission import RevenueBreakdown
from revenue.summary import PlatformRevenueSummary, RevenueSummary


def _floats(fields: dict) -> dict:
    return {key: float(value) if isinstance(value, Decimal) else value for key, value in fields.items()}


class RevenueSummaryResponse(BaseModel):
    period: str
    start_date: datetime
    end_date: datetime
    total_gross_amount: float
    total_commission: float
    total_earnings: float
    order_count: int
    average_order_value: float
    promotional_spend: float
    promotional_feature_count: int
    net_earnings: float
    skipped_records: int

    @classmethod
    def from_summary(cls, summary: RevenueSummary) -> "RevenueSummaryResponse":
        return cls(**_floats(asdict(summary)))


class PlatformRevenueSummaryResponse(RevenueSummaryResponse):
    total_platform_revenue: float

    @classmethod
    def from_summary(cls, summary: PlatformRevenueSummary) -> "PlatformRevenueSummaryResponse":
        return cls(**_floats(asdict(summary)))


class TransparencySchema(BaseModel):
    platform_commission: str
    artisan_earnings: str
    calculation: str


class RevenueBreakdownResponse(BaseModel):
    order_id: str
    gross_amount: float
    platform_commission: float
    artisan_earnings: float
    commission_rate: float
    commission_percentage: str
    earnings_percentage: str
    status: str
    transparency: TransparencySchema

    @classmethod
    def from_breakdown(cls, order_id: str, breakdown: RevenueBreakdown, transparency: dict) -> "RevenueBreakdownResponse":
        return cls(
            order_id=order_id,
            gross_amount=breakdown.gross_amount,
            platform_commission=breakdown.platform_commission,
            artisan_earnings=breakdown.artisan_earnings,
            commission_rate=breakdown.commission_rate,
            commission_percentage=breakdown.commission_percentage,
            earnings_percentage=breakdown.earnings_percentage,
            status=breakdown.status,
            transparency=TransparencySchema(**transparency),
        )
