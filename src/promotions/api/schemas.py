"""Pydantic response schemas for the promotional placement API."""

from datetime import datetime

from pydantic import BaseModel

from promotions.ranking import RankedProduct


class PromotedProductResponse(BaseModel):
    product_id: str
    name: str
    price: float
    category: str | None = None
    vendor_id: str
    promotion_id: str
    feature_type: str
    priority: int
    distance: float
    relevance_score: float | None = None
    remaining_days: int
    promotion_end_date: datetime
    is_featured: bool
    is_sponsored: bool

    @classmethod
    def from_ranked(cls, ranked: RankedProduct) -> "PromotedProductResponse":
        return cls(
            product_id=ranked.product_id,
            name=ranked.name,
            price=float(ranked.price),
            category=ranked.category,
            vendor_id=ranked.vendor_id,
            promotion_id=ranked.promotion_id,
            feature_type=ranked.feature_type,
            priority=ranked.priority,
            distance=ranked.distance,
            relevance_score=ranked.relevance_score,
            remaining_days=ranked.remaining_days,
            promotion_end_date=ranked.promotion_end_date,
            is_featured=ranked.is_featured,
            is_sponsored=ranked.is_sponsored,
        )


class PromotedProductsResponse(BaseModel):
    products: list[PromotedProductResponse]
    count: int
