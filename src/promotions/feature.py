"""Promotional feature aggregate — a vendor's paid placement for one of their products.

Lifecycle:
    PENDING_APPROVAL → APPROVED | REJECTED   (administrative decision)
    ACTIVE → COMPLETED | EXPIRED             (time-based sweep, external)

The ranking engine only reads records that are currently live; it never
changes their status or performance counters.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text, ValueObject
from shared.domain import marketplace
from shared.errors import InvalidTransitionError, ValidationError
from shared.money import ZERO, round2, to_decimal
from shared.periods import is_aware


class FeatureType(Enum):
    FEATURED_PRODUCT = "featured_product"
    SPONSORED_PRODUCT = "sponsored_product"
    ARTISAN_SPOTLIGHT = "artisan_spotlight"
    CATEGORY_PROMOTION = "category_promotion"
    SEARCH_BOOST = "search_boost"
    HOMEPAGE_FEATURED = "homepage_featured"


class PromotionStatus(Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class PromotionPaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Placement(Enum):
    HOMEPAGE = "homepage"
    CATEGORY_PAGE = "category_page"
    SEARCH_RESULTS = "search_results"
    PRODUCT_PAGE = "product_page"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="PromotionalFeature")
class Specifications:
    """How and where the placement is shown."""

    placement = String(choices=Placement)
    priority = Integer(default=5, min_value=1, max_value=10)
    keywords = Text()  # JSON array of strings
    category_boost = String(max_length=100)
    proximity_boost = Boolean(default=True)

    @classmethod
    def build(cls, keywords=(), **fields) -> "Specifications":
        return cls(keywords=json.dumps(list(keywords)), **fields)

    @property
    def keyword_list(self) -> list[str]:
        return json.loads(self.keywords) if self.keywords else []


@marketplace.value_object(part_of="PromotionalFeature")
class Performance:
    """Cumulative counters maintained by the analytics collaborator."""

    impressions = Integer(default=0, min_value=0)
    clicks = Integer(default=0, min_value=0)
    conversions = Integer(default=0, min_value=0)
    revenue = Float(default=0.0)


_DEFAULT_SPECIFICATIONS = {"priority": 5, "proximity_boost": True}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class PromotionalFeature:
    vendor_id = Identifier(required=True)
    product_id = Identifier()
    feature_type = String(choices=FeatureType, required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    status = String(choices=PromotionStatus, default=PromotionStatus.PENDING_APPROVAL.value)
    is_active = Boolean(default=True)
    price = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")
    payment_status = String(choices=PromotionPaymentStatus, default=PromotionPaymentStatus.PENDING.value)
    payment_date = DateTime()
    specifications = ValueObject(Specifications)
    performance = ValueObject(Performance)
    approved_by = Identifier()
    approved_at = DateTime()
    rejection_reason = Text()
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def window_must_end_after_it_starts(self):
        if self.start_date is None or self.end_date is None:
            return
        if is_aware(self.start_date) != is_aware(self.end_date):
            raise ValidationError({"end_date": ["Start and end dates must both carry a timezone or neither"]})
        if self.end_date <= self.start_date:
            raise ValidationError({"end_date": ["Promotion must end after it starts"]})

    @property
    def spec(self) -> Specifications:
        return self.specifications or Specifications(**_DEFAULT_SPECIFICATIONS)

    @property
    def priority(self) -> int:
        return self.spec.priority

    def has_aware_window(self) -> bool:
        return is_aware(self.start_date) and is_aware(self.end_date)

    def is_live(self, now: datetime | None = None) -> bool:
        """Active, switched on, and inside its ``[start_date, end_date)`` window.

        A window without a timezone cannot be compared with ``now`` and is
        never live.
        """
        now = now or datetime.now(UTC)
        return (
            self.status == PromotionStatus.ACTIVE.value
            and self.is_active
            and self.has_aware_window()
            and self.start_date <= now < self.end_date
        )

    # -------------------------------------------------------------------
    # Administrative decision
    # -------------------------------------------------------------------
    def _assert_pending(self, target: PromotionStatus):
        if self.status != PromotionStatus.PENDING_APPROVAL.value:
            raise InvalidTransitionError(self.status, target.value)

    def approve(self, admin_id, now=None):
        self._assert_pending(PromotionStatus.APPROVED)
        now = now or datetime.now(UTC)
        with atomic_change(self):
            self.status = PromotionStatus.APPROVED.value
            self.approved_by = str(admin_id)
            self.approved_at = now
            self.updated_at = now

    def reject(self, admin_id, reason, now=None):
        if not reason:
            raise ValidationError({"rejection_reason": ["A rejection reason is required"]})
        self._assert_pending(PromotionStatus.REJECTED)
        now = now or datetime.now(UTC)
        with atomic_change(self):
            self.status = PromotionStatus.REJECTED.value
            self.approved_by = str(admin_id)
            self.rejection_reason = reason
            self.updated_at = now

    # -------------------------------------------------------------------
    # Derived performance metrics
    # -------------------------------------------------------------------
    @property
    def click_through_rate(self) -> Decimal:
        """Clicks per hundred impressions."""
        if self.performance is None or not self.performance.impressions:
            return ZERO
        return round2(Decimal(self.performance.clicks) * 100 / self.performance.impressions)

    @property
    def cost_per_click(self) -> Decimal:
        if self.performance is None or not self.performance.clicks:
            return ZERO
        return round2(to_decimal(self.price) / self.performance.clicks)
