from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from catalogue.product.product import Product
from promotions.feature import FeatureType, PromotionalFeature, PromotionStatus, Specifications
from promotions.ranking import GeoPoint, PromotionCandidate

NOW = datetime(2026, 5, 4, 12, 0, tzinfo=UTC)


def _value(member):
    return getattr(member, "value", member)


def _make_feature(
    feature_id,
    feature_type=FeatureType.FEATURED_PRODUCT,
    priority=5,
    keywords=(),
    proximity_boost=True,
    category_boost=None,
    status=PromotionStatus.ACTIVE,
    start=NOW - timedelta(days=3),
    end=NOW + timedelta(days=4),
    created_at=NOW - timedelta(days=5),
    vendor_id="vendor-a",
    **kwargs,
):
    if "payment_status" in kwargs:
        kwargs["payment_status"] = _value(kwargs["payment_status"])
    return PromotionalFeature(
        id=feature_id,
        vendor_id=vendor_id,
        product_id=f"prod-{feature_id}",
        feature_type=_value(feature_type),
        start_date=start,
        end_date=end,
        status=_value(status),
        price=float(kwargs.pop("price", 25.0)),
        specifications=Specifications.build(
            keywords=keywords,
            priority=priority,
            proximity_boost=proximity_boost,
            category_boost=category_boost,
        ),
        created_at=created_at,
        **kwargs,
    )


def _make_product(feature, category="pottery", is_active=True):
    return Product(
        id=str(feature.product_id),
        vendor_id=str(feature.vendor_id),
        name=f"Product {feature.id}",
        price=Decimal("30.00"),
        category=category,
        is_active=is_active,
    )


def _make_candidate(feature, category="pottery", is_active=True, location=None, with_product=True):
    product = _make_product(feature, category, is_active) if with_product else None
    vendor_location = GeoPoint(*location) if location else None
    return PromotionCandidate(feature=feature, product=product, vendor_location=vendor_location)


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_feature():
    return _make_feature


@pytest.fixture()
def make_product():
    return _make_product


@pytest.fixture()
def make_candidate():
    return _make_candidate
