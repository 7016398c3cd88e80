"""Promotional ranking — orders live featured and sponsored placements for a viewer.

Featured placements sort by proximity, then priority, then recency.
Sponsored placements sort by a relevance score built from a base boost,
category match (the product's category or the placement's boosted category),
keyword overlap with the search query and proximity, then priority and
distance. Both sorts are stable, so candidates with equal keys keep their
pool order.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

import structlog
from catalogue.product.product import Product
from shared.config import get_settings

from promotions.feature import FeatureType, PromotionalFeature

logger = structlog.get_logger(__name__)

SPONSORED_BASE_SCORE = 100
CATEGORY_MATCH_BONUS = 50
KEYWORD_MATCH_BONUS = 25
MAX_PROXIMITY_BONUS = 100
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class Viewer:
    """Who is looking at the placement; location is optional."""

    location: GeoPoint | None = None

    @classmethod
    def at(cls, lat=None, lng=None) -> "Viewer":
        if lat is None or lng is None:
            return cls()
        return cls(location=GeoPoint(lat=float(lat), lng=float(lng)))


@dataclass(frozen=True)
class PromotionCandidate:
    """A promotional record joined with its product and the vendor's coordinates."""

    feature: PromotionalFeature
    product: Product | None = None
    vendor_location: GeoPoint | None = None


@dataclass(frozen=True)
class RankedProduct:
    product_id: str
    name: str
    price: Decimal
    category: str | None
    vendor_id: str
    promotion_id: str
    feature_type: str
    priority: int
    distance: float
    remaining_days: int
    promotion_end_date: datetime
    relevance_score: float | None = None

    @property
    def is_featured(self) -> bool:
        return self.feature_type == FeatureType.FEATURED_PRODUCT.value

    @property
    def is_sponsored(self) -> bool:
        return self.feature_type == FeatureType.SPONSORED_PRODUCT.value


# ---------------------------------------------------------------------------
# Scoring helpers
# ---------------------------------------------------------------------------
def has_coordinates(viewer: Viewer, candidate: PromotionCandidate) -> bool:
    return viewer.location is not None and candidate.vendor_location is not None


def distance_between(viewer: Viewer, candidate: PromotionCandidate) -> float:
    """Planar approximation; the configured sentinel when either side lacks coordinates."""
    if not has_coordinates(viewer, candidate):
        return get_settings().distance_sentinel
    d_lat = viewer.location.lat - candidate.vendor_location.lat
    d_lng = viewer.location.lng - candidate.vendor_location.lng
    return math.sqrt(d_lat**2 + d_lng**2) / 1000


def remaining_days(end_date: datetime, now: datetime) -> int:
    seconds = (end_date - now).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def _tokens(text: str) -> set[str]:
    return {token for token in text.lower().split() if token}


def keyword_overlap(search_query: str | None, keywords) -> int:
    """Number of distinct query words found among the record's keyword words."""
    if not search_query:
        return 0
    keyword_tokens = set()
    for keyword in keywords:
        keyword_tokens |= _tokens(keyword)
    return len(_tokens(search_query) & keyword_tokens)


def _category_matches(candidate: PromotionCandidate, category: str | None) -> bool:
    """The query category matches the product's category or the placement's boosted category."""
    if not category:
        return False
    wanted = category.strip().lower()
    targets = (candidate.product.category, candidate.feature.spec.category_boost)
    return any(target and target.strip().lower() == wanted for target in targets)


def relevance_score(
    candidate: PromotionCandidate,
    viewer: Viewer,
    category: str | None = None,
    search_query: str | None = None,
) -> float:
    spec = candidate.feature.spec
    score = float(SPONSORED_BASE_SCORE)

    if _category_matches(candidate, category):
        score += CATEGORY_MATCH_BONUS

    score += KEYWORD_MATCH_BONUS * keyword_overlap(search_query, spec.keyword_list)

    if spec.proximity_boost and has_coordinates(viewer, candidate):
        score += max(0.0, MAX_PROXIMITY_BONUS - distance_between(viewer, candidate) * 10)

    return score


# ---------------------------------------------------------------------------
# Candidate filter
# ---------------------------------------------------------------------------
def live_candidates(pool, feature_type: FeatureType, now: datetime) -> list[PromotionCandidate]:
    """Keep live records of ``feature_type`` whose product exists and is active.

    Records whose promotion window has no timezone are dropped and counted.
    """
    live = []
    dropped = 0
    naive_windows = 0
    for candidate in pool:
        feature = candidate.feature
        if feature.feature_type != feature_type.value:
            dropped += 1
            continue
        if not feature.has_aware_window():
            naive_windows += 1
            continue
        if not feature.is_live(now):
            dropped += 1
            continue
        if candidate.product is None or not candidate.product.is_active:
            dropped += 1
            continue
        live.append(candidate)

    if naive_windows:
        logger.warning(
            "Dropped promotional candidates without a timezone-aware window",
            feature_type=feature_type.value,
            dropped=naive_windows,
        )
    if dropped:
        logger.debug("Dropped promotional candidates", feature_type=feature_type.value, dropped=dropped)
    return live


def _ranked(candidate: PromotionCandidate, distance: float, now: datetime, score=None) -> RankedProduct:
    feature, product = candidate.feature, candidate.product
    return RankedProduct(
        product_id=product.id,
        name=product.name,
        price=product.price,
        category=product.category,
        vendor_id=str(feature.vendor_id),
        promotion_id=str(feature.id),
        feature_type=feature.feature_type,
        priority=feature.priority,
        distance=distance,
        remaining_days=remaining_days(feature.end_date, now),
        promotion_end_date=feature.end_date,
        relevance_score=score,
    )


# ---------------------------------------------------------------------------
# Public ranking contracts
# ---------------------------------------------------------------------------
def rank_featured(pool, viewer: Viewer | None = None, limit: int = 6, now=None) -> list[RankedProduct]:
    """Closest first, then highest priority, then most recently created."""
    if limit <= 0:
        return []
    viewer = viewer or Viewer()
    now = now or datetime.now(UTC)

    scored = [
        (candidate, distance_between(viewer, candidate))
        for candidate in live_candidates(pool, FeatureType.FEATURED_PRODUCT, now)
    ]
    scored.sort(
        key=lambda pair: (
            pair[1],
            -pair[0].feature.priority,
            -pair[0].feature.created_at.timestamp(),
        )
    )
    return [_ranked(candidate, distance, now) for candidate, distance in scored[:limit]]


def rank_sponsored(
    pool,
    viewer: Viewer | None = None,
    limit: int = 3,
    category: str | None = None,
    search_query: str | None = None,
    now=None,
) -> list[RankedProduct]:
    """Most relevant first, then highest priority, then closest."""
    if limit <= 0:
        return []
    viewer = viewer or Viewer()
    now = now or datetime.now(UTC)

    scored = [
        (candidate, relevance_score(candidate, viewer, category, search_query), distance_between(viewer, candidate))
        for candidate in live_candidates(pool, FeatureType.SPONSORED_PRODUCT, now)
    ]
    scored.sort(key=lambda row: (-row[1], -row[0].feature.priority, row[2]))
    return [_ranked(candidate, distance, now, score=score) for candidate, score, distance in scored[:limit]]
