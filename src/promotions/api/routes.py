"""FastAPI routes for promotional placements — featured and sponsored products."""

from fastapi import APIRouter, Query, Request
from shared.config import get_settings

from promotions.api.schemas import PromotedProductResponse, PromotedProductsResponse
from promotions.feature import FeatureType
from promotions.ranking import Viewer, rank_featured, rank_sponsored


def _bounded_limit(limit: int | None, default: int) -> int:
    if limit is None:
        return default
    return min(limit, get_settings().max_placement_limit)


def _response(ranked) -> PromotedProductsResponse:
    products = [PromotedProductResponse.from_ranked(item) for item in ranked]
    return PromotedProductsResponse(products=products, count=len(products))


promotional_router = APIRouter(prefix="/promotional", tags=["promotional"])


@promotional_router.get("/products/featured", response_model=PromotedProductsResponse)
async def featured_products(
    request: Request,
    limit: int | None = Query(default=None),
    user_lat: float | None = Query(default=None, alias="userLat"),
    user_lng: float | None = Query(default=None, alias="userLng"),
) -> PromotedProductsResponse:
    pool = request.app.state.promotion_pool.active_records(FeatureType.FEATURED_PRODUCT)
    ranked = rank_featured(
        pool,
        viewer=Viewer.at(user_lat, user_lng),
        limit=_bounded_limit(limit, get_settings().featured_limit),
    )
    return _response(ranked)


@promotional_router.get("/products/sponsored", response_model=PromotedProductsResponse)
async def sponsored_products(
    request: Request,
    limit: int | None = Query(default=None),
    category: str | None = Query(default=None),
    search_query: str | None = Query(default=None, alias="searchQuery"),
    user_lat: float | None = Query(default=None, alias="userLat"),
    user_lng: float | None = Query(default=None, alias="userLng"),
) -> PromotedProductsResponse:
    pool = request.app.state.promotion_pool.active_records(FeatureType.SPONSORED_PRODUCT)
    ranked = rank_sponsored(
        pool,
        viewer=Viewer.at(user_lat, user_lng),
        limit=_bounded_limit(limit, get_settings().sponsored_limit),
        category=category,
        search_query=search_query,
    )
    return _response(ranked)
