"""Promotion pool backed by the PromotionalFeature repository.

Features are read through the domain's repository; vendor coordinates are
supplied by the vendor directory and kept in memory here.
"""

from catalogue.lookup.port import ProductLookup
from protean.utils.globals import current_domain
from shared.errors import ObjectNotFoundError

from promotions.feature import FeatureType, PromotionalFeature
from promotions.pool.port import PromotionPool
from promotions.ranking import GeoPoint, PromotionCandidate


class RepositoryPromotionPool(PromotionPool):
    """Joins stored promotions with a product lookup and known vendor locations.

    Records come back in the order they were stored, which is the order ties
    keep after ranking.
    """

    def __init__(self, product_lookup: ProductLookup | None = None) -> None:
        self.product_lookup = product_lookup
        self._vendor_locations: dict[str, GeoPoint] = {}

    @property
    def repository(self):
        return current_domain.repository_for(PromotionalFeature)

    def add(self, feature: PromotionalFeature) -> PromotionalFeature:
        self.repository.add(feature)
        return feature

    def get(self, feature_id: str) -> PromotionalFeature:
        return self.repository.get(feature_id)

    def set_vendor_location(self, vendor_id: str, lat: float, lng: float) -> None:
        self._vendor_locations[str(vendor_id)] = GeoPoint(lat=lat, lng=lng)

    def _product_for(self, feature: PromotionalFeature):
        if self.product_lookup is None or feature.product_id is None:
            return None
        try:
            return self.product_lookup.get(str(feature.product_id))
        except ObjectNotFoundError:
            return None

    def active_records(self, feature_type: FeatureType | None = None) -> list[PromotionCandidate]:
        return [
            PromotionCandidate(
                feature=feature,
                product=self._product_for(feature),
                vendor_location=self._vendor_locations.get(str(feature.vendor_id)),
            )
            for feature in self.repository.active(feature_type)
        ]

    def paid_records(self, vendor_id: str | None = None) -> list[PromotionalFeature]:
        return self.repository.paid(vendor_id)
