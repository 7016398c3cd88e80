"""Promotion pool port (abstract interface).

The ranking engine and the revenue summaries read promotional records
through this contract; neither writes back to it.
"""

from abc import ABC, abstractmethod

from promotions.feature import FeatureType, PromotionalFeature
from promotions.ranking import PromotionCandidate


class PromotionPool(ABC):
    @abstractmethod
    def active_records(self, feature_type: FeatureType | None = None) -> list[PromotionCandidate]:
        """Return records in ACTIVE status joined with their product and vendor location.

        The product is None when it no longer exists in the catalogue.
        """
        ...

    @abstractmethod
    def paid_records(self, vendor_id: str | None = None) -> list[PromotionalFeature]:
        """Return records whose payment went through, optionally for one vendor."""
        ...
