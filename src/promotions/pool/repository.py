"""Repository for the PromotionalFeature aggregate."""

from shared.domain import marketplace

from promotions.feature import FeatureType, PromotionalFeature, PromotionPaymentStatus, PromotionStatus


@marketplace.repository(part_of=PromotionalFeature)
class PromotionalFeatureRepository:
    def active(self, feature_type: FeatureType | None = None) -> list[PromotionalFeature]:
        """Records in ACTIVE status, optionally of one placement type."""
        criteria = {"status": PromotionStatus.ACTIVE.value}
        if feature_type is not None:
            criteria["feature_type"] = feature_type.value
        return self._dao.query.filter(**criteria).all().items

    def paid(self, vendor_id: str | None = None) -> list[PromotionalFeature]:
        criteria = {"payment_status": PromotionPaymentStatus.PAID.value}
        if vendor_id is not None:
            criteria["vendor_id"] = str(vendor_id)
        return self._dao.query.filter(**criteria).all().items
