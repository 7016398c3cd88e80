"""Tests for featured and sponsored promotional ranking."""

from datetime import timedelta

import pytest
from promotions.feature import FeatureType, PromotionStatus
from promotions.ranking import (
    Viewer,
    distance_between,
    keyword_overlap,
    rank_featured,
    rank_sponsored,
    remaining_days,
)
from structlog.testing import capture_logs

SPONSORED = FeatureType.SPONSORED_PRODUCT
VIEWER = Viewer.at(40000, 70000)


def _ids(ranked):
    return [item.promotion_id for item in ranked]


class TestCandidateFilter:
    def test_only_live_records_of_the_mode_are_ranked(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("live")),
            make_candidate(make_feature("paused", status=PromotionStatus.PAUSED)),
            make_candidate(make_feature("expired", end=now - timedelta(seconds=1))),
            make_candidate(make_feature("sponsored", feature_type=SPONSORED)),
            make_candidate(make_feature("inactive-product"), is_active=False),
            make_candidate(make_feature("deleted-product"), with_product=False),
        ]

        assert _ids(rank_featured(pool, limit=10, now=now)) == ["live"]

    def test_empty_pool(self, now):
        assert rank_featured([], limit=6, now=now) == []
        assert rank_sponsored([], limit=3, now=now) == []

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, make_feature, make_candidate, now, limit):
        pool = [make_candidate(make_feature("a"))]
        assert rank_featured(pool, limit=limit, now=now) == []

    def test_limit_truncates(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature(str(i))) for i in range(8)]
        assert len(rank_featured(pool, limit=6, now=now)) == 6

    def test_window_without_timezone_is_dropped_and_logged(self, make_feature, make_candidate, now):
        naive = make_feature(
            "naive",
            start=(now - timedelta(days=1)).replace(tzinfo=None),
            end=(now + timedelta(days=1)).replace(tzinfo=None),
        )
        pool = [make_candidate(naive), make_candidate(make_feature("aware"))]

        with capture_logs() as logs:
            ranked = rank_featured(pool, limit=6, now=now)

        assert _ids(ranked) == ["aware"]
        warnings = [log for log in logs if log["log_level"] == "warning"]
        assert warnings[0]["dropped"] == 1


class TestDistance:
    def test_planar_distance_scaled_by_thousand(self, make_feature, make_candidate):
        candidate = make_candidate(make_feature("a"), location=(43000, 74000))
        assert distance_between(VIEWER, candidate) == pytest.approx(5.0)

    def test_missing_coordinates_use_sentinel(self, make_feature, make_candidate):
        assert distance_between(VIEWER, make_candidate(make_feature("a"))) == 999999
        assert distance_between(Viewer(), make_candidate(make_feature("a"), location=(1, 1))) == 999999

    def test_sentinel_is_configurable(self, make_feature, make_candidate, monkeypatch):
        monkeypatch.setenv("MARKETPLACE_DISTANCE_SENTINEL", "5000")
        assert distance_between(Viewer(), make_candidate(make_feature("a"))) == 5000


class TestRankFeatured:
    def test_closest_first(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("far"), location=(46000, 78000)),
            make_candidate(make_feature("near"), location=(40300, 70400)),
            make_candidate(make_feature("unknown")),
        ]
        assert _ids(rank_featured(pool, VIEWER, limit=6, now=now)) == ["near", "far", "unknown"]

    def test_priority_breaks_distance_ties(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature("low", priority=2)), make_candidate(make_feature("high", priority=9))]
        assert _ids(rank_featured(pool, limit=6, now=now)) == ["high", "low"]

    def test_newest_breaks_priority_ties(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("older", created_at=now - timedelta(days=9))),
            make_candidate(make_feature("newer", created_at=now - timedelta(days=1))),
        ]
        assert _ids(rank_featured(pool, limit=6, now=now)) == ["newer", "older"]

    def test_full_ties_keep_pool_order(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature(name)) for name in ("x", "y", "z")]
        assert _ids(rank_featured(pool, limit=6, now=now)) == ["x", "y", "z"]

    def test_result_fields(self, make_feature, make_candidate, now):
        feature = make_feature("a", priority=7, end=now + timedelta(days=2, hours=1))
        (ranked,) = rank_featured([make_candidate(feature)], limit=6, now=now)

        assert ranked.product_id == "prod-a"
        assert ranked.priority == 7
        assert ranked.remaining_days == 3
        assert ranked.is_featured and not ranked.is_sponsored
        assert ranked.relevance_score is None


class TestRankSponsored:
    def test_base_relevance(self, make_feature, make_candidate, now):
        (ranked,) = rank_sponsored([make_candidate(make_feature("a", feature_type=SPONSORED))], limit=3, now=now)
        assert ranked.relevance_score == 100
        assert ranked.is_sponsored

    def test_category_match_bonus(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("textiles", feature_type=SPONSORED), category="textiles"),
            make_candidate(make_feature("pottery", feature_type=SPONSORED), category="pottery"),
        ]

        ranked = rank_sponsored(pool, limit=3, category="pottery", now=now)

        assert _ids(ranked) == ["pottery", "textiles"]
        assert [r.relevance_score for r in ranked] == [150, 100]

    def test_boosted_category_earns_the_category_bonus(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("plain", feature_type=SPONSORED), category="homeware"),
            make_candidate(
                make_feature("boosted", feature_type=SPONSORED, category_boost="Pottery"), category="homeware"
            ),
        ]

        ranked = rank_sponsored(pool, limit=3, category="pottery", now=now)

        assert _ids(ranked) == ["boosted", "plain"]
        assert [r.relevance_score for r in ranked] == [150, 100]

    def test_category_match_is_counted_once(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature("a", feature_type=SPONSORED, category_boost="pottery"), category="Pottery")]
        assert rank_sponsored(pool, limit=3, category="pottery", now=now)[0].relevance_score == 150

    def test_keyword_overlap_bonus(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("one", feature_type=SPONSORED, keywords=("glazed mug",))),
            make_candidate(make_feature("two", feature_type=SPONSORED, keywords=("Handmade", "Glazed Bowl"))),
        ]

        ranked = rank_sponsored(pool, limit=3, search_query="handmade glazed bowl", now=now)

        assert _ids(ranked) == ["two", "one"]
        assert [r.relevance_score for r in ranked] == [175, 125]

    def test_keywords_ignored_without_query(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature("a", feature_type=SPONSORED, keywords=("mug",)))]
        assert rank_sponsored(pool, limit=3, now=now)[0].relevance_score == 100

    def test_proximity_bonus(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("far", feature_type=SPONSORED), location=(43000, 74000)),
            make_candidate(make_feature("near", feature_type=SPONSORED), location=(40000, 70000)),
        ]

        ranked = rank_sponsored(pool, VIEWER, limit=3, now=now)

        assert _ids(ranked) == ["near", "far"]
        assert [r.relevance_score for r in ranked] == [pytest.approx(200), pytest.approx(150)]

    def test_proximity_bonus_never_negative(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature("a", feature_type=SPONSORED), location=(400000, 700000))]
        assert rank_sponsored(pool, VIEWER, limit=3, now=now)[0].relevance_score == 100

    def test_proximity_bonus_can_be_switched_off(self, make_feature, make_candidate, now):
        pool = [make_candidate(make_feature("a", feature_type=SPONSORED, proximity_boost=False), location=(40000, 70000))]
        assert rank_sponsored(pool, VIEWER, limit=3, now=now)[0].relevance_score == 100

    def test_priority_then_distance_break_relevance_ties(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("low", feature_type=SPONSORED, priority=1, proximity_boost=False), location=(0, 0)),
            make_candidate(make_feature("far", feature_type=SPONSORED, priority=8, proximity_boost=False), location=(49000, 70000)),
            make_candidate(make_feature("near", feature_type=SPONSORED, priority=8, proximity_boost=False), location=(41000, 70000)),
        ]
        assert _ids(rank_sponsored(pool, VIEWER, limit=3, now=now)) == ["near", "far", "low"]

    def test_equal_relevance_keeps_input_order(self, make_feature, make_candidate, now):
        pool = [
            make_candidate(make_feature("x", feature_type=SPONSORED)),
            make_candidate(make_feature("y", feature_type=SPONSORED)),
        ]
        assert _ids(rank_sponsored(pool, limit=3, now=now)) == ["x", "y"]
        assert _ids(rank_sponsored(pool, limit=3, now=now)) == ["x", "y"]


class TestHelpers:
    @pytest.mark.parametrize(
        ("delta", "expected"),
        [(timedelta(days=2), 2), (timedelta(days=2, seconds=1), 3), (timedelta(0), 0), (timedelta(days=-4), 0)],
    )
    def test_remaining_days(self, now, delta, expected):
        assert remaining_days(now + delta, now) == expected

    def test_keyword_overlap_counts_distinct_query_words(self):
        assert keyword_overlap("mug mug bowl", ["Mug"]) == 1
        assert keyword_overlap(None, ["mug"]) == 0
        assert keyword_overlap("vase", []) == 0
