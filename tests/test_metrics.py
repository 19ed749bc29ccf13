"""
Unit tests for metrics module
Tests sales estimation, engagement, performance score and trend statistics
"""
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vintalyze.models import (
    MonthlySales,
    RawProfileRecord,
    ReviewEvent,
    Trend,
)
from vintalyze.metrics import (
    estimate_sales,
    compute_engagement_rate,
    rating_score,
    sales_score,
    engagement_score,
    consistency_score,
    compute_performance_score,
    compute_performance_stats,
    enrich,
)


def _timeline(*counts):
    return tuple(MonthlySales(f"2024-{i + 1:02d}", c) for i, c in enumerate(counts))


# =========================
# Sales & Engagement Tests
# =========================
@pytest.mark.unit
class TestEstimateSales:
    """Test the review-count based sales range"""

    def test_point_convention(self):
        assert estimate_sales(120) == (108, 120)
        assert estimate_sales(100) == (90, 100)

    def test_low_is_floored(self):
        """Test 90% of 7 is 6.3, floored to 6"""
        assert estimate_sales(7) == (6, 7)

    def test_band_convention(self):
        """Test band high is 110% rounded up"""
        assert estimate_sales(120, "band") == (108, 132)
        assert estimate_sales(7, "band") == (6, 8)

    def test_no_reviews(self):
        assert estimate_sales(None) == (0, 0)
        assert estimate_sales(0) == (0, 0)

    def test_low_never_exceeds_high(self):
        for n in range(0, 50):
            low, high = estimate_sales(n)
            assert 0 <= low <= high

    def test_unknown_convention(self):
        with pytest.raises(ValueError, match="sales convention"):
            estimate_sales(10, "median")


@pytest.mark.unit
class TestEngagementRate:
    """Test sales-per-follower percentage"""

    def test_engagement_rate(self):
        assert compute_engagement_rate(120, 42) == 285.7

    def test_no_followers(self):
        assert compute_engagement_rate(120, 0) == 0.0
        assert compute_engagement_rate(120, None) == 0.0


# =========================
# Performance Score Tests
# =========================
@pytest.mark.unit
class TestSubScores:
    """Test the four score components"""

    def test_rating_score(self):
        assert rating_score(5) == 100
        assert rating_score(4.8) == pytest.approx(96)
        assert rating_score(None) == 0

    def test_sales_score_log_scale(self):
        assert sales_score(1000) == pytest.approx(100)
        assert sales_score(10) == pytest.approx(100 / 3)
        assert sales_score(1) == 0
        assert sales_score(0) == 0

    def test_sales_score_capped(self):
        assert sales_score(1_000_000) == 100

    def test_engagement_score(self):
        assert engagement_score(10, 100) == pytest.approx(10)
        assert engagement_score(500, 100) == 100

    def test_engagement_score_neutral_without_followers(self):
        assert engagement_score(10, 0) == 50
        assert engagement_score(10, None) == 50

    def test_consistency_flat_series(self):
        """Test a perfectly regular series scores 100"""
        assert consistency_score([2, 2, 2, 2]) == 100
        assert consistency_score([3, 3, 3]) == 100

    def test_consistency_neutral_cases(self):
        assert consistency_score([]) == 50
        assert consistency_score([0, 0, 0]) == 50

    def test_consistency_population_std(self):
        """Test [1, 3]: mean 2, population std 1, cv 50%"""
        assert consistency_score([1, 3]) == pytest.approx(50)

    def test_consistency_never_negative(self):
        assert consistency_score([0, 0, 0, 0, 10]) == 0


@pytest.mark.unit
class TestComputePerformanceScore:
    """Test the weighted composite"""

    def test_sample_profile_score(self):
        """Test breakdown and rounding of a realistic profile"""
        monthly = [1] + [0] * 9 + [1, 1, 2]
        score = compute_performance_score(4.8, 120, 42, monthly)

        assert score.breakdown.rating == 96
        assert score.breakdown.sales == 69
        assert score.breakdown.engagement == 100
        assert score.breakdown.consistency == 0
        assert score.total == 70

    def test_everything_missing(self):
        """Test no rating, no sales, no followers, no timeline"""
        score = compute_performance_score(None, 0, None, [])

        assert score.breakdown.rating == 0
        assert score.breakdown.sales == 0
        assert score.breakdown.engagement == 50
        assert score.breakdown.consistency == 50
        assert score.total == 20

    def test_values_in_range(self):
        score = compute_performance_score(5, 10_000, 1, [5, 5])

        assert score.total == 100
        assert all(0 <= v <= 100 for v in score.breakdown.to_dict().values())

    def test_custom_weights(self):
        weights = {"rating": 1.0, "sales": 0, "engagement": 0, "consistency": 0}
        score = compute_performance_score(4.0, 10, 10, [1], weights=weights)
        assert score.total == 80


# =========================
# Trend Statistics Tests
# =========================
@pytest.mark.unit
class TestComputePerformanceStats:
    """Test average, best month, trend and forecast"""

    def test_positive_trend(self):
        stats = compute_performance_stats(_timeline(1, 2, 4))

        assert stats.avg_monthly_sales == 2.33
        assert stats.best_month == MonthlySales("2024-03", 4)
        assert stats.trend == Trend.POSITIVE
        assert stats.average_monthly_change == 1.5
        assert stats.next_month_forecast == 6

    def test_negative_trend_forecast_floor(self):
        """Test the forecast never goes below zero"""
        stats = compute_performance_stats(_timeline(6, 1, 0))

        assert stats.trend == Trend.NEGATIVE
        assert stats.next_month_forecast == 0

    def test_stable_trend(self):
        stats = compute_performance_stats(_timeline(2, 5, 2))

        assert stats.trend == Trend.STABLE
        assert stats.average_monthly_change == 0
        assert stats.next_month_forecast == 2

    def test_best_month_tie_is_earliest(self):
        stats = compute_performance_stats(_timeline(3, 1, 3))
        assert stats.best_month.month_key == "2024-01"

    def test_single_month(self):
        stats = compute_performance_stats(_timeline(4))

        assert stats.trend == Trend.STABLE
        assert stats.avg_monthly_sales == 4
        assert stats.next_month_forecast == 4

    def test_forecast_rounds_half_up(self):
        """Test 1 -> 2 -> 2 gives change 0.5 and forecast 3"""
        stats = compute_performance_stats(_timeline(1, 2, 2))

        assert stats.average_monthly_change == 0.5
        assert stats.next_month_forecast == 3

    def test_empty_timeline(self):
        assert compute_performance_stats(()) is None


# =========================
# Enrichment Tests
# =========================
@pytest.mark.unit
class TestEnrich:
    """Test enrichment of a hand-built raw record"""

    def test_enrich_counts_dated_reviews(self, fixed_now):
        raw = RawProfileRecord(
            shop_name="MyShop",
            follower_count=10,
            rating=4.0,
            review_count=20,
            review_events=(
                ReviewEvent("a", "1 mois", "merci"),
                ReviewEvent("b", "2 jours", "thanks"),
                ReviewEvent("c", "bientôt", ""),
            ),
        )
        record = enrich(raw, now=fixed_now)

        assert record.estimated_sales_low == 18
        assert record.estimated_sales_high == 20
        assert record.engagement_rate == 200.0
        assert record.monthly_sales == (
            MonthlySales("2024-05", 1),
            MonthlySales("2024-06", 1),
        )
        assert record.analyzed_at == fixed_now

    def test_enrich_without_reviews(self, fixed_now):
        record = enrich(RawProfileRecord(shop_name="Empty"), now=fixed_now)

        assert record.monthly_sales == ()
        assert record.country_distribution == ()
        assert record.performance_stats is None
        assert record.article_stats is None
        assert record.estimated_sales_high == 0

    def test_enrich_trailing_mode(self, fixed_now):
        raw = RawProfileRecord(
            shop_name="MyShop",
            review_events=(ReviewEvent("a", "2 ans", ""),),
        )
        record = enrich(raw, now=fixed_now, timeline_mode="trailing", window_months=6)

        assert len(record.monthly_sales) == 6
        assert sum(m.count for m in record.monthly_sales) == 0
        assert record.performance_stats.trend == Trend.STABLE

    def test_enrich_band_convention(self, fixed_now):
        raw = RawProfileRecord(shop_name="MyShop", review_count=100)
        record = enrich(raw, now=fixed_now, sales_convention="band")

        assert (record.estimated_sales_low, record.estimated_sales_high) == (90, 110)

    def test_enrich_does_not_touch_input(self, fixed_now):
        raw = RawProfileRecord(shop_name="MyShop", review_count=10)
        record = enrich(raw, now=fixed_now)

        assert record.profile is raw
        assert raw.review_count == 10
