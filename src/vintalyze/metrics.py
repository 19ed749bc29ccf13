"""
Derived metrics for a parsed profile
Estimated sales, engagement, performance score and trend statistics
"""
import logging
import math
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

from . import config
from .classify import LanguageClassifier
from .models import (
    EnrichedProfileRecord,
    MonthlySales,
    PerformanceScore,
    PerformanceStats,
    RawProfileRecord,
    ScoreBreakdown,
    Trend,
)
from .transformers import (
    build_article_stats,
    build_country_distribution,
    build_monthly_sales,
    parse_relative_date,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


# =========================
# Sales & Engagement
# =========================
def estimate_sales(
    review_count: Optional[int],
    convention: str = config.SalesConvention.POINT,
) -> Tuple[int, int]:
    """
    Estimated sales range from the review count

    Args:
        review_count: Number of reviews on the profile
        convention: "point" (high = reviews) or "band" (high = 110% of reviews)

    Returns:
        (low, high) with low = floor(90% of reviews)
    """
    config.validate_sales_convention(convention)
    if not review_count or review_count < 0:
        return 0, 0

    low = review_count * 9 // 10
    if convention == config.SalesConvention.BAND:
        high = -(-review_count * 11 // 10)  # ceil
    else:
        high = review_count
    return low, high


def compute_engagement_rate(estimated_sales: int, follower_count: Optional[int]) -> float:
    """Estimated sales per follower, as a percentage with one decimal"""
    if not follower_count:
        return 0.0
    return round(estimated_sales / follower_count * 100, 1)


# =========================
# Performance Score
# =========================
def rating_score(rating: Optional[float]) -> float:
    if rating is None:
        return 0.0
    return rating / config.MAX_RATING * 100


def sales_score(estimated_sales: int) -> float:
    """log10(sales) scaled so SALES_SCORE_CEILING sales reach 100"""
    if estimated_sales <= 0:
        return 0.0
    score = np.log10(estimated_sales) / np.log10(config.SALES_SCORE_CEILING) * 100
    if not np.isfinite(score):
        return 0.0
    return min(100.0, float(score))


def engagement_score(estimated_sales: int, follower_count: Optional[int]) -> float:
    if not follower_count:
        return float(config.NEUTRAL_SCORE)
    return min(100.0, estimated_sales / follower_count * 100)


def consistency_score(monthly_counts: Sequence[int]) -> float:
    """
    100 minus the coefficient of variation (in %) of the monthly counts

    Population standard deviation; an empty or all-zero series gets the
    neutral score.
    """
    counts = np.asarray(monthly_counts, dtype=float)
    if counts.size == 0:
        return float(config.NEUTRAL_SCORE)
    mean = counts.mean()
    if mean == 0:
        return float(config.NEUTRAL_SCORE)
    cv = counts.std() / mean
    return max(0.0, 100 - cv * 100)


def compute_performance_score(
    rating: Optional[float],
    estimated_sales: int,
    follower_count: Optional[int],
    monthly_counts: Sequence[int],
    weights: Optional[Dict[str, float]] = None,
) -> PerformanceScore:
    """
    Weighted composite score

    Args:
        rating: Average rating (0-5)
        estimated_sales: Upper estimated sales figure
        follower_count: Followers, None when not found
        monthly_counts: Counts of the monthly sales timeline
        weights: Component weights (uses config.SCORE_WEIGHTS if None)

    Returns:
        PerformanceScore with every value clamped to [0, 100]
    """
    weights = weights or config.SCORE_WEIGHTS
    components = {
        "rating": _clamp(rating_score(rating)),
        "sales": _clamp(sales_score(estimated_sales)),
        "engagement": _clamp(engagement_score(estimated_sales, follower_count)),
        "consistency": _clamp(consistency_score(monthly_counts)),
    }
    total = sum(components[name] * weights.get(name, 0) for name in components)

    return PerformanceScore(
        total=int(_clamp(_round_half_up(total))),
        breakdown=ScoreBreakdown(
            **{name: int(_round_half_up(value)) for name, value in components.items()}
        ),
    )


# =========================
# Trend Statistics
# =========================
def compute_performance_stats(
    monthly_sales: Sequence[MonthlySales],
) -> Optional[PerformanceStats]:
    """
    Average, best month, trend and next-month forecast of the timeline

    Trend is the mean month-over-month change; the forecast adds it to the
    last month and never goes below zero. Returns None for an empty timeline.
    """
    if not monthly_sales:
        return None

    counts = pd.Series([m.count for m in monthly_sales], dtype="float64")
    average = float(counts.mean())

    # idxmax returns the first occurrence, i.e. the earliest month on ties
    best = monthly_sales[int(counts.idxmax())]

    deltas = counts.diff().dropna()
    change = float(deltas.mean()) if not deltas.empty else 0.0

    if change > 0:
        trend = Trend.POSITIVE
    elif change < 0:
        trend = Trend.NEGATIVE
    else:
        trend = Trend.STABLE

    forecast = max(0, _round_half_up(monthly_sales[-1].count + change))

    return PerformanceStats(
        avg_monthly_sales=round(average, 2),
        best_month=best,
        trend=trend,
        average_monthly_change=round(change, 2),
        next_month_forecast=forecast,
    )


# =========================
# Enrichment
# =========================
def enrich(
    raw: RawProfileRecord,
    now: Optional[datetime] = None,
    classifier: Optional[LanguageClassifier] = None,
    sales_convention: Optional[str] = None,
    timeline_mode: Optional[str] = None,
    window_months: int = config.TRAILING_WINDOW_MONTHS,
    weights: Optional[Dict[str, float]] = None,
) -> EnrichedProfileRecord:
    """
    Compute every derived metric for a parsed profile

    Args:
        raw: Parsed profile
        now: Reference time for relative review dates (defaults to now)
        classifier: LanguageClassifier for the country distribution
        sales_convention: "point" or "band" (uses config if None)
        timeline_mode: "adaptive" or "trailing" (uses config if None)
        window_months: Trailing window length
        weights: Performance score weights

    Returns:
        EnrichedProfileRecord

    Note:
        Reviews with an unrecognized relative time are left out of the
        timeline; nothing here raises on degenerate data.
    """
    now = now or datetime.now()
    sales_convention = sales_convention or config.SALES_CONVENTION
    timeline_mode = timeline_mode or config.TIMELINE_MODE

    low, high = estimate_sales(raw.review_count, sales_convention)

    dates = []
    for event in raw.review_events:
        date = parse_relative_date(event.relative_time_text, now=now)
        if date is None:
            continue
        dates.append(date)
    skipped = len(raw.review_events) - len(dates)
    if skipped:
        logger.debug(f"{skipped} review(s) without a usable date left out of the timeline")

    monthly_sales = build_monthly_sales(
        dates, now=now, mode=timeline_mode, window_months=window_months
    )
    country_distribution = build_country_distribution(
        (event.comment_text for event in raw.review_events), classifier
    )

    score = compute_performance_score(
        rating=raw.rating,
        estimated_sales=high,
        follower_count=raw.follower_count,
        monthly_counts=[m.count for m in monthly_sales],
        weights=weights,
    )

    record = EnrichedProfileRecord(
        profile=raw,
        analyzed_at=now,
        estimated_sales_low=low,
        estimated_sales_high=high,
        monthly_sales=monthly_sales,
        country_distribution=country_distribution,
        engagement_rate=compute_engagement_rate(high, raw.follower_count),
        performance_score=score,
        performance_stats=compute_performance_stats(monthly_sales),
        article_stats=build_article_stats(raw.articles, raw.brands, high),
    )
    logger.info(
        f"Analyzed '{raw.shop_name}': score {score.total}/100, "
        f"{len(monthly_sales)} month(s), {len(country_distribution)} country(ies)"
    )
    return record
