"""
Aggregates Module - Roll review events up into displayable series

Creates:
- the monthly sales timeline (adaptive span or trailing window)
- the country distribution of review comments
- article price statistics
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence, Tuple
import pandas as pd

from .. import config
from ..classify import LanguageClassifier
from ..models import Article, ArticleStats, CountryShare, MonthlySales
from .periods import generate_period, get_date_range, month_key, trailing_period

logger = logging.getLogger(__name__)


def build_monthly_sales(
    dates: Iterable[datetime],
    now: datetime | None = None,
    mode: str = config.TimelineMode.ADAPTIVE,
    window_months: int = config.TRAILING_WINDOW_MONTHS,
) -> Tuple[MonthlySales, ...]:
    """
    Count review dates per calendar month

    Args:
        dates: Absolute review dates (undated events already dropped)
        now: Reference time for the trailing window
        mode: "adaptive" (earliest..latest review month) or "trailing"
        window_months: Trailing window length

    Returns:
        MonthlySales entries, ascending, every month of the span present

    Note:
        Adaptive mode with no dates yields an empty timeline. Trailing mode
        always yields window_months entries and ignores dates outside it.
    """
    config.validate_timeline_mode(mode)
    dates = list(dates)

    if mode == config.TimelineMode.TRAILING:
        skeleton = trailing_period(now, window_months)
    elif not dates:
        return ()
    else:
        span = get_date_range(dates, now)
        skeleton = generate_period(span.start, span.end)

    counts = pd.Series([month_key(d) for d in dates], dtype="object").value_counts()
    outside = 0
    for key, count in counts.items():
        if key in skeleton:
            skeleton[key] += int(count)
        else:
            outside += int(count)

    if outside:
        logger.debug(f"{outside} review(s) fall outside the {window_months}-month window")

    return tuple(MonthlySales(key, count) for key, count in skeleton.items())


def build_country_distribution(
    comments: Iterable[str],
    classifier: Optional[LanguageClassifier] = None,
) -> Tuple[CountryShare, ...]:
    """
    Tally comments per country

    Args:
        comments: Review comment texts
        classifier: LanguageClassifier (default table if None)

    Returns:
        CountryShare entries sorted by count descending (then country name).
        Empty comments are not classified and do not count toward the
        percentages.
    """
    classifier = classifier or LanguageClassifier()
    countries = [
        classifier.classify(text)
        for text in comments
        if text and text.strip()
    ]
    if not countries:
        return ()

    counts = pd.Series(countries, dtype="object").value_counts()
    total = int(counts.sum())
    shares = [
        CountryShare(
            country=str(country),
            count=int(count),
            percentage=round(int(count) / total * 100, 1),
        )
        for country, count in counts.items()
    ]
    shares.sort(key=lambda s: (-s.count, s.country))
    return tuple(shares)


def build_article_stats(
    articles: Sequence[Article],
    brands: Sequence[str] = (),
    estimated_sales: int = 0,
) -> Optional[ArticleStats]:
    """
    Price range, listed value and estimated revenue of the parsed articles

    Estimated revenue is the average listed price times the estimated sales
    count. Returns None when no article was parsed.
    """
    if not articles:
        return None

    prices = pd.Series([a.price for a in articles], dtype="float64")
    average = float(prices.mean())
    return ArticleStats(
        article_count=len(articles),
        min_price=float(prices.min()),
        max_price=float(prices.max()),
        average_price=round(average, 2),
        total_listed_value=round(float(prices.sum()), 2),
        estimated_revenue=round(average * estimated_sales, 2),
        brands=tuple(sorted(brands, key=str.lower)),
    )
