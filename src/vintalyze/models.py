"""
Data models for parsed and enriched seller profiles
Frozen dataclasses so a record can be shared between views without copies
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Dict, Any
from enum import Enum


class Trend(str, Enum):
    """Direction of the monthly sales series"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    STABLE = "stable"


@dataclass(frozen=True)
class Article:
    """A listed article with its price and (optional) brand"""
    price: float
    brand: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"price": self.price, "brand": self.brand}


@dataclass(frozen=True)
class ReviewEvent:
    """
    One review line from the profile page
    relative_time_text keeps the raw wording ("2 mois", "3 weeks")
    """
    reviewer: str
    relative_time_text: str
    comment_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reviewer": self.reviewer,
            "relative_time_text": self.relative_time_text,
            "comment_text": self.comment_text,
        }


@dataclass(frozen=True)
class RawProfileRecord:
    """
    Result of parsing a pasted profile page
    Only shop_name is guaranteed; following_count defaults to 0
    """
    shop_name: str
    follower_count: Optional[int] = None
    following_count: int = 0
    location: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    articles: Tuple[Article, ...] = ()
    brands: Tuple[str, ...] = ()
    review_events: Tuple[ReviewEvent, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shop_name": self.shop_name,
            "follower_count": self.follower_count,
            "following_count": self.following_count,
            "location": self.location,
            "rating": self.rating,
            "review_count": self.review_count,
            "articles": [a.to_dict() for a in self.articles],
            "brands": list(self.brands),
            "review_events": [e.to_dict() for e in self.review_events],
        }


@dataclass(frozen=True)
class MonthlySales:
    """Review-derived sales count for one "YYYY-MM" month"""
    month_key: str
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"month_key": self.month_key, "count": self.count}


@dataclass(frozen=True)
class CountryShare:
    """Reviews attributed to one country"""
    country: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """Component scores, each an integer in [0, 100]"""
    rating: int
    sales: int
    engagement: int
    consistency: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "rating": self.rating,
            "sales": self.sales,
            "engagement": self.engagement,
            "consistency": self.consistency,
        }


@dataclass(frozen=True)
class PerformanceScore:
    """Weighted composite of the breakdown, in [0, 100]"""
    total: int
    breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "breakdown": self.breakdown.to_dict()}


@dataclass(frozen=True)
class PerformanceStats:
    """Summary of the monthly sales series"""
    avg_monthly_sales: float
    best_month: MonthlySales
    trend: Trend
    average_monthly_change: float
    next_month_forecast: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg_monthly_sales": self.avg_monthly_sales,
            "best_month": self.best_month.to_dict(),
            "trend": self.trend.value,
            "average_monthly_change": self.average_monthly_change,
            "next_month_forecast": self.next_month_forecast,
        }


@dataclass(frozen=True)
class ArticleStats:
    """Price statistics over the listed articles"""
    article_count: int
    min_price: float
    max_price: float
    average_price: float
    total_listed_value: float
    estimated_revenue: float
    brands: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "article_count": self.article_count,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "average_price": self.average_price,
            "total_listed_value": self.total_listed_value,
            "estimated_revenue": self.estimated_revenue,
            "brands": list(self.brands),
        }


@dataclass(frozen=True)
class EnrichedProfileRecord:
    """
    Parsed profile plus every derived metric
    Built fresh on each analysis; never mutated afterwards
    """
    profile: RawProfileRecord
    analyzed_at: datetime
    estimated_sales_low: int = 0
    estimated_sales_high: int = 0
    monthly_sales: Tuple[MonthlySales, ...] = ()
    country_distribution: Tuple[CountryShare, ...] = ()
    engagement_rate: float = 0.0
    performance_score: PerformanceScore = field(
        default_factory=lambda: PerformanceScore(0, ScoreBreakdown(0, 0, 0, 0))
    )
    performance_stats: Optional[PerformanceStats] = None
    article_stats: Optional[ArticleStats] = None

    # Convenience accessors so views can read profile fields directly
    @property
    def shop_name(self) -> str:
        return self.profile.shop_name

    @property
    def follower_count(self) -> Optional[int]:
        return self.profile.follower_count

    @property
    def following_count(self) -> int:
        return self.profile.following_count

    @property
    def location(self) -> Optional[str]:
        return self.profile.location

    @property
    def rating(self) -> Optional[float]:
        return self.profile.rating

    @property
    def review_count(self) -> Optional[int]:
        return self.profile.review_count

    @property
    def review_events(self) -> Tuple[ReviewEvent, ...]:
        return self.profile.review_events

    def to_dict(self) -> Dict[str, Any]:
        data = self.profile.to_dict()
        data.update({
            "analyzed_at": self.analyzed_at.isoformat(),
            "estimated_sales_low": self.estimated_sales_low,
            "estimated_sales_high": self.estimated_sales_high,
            "monthly_sales": [m.to_dict() for m in self.monthly_sales],
            "country_distribution": [c.to_dict() for c in self.country_distribution],
            "engagement_rate": self.engagement_rate,
            "performance_score": self.performance_score.to_dict(),
            "performance_stats": (
                self.performance_stats.to_dict() if self.performance_stats else None
            ),
            "article_stats": (
                self.article_stats.to_dict() if self.article_stats else None
            ),
        })
        return data
