"""
Side-by-side comparison of two analyzed profiles
Both records are only read; the result is a new DataFrame
"""
import logging
from typing import Tuple
import pandas as pd

from .models import EnrichedProfileRecord
from .transformers import generate_period

logger = logging.getLogger(__name__)


def _column_names(first: EnrichedProfileRecord, second: EnrichedProfileRecord) -> Tuple[str, str]:
    a, b = first.shop_name, second.shop_name
    if a == b:
        return f"{a} (1)", f"{b} (2)"
    return a, b


def merge_timelines(first: EnrichedProfileRecord, second: EnrichedProfileRecord) -> pd.DataFrame:
    """
    Join two monthly sales timelines on a shared month axis

    Args:
        first: First analyzed profile
        second: Second analyzed profile

    Returns:
        DataFrame indexed by month key ("month"), one integer column per
        shop, covering the union span of both timelines with missing months
        set to 0. Empty when neither profile has a timeline.
    """
    col_a, col_b = _column_names(first, second)
    series_a = pd.Series(
        {m.month_key: m.count for m in first.monthly_sales}, dtype="int64", name=col_a
    )
    series_b = pd.Series(
        {m.month_key: m.count for m in second.monthly_sales}, dtype="int64", name=col_b
    )

    keys = sorted(set(series_a.index) | set(series_b.index))
    if not keys:
        return pd.DataFrame(columns=[col_a, col_b], dtype="int64").rename_axis("month")

    start = pd.Period(keys[0], freq="M")
    end = pd.Period(keys[-1], freq="M")
    skeleton = generate_period(start.to_timestamp(), end.to_timestamp())

    merged = (
        pd.concat([series_a, series_b], axis=1)
        .reindex(list(skeleton))
        .fillna(0)
        .astype("int64")
        .rename_axis("month")
    )
    logger.debug(f"Merged timelines over {len(merged)} month(s)")
    return merged


def compare_profiles(first: EnrichedProfileRecord, second: EnrichedProfileRecord) -> pd.DataFrame:
    """Headline metrics of both profiles, one column per shop"""
    col_a, col_b = _column_names(first, second)

    def metrics(record: EnrichedProfileRecord) -> dict:
        stats = record.performance_stats
        return {
            "Abonnés": record.follower_count,
            "Abonnements": record.following_count,
            "Lieu": record.location,
            "Note": record.rating,
            "Évaluations": record.review_count,
            "Ventes estimées (min)": record.estimated_sales_low,
            "Ventes estimées (max)": record.estimated_sales_high,
            "Taux d'engagement (%)": record.engagement_rate,
            "Score de performance": record.performance_score.total,
            "Ventes mensuelles moyennes": stats.avg_monthly_sales if stats else None,
            "Tendance": stats.trend.value if stats else None,
            "Prévision mois prochain": stats.next_month_forecast if stats else None,
        }

    return pd.DataFrame({col_a: metrics(first), col_b: metrics(second)}).rename_axis("Métrique")
