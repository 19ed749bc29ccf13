"""
Transformers Module - Date normalization and aggregation

This module provides the building blocks of the derived metrics:
- dates: Convert relative review times ("il y a 3 mois") to datetimes
- periods: Month keys, date ranges and zero-filled month skeletons
- aggregates: Monthly sales timeline, country distribution, article stats

Pipeline Stage: Between parsing and metric computation
Input:  RawProfileRecord review events and articles
Output: Series consumed by vintalyze.metrics
"""

from .dates import (
    parse_relative_date,
)

from .periods import (
    DateRange,
    month_key,
    get_date_range,
    generate_period,
    trailing_period,
)

from .aggregates import (
    build_monthly_sales,
    build_country_distribution,
    build_article_stats,
)

__all__ = [
    # Dates
    "parse_relative_date",
    # Periods
    "DateRange",
    "month_key",
    "get_date_range",
    "generate_period",
    "trailing_period",
    # Aggregation
    "build_monthly_sales",
    "build_country_distribution",
    "build_article_stats",
]
