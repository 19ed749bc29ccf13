"""
Export tables for an analyzed profile

The rows mirror EnrichedProfileRecord fields; nothing new is computed here.
"""
import html
from typing import Dict
import pandas as pd

from .models import EnrichedProfileRecord

REPORT_TITLE = "Rapport d'analyse Vintalyze"

TABLE_TITLES = {
    "general": "Informations générales",
    "monthly_sales": "Ventes mensuelles",
    "countries": "Répartition géographique",
    "performance": "Performance",
    "articles": "Articles",
    "reviews": "Derniers commentaires",
}


def _na(value) -> str:
    return "N/A" if value is None else str(value)


def build_general_table(record: EnrichedProfileRecord) -> pd.DataFrame:
    """Key-value table of the general metrics"""
    rating = "N/A"
    if record.rating is not None:
        rating = f"{record.rating}/5"
        if record.review_count is not None:
            rating += f" ({record.review_count} évaluations)"

    rows = [
        ("Boutique", record.shop_name),
        ("Ventes estimées", f"{record.estimated_sales_low} - {record.estimated_sales_high}"),
        ("Abonnés", _na(record.follower_count)),
        ("Abonnements", str(record.following_count)),
        ("Lieu", _na(record.location)),
        ("Note", rating),
        ("Taux d'engagement", f"{record.engagement_rate}%"),
        ("Score de performance", f"{record.performance_score.total}/100"),
    ]
    return pd.DataFrame(rows, columns=["Métrique", "Valeur"])


def build_performance_table(record: EnrichedProfileRecord) -> pd.DataFrame:
    """Score breakdown plus the trend statistics when a timeline exists"""
    breakdown = record.performance_score.breakdown
    rows = [
        ("Score global", record.performance_score.total),
        ("Note", breakdown.rating),
        ("Ventes", breakdown.sales),
        ("Engagement", breakdown.engagement),
        ("Régularité", breakdown.consistency),
    ]
    stats = record.performance_stats
    if stats:
        rows += [
            ("Ventes mensuelles moyennes", stats.avg_monthly_sales),
            ("Meilleur mois", f"{stats.best_month.month_key} ({stats.best_month.count})"),
            ("Tendance", stats.trend.value),
            ("Prévision mois prochain", stats.next_month_forecast),
        ]
    return pd.DataFrame(rows, columns=["Métrique", "Valeur"])


def build_report_tables(record: EnrichedProfileRecord) -> Dict[str, pd.DataFrame]:
    """
    All export tables, in document order

    Args:
        record: Analyzed profile

    Returns:
        Ordered mapping of table key -> DataFrame; monthly sales, countries,
        articles and reviews are only included when the record has them
    """
    tables = {"general": build_general_table(record)}

    if record.monthly_sales:
        tables["monthly_sales"] = pd.DataFrame(
            [(m.month_key, m.count) for m in record.monthly_sales],
            columns=["Mois", "Ventes"],
        )

    if record.country_distribution:
        tables["countries"] = pd.DataFrame(
            [(c.country, c.count, c.percentage) for c in record.country_distribution],
            columns=["Pays", "Commentaires", "Pourcentage"],
        )

    tables["performance"] = build_performance_table(record)

    stats = record.article_stats
    if stats:
        tables["articles"] = pd.DataFrame(
            [
                ("Articles", stats.article_count),
                ("Prix minimum", stats.min_price),
                ("Prix maximum", stats.max_price),
                ("Prix moyen", stats.average_price),
                ("Valeur totale", stats.total_listed_value),
                ("Chiffre d'affaires estimé", stats.estimated_revenue),
                ("Marques", ", ".join(stats.brands)),
            ],
            columns=["Métrique", "Valeur"],
        )

    if record.review_events:
        tables["reviews"] = pd.DataFrame(
            [(e.reviewer, e.relative_time_text, e.comment_text) for e in record.review_events],
            columns=["Utilisateur", "Date", "Commentaire"],
        )

    return tables


def render_html_report(record: EnrichedProfileRecord) -> str:
    """Standalone HTML document with the title and every export table"""
    sections = [
        f"<h2>{html.escape(TABLE_TITLES[key])}</h2>\n{table.to_html(index=False, border=0)}"
        for key, table in build_report_tables(record).items()
    ]
    title = html.escape(f"{REPORT_TITLE} - {record.shop_name}")
    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"fr\">\n"
        f"<head><meta charset=\"utf-8\"><title>{title}</title></head>\n"
        "<body>\n"
        f"<h1>{title}</h1>\n"
        f"<p>Analyse du {record.analyzed_at:%d/%m/%Y %H:%M}</p>\n"
        + "\n".join(sections)
        + "\n</body>\n</html>\n"
    )
