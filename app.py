"""
Vintalyze - Streamlit Dashboard
Seller profile analysis from the pasted text of a Vinted profile page
Supports: Profile View, Comparison View
"""
import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import sys
from pathlib import Path
from typing import Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from vintalyze import config
from vintalyze.compare import compare_profiles
from vintalyze.main import ProfileAnalyzer
from vintalyze.models import EnrichedProfileRecord
from vintalyze.parser import ParseError
from vintalyze.report import render_html_report

# ============================================================================
# CONFIGURATION & THEME
# ============================================================================

BCG_COLORS = {
    "green": "#0B6E4F",
    "dark_green": "#003D32",
    "light_green": "#A7C957",
    "teal": "#1F7A8C",
    "gray": "#5C7C89",
    "light_gray": "#E8ECEF",
    "red": "#D62728",
    "orange": "#FF7F0E",
    "white": "#FFFFFF",
    "text": "#20322F",
    # Dark mode colors
    "dark_bg": "#1a2f38",
    "dark_text": "#E8ECEF",
}

BCG_COLORWAY = [
    BCG_COLORS["green"], BCG_COLORS["teal"], BCG_COLORS["light_green"],
    BCG_COLORS["dark_green"], BCG_COLORS["gray"], BCG_COLORS["orange"]
]

TREND_LABELS = {
    "positive": "En hausse",
    "negative": "En baisse",
    "stable": "Stable",
}

st.set_page_config(
    page_title="Vintalyze",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="expanded"
)


def get_plotly_layout(dark_mode: bool = False) -> dict:
    """Get BCG-styled Plotly layout settings."""
    if dark_mode:
        bg_color = BCG_COLORS["dark_bg"]
        text_color = BCG_COLORS["dark_text"]
        grid_color = "#3a5a6a"
    else:
        bg_color = BCG_COLORS["white"]
        text_color = BCG_COLORS["text"]
        grid_color = BCG_COLORS["light_gray"]

    return dict(
        font=dict(family="Inter, Trebuchet MS, sans-serif", size=12, color=text_color),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        colorway=BCG_COLORWAY,
        margin=dict(l=50, r=30, t=60, b=50),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        xaxis=dict(gridcolor=grid_color, zerolinecolor=grid_color),
        yaxis=dict(gridcolor=grid_color, zerolinecolor=grid_color),
    )


# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================

def init_session_state():
    """Initialize all session state variables."""
    defaults = {
        "dark_mode": False,
        "record": None,
        "comparison": None,
        "sales_convention": config.SALES_CONVENTION,
        "timeline_mode": config.TIMELINE_MODE,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


init_session_state()


def get_analyzer() -> ProfileAnalyzer:
    return ProfileAnalyzer(
        sales_convention=st.session_state.sales_convention,
        timeline_mode=st.session_state.timeline_mode,
    )


# ============================================================================
# VISUALIZATION FUNCTIONS
# ============================================================================

def create_kpi_metrics(record: EnrichedProfileRecord) -> None:
    """Create KPI metric cards."""
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(
            "Ventes estimées",
            f"{record.estimated_sales_low:,} - {record.estimated_sales_high:,}",
        )
    with col2:
        followers = record.follower_count
        st.metric("Abonnés", f"{followers:,}" if followers is not None else "N/A")
    with col3:
        st.metric("Note", f"{record.rating}/5" if record.rating is not None else "N/A")
    with col4:
        st.metric("Score de performance", f"{record.performance_score.total}/100")

    stats = record.performance_stats
    if stats:
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Ventes mensuelles moyennes", f"{stats.avg_monthly_sales:.2f}")
        col2.metric("Meilleur mois", stats.best_month.month_key, delta=f"{stats.best_month.count} ventes")
        col3.metric(
            "Tendance",
            TREND_LABELS[stats.trend.value],
            delta=f"{stats.average_monthly_change:+.2f} / mois",
        )
        col4.metric("Prévision mois prochain", stats.next_month_forecast)


def create_monthly_sales_chart(record: EnrichedProfileRecord, dark_mode: bool = False) -> Optional[go.Figure]:
    """Create the monthly sales bar chart."""
    if not record.monthly_sales:
        return None

    df = pd.DataFrame([m.to_dict() for m in record.monthly_sales])
    fig = px.bar(df, x="month_key", y="count", title="<b>Ventes mensuelles</b>")

    fig.update_layout(**get_plotly_layout(dark_mode))
    fig.update_layout(height=380, xaxis_title="", yaxis_title="Ventes")
    fig.update_traces(marker_color=BCG_COLORS["green"])
    return fig


def create_country_pie(record: EnrichedProfileRecord, dark_mode: bool = False) -> Optional[go.Figure]:
    """Create country distribution pie chart."""
    if not record.country_distribution:
        return None

    fig = go.Figure(data=[go.Pie(
        labels=[c.country for c in record.country_distribution],
        values=[c.count for c in record.country_distribution],
        hole=0.4,
        textinfo="label+percent",
    )])

    fig.update_layout(**get_plotly_layout(dark_mode))
    fig.update_layout(title="<b>Répartition géographique</b>", showlegend=False, height=380)
    return fig


def create_score_breakdown_chart(record: EnrichedProfileRecord, dark_mode: bool = False) -> go.Figure:
    """Create horizontal bar chart of the score components."""
    labels = {
        "rating": "Note",
        "sales": "Ventes",
        "engagement": "Engagement",
        "consistency": "Régularité",
    }
    breakdown = record.performance_score.breakdown.to_dict()
    df = pd.DataFrame({
        "Composante": [labels[k] for k in breakdown],
        "Score": list(breakdown.values()),
    })

    fig = px.bar(
        df,
        x="Score",
        y="Composante",
        orientation="h",
        title="<b>Détail du score</b>",
        color="Score",
        color_continuous_scale=[[0, BCG_COLORS["red"]], [0.5, BCG_COLORS["orange"]], [1, BCG_COLORS["green"]]],
        range_color=[0, 100],
    )
    fig.update_layout(**get_plotly_layout(dark_mode))
    fig.update_layout(height=320, coloraxis_showscale=False, xaxis=dict(range=[0, 100]), yaxis_title="")
    return fig


def create_comparison_chart(timeline: pd.DataFrame, dark_mode: bool = False) -> Optional[go.Figure]:
    """Create the two-shop monthly sales line chart."""
    if timeline.empty:
        return None

    fig = go.Figure()
    for column in timeline.columns:
        fig.add_trace(go.Scatter(x=timeline.index, y=timeline[column], mode="lines+markers", name=column))

    fig.update_layout(**get_plotly_layout(dark_mode))
    fig.update_layout(title="<b>Ventes mensuelles comparées</b>", height=400, yaxis_title="Ventes")
    return fig


# ============================================================================
# SIDEBAR
# ============================================================================

def render_sidebar():
    """Render sidebar with display and estimation settings."""
    st.sidebar.markdown("## Vintalyze")
    st.session_state.dark_mode = st.sidebar.toggle("Dark Mode", value=st.session_state.dark_mode)

    st.sidebar.markdown("---")
    st.sidebar.markdown("### Paramètres")
    st.session_state.sales_convention = st.sidebar.radio(
        "Estimation des ventes",
        config.SalesConvention.ALL,
        index=config.SalesConvention.ALL.index(st.session_state.sales_convention),
        help="point : max = évaluations, band : max = 110 % des évaluations",
    )
    st.session_state.timeline_mode = st.sidebar.radio(
        "Période",
        config.TimelineMode.ALL,
        index=config.TimelineMode.ALL.index(st.session_state.timeline_mode),
        help=f"trailing : {config.TRAILING_WINDOW_MONTHS} derniers mois",
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(
        "Copiez tout le contenu de la page du profil (Ctrl+A, Ctrl+C) puis collez-le ici."
    )


# ============================================================================
# PAGES
# ============================================================================

def page_profile_view():
    """Single profile analysis."""
    dark_mode = st.session_state.dark_mode
    text = st.text_area("Contenu de la page du profil", height=200, key="profile_text")

    if st.button("Analyser", type="primary"):
        try:
            st.session_state.record = get_analyzer().analyze(text)
        except ParseError as e:
            st.session_state.record = None
            st.error(e.message)

    record = st.session_state.record
    if record is None:
        st.info("Collez le contenu d'un profil pour lancer l'analyse.")
        return

    st.markdown(f"### {record.shop_name}")
    if record.location:
        st.caption(record.location)
    create_kpi_metrics(record)

    col1, col2 = st.columns(2)
    with col1:
        fig = create_monthly_sales_chart(record, dark_mode)
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("Aucune évaluation datée.")
    with col2:
        fig = create_country_pie(record, dark_mode)
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("Aucun commentaire à classer.")

    st.plotly_chart(create_score_breakdown_chart(record, dark_mode), use_container_width=True)

    if record.review_events:
        with st.expander(f"Commentaires ({len(record.review_events)})"):
            st.dataframe(pd.DataFrame([e.to_dict() for e in record.review_events]), use_container_width=True)

    st.download_button(
        "Télécharger le rapport (HTML)",
        data=render_html_report(record),
        file_name=f"vintalyze_{record.shop_name}_{record.analyzed_at:%Y%m%d}.html",
        mime="text/html",
    )


def page_comparison_view():
    """Side-by-side comparison of two profiles."""
    dark_mode = st.session_state.dark_mode
    col1, col2 = st.columns(2)
    with col1:
        first_text = st.text_area("Profil 1", height=180, key="first_text")
    with col2:
        second_text = st.text_area("Profil 2", height=180, key="second_text")

    if st.button("Comparer", type="primary"):
        try:
            st.session_state.comparison = get_analyzer().compare(first_text, second_text)
        except ParseError as e:
            st.session_state.comparison = None
            st.error(e.message)

    comparison = st.session_state.comparison
    if comparison is None:
        return

    st.dataframe(
        compare_profiles(comparison.first, comparison.second).astype(str),
        use_container_width=True,
    )
    fig = create_comparison_chart(comparison.timeline, dark_mode)
    if fig:
        st.plotly_chart(fig, use_container_width=True)


def main():
    """Main application entry point."""
    render_sidebar()

    tabs = st.tabs(["Profil", "Comparaison"])
    with tabs[0]:
        page_profile_view()
    with tabs[1]:
        page_comparison_view()


if __name__ == "__main__":
    main()
