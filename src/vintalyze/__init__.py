"""
Vintalyze - Seller profile analytics from pasted page text

A small pipeline for:
1. Parsing the copy-paste of a Vinted profile page (shop, followers, rating, reviews)
2. Dating reviews and building a monthly sales timeline
3. Inferring review origin countries from comment language
4. Scoring seller performance and forecasting next month

Usage:
    from vintalyze import analyze_profile
    from vintalyze.main import ProfileAnalyzer
    from vintalyze.report import build_report_tables, render_html_report
"""

__version__ = "1.0.0"

# Make key modules available at package level
from . import config
from .main import ProfileAnalyzer, analyze_profile
from .parser import ParseError, MissingRequiredFieldError, parse_profile
from .metrics import enrich

__all__ = [
    "config",
    "__version__",
    "ProfileAnalyzer",
    "analyze_profile",
    "parse_profile",
    "enrich",
    "ParseError",
    "MissingRequiredFieldError",
]
