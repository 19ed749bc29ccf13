"""
Central configuration for Vintalyze
Handles environment overrides, keyword tables, scoring weights and logging
"""
import os
import logging.config
from typing import Dict, List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =========================
# Platform Settings
# =========================
# Reviews signed by the platform itself are automated messages, not sales
PLATFORM_NAME = os.getenv("VINTALYZE_PLATFORM_NAME", "Vinted")

# Upper bound on pasted text; longer input is truncated before parsing
MAX_INPUT_CHARS = int(os.getenv("VINTALYZE_MAX_INPUT_CHARS", "500000"))

PARSE_ERROR_MESSAGE = (
    "Erreur lors de l'analyse du profil. Assurez-vous d'avoir copié tout le "
    "contenu de la page du profil Vinted."
)


# =========================
# Estimation Settings
# =========================
class SalesConvention:
    """Valid conventions for the estimated sales range"""
    POINT = "point"  # low = 90% of reviews, high = reviews
    BAND = "band"    # low = 90% of reviews, high = 110% of reviews

    ALL = (POINT, BAND)


class TimelineMode:
    """Valid layouts for the monthly sales timeline"""
    ADAPTIVE = "adaptive"  # earliest to latest review month
    TRAILING = "trailing"  # fixed window ending on the current month

    ALL = (ADAPTIVE, TRAILING)


SALES_CONVENTION = os.getenv("VINTALYZE_SALES_CONVENTION", SalesConvention.POINT)
TIMELINE_MODE = os.getenv("VINTALYZE_TIMELINE_MODE", TimelineMode.ADAPTIVE)
TRAILING_WINDOW_MONTHS = 12


# =========================
# Performance Score
# =========================
SCORE_WEIGHTS: Dict[str, float] = {
    "rating": 0.30,
    "sales": 0.30,
    "engagement": 0.20,
    "consistency": 0.20,
}

# Score used when a component cannot be computed (no followers, flat zero series)
NEUTRAL_SCORE = 50

# Sales volume that maps to a full sales score (log scale)
SALES_SCORE_CEILING = 1000

MAX_RATING = 5
MIN_RATING = 0


# =========================
# Language / Country Classification
# =========================
INTERNATIONAL_LABEL = "International"

# Language used when a comment hits no keyword at all (None = International)
FALLBACK_LANGUAGE: Optional[str] = os.getenv("VINTALYZE_FALLBACK_LANGUAGE") or None

# Order matters: on equal non-zero scores the first language wins
LANGUAGE_KEYWORDS: Dict[str, List[str]] = {
    "fr": [
        "merci", "parfait", "parfaite", "très", "rapide", "envoi", "conforme",
        "je recommande", "bien reçu", "vendeuse", "vendeur", "colis",
        "impeccable", "nickel", "super", "article", "bonne", "au top",
    ],
    "en": [
        "thanks", "thank you", "perfect", "great", "fast", "shipping",
        "recommend", "lovely", "seller", "as described", "arrived", "item",
        "good", "very", "nice",
    ],
    "es": [
        "gracias", "perfecto", "perfecta", "muy", "rápido", "rapido",
        "vendedora", "todo", "genial", "recomiendo", "llegó", "envío",
    ],
    "it": [
        "grazie", "perfetto", "perfetta", "molto", "veloce", "venditrice",
        "venditore", "tutto", "consiglio", "arrivato", "spedizione", "ottimo",
    ],
    "de": [
        "danke", "sehr", "schnell", "alles", "verkäuferin", "verkäufer",
        "wie beschrieben", "gerne", "versand", "angekommen", "toll",
    ],
    "nl": [
        "bedankt", "dank je", "heel", "snel", "verkoper", "verkoopster",
        "prima", "mooi", "netjes", "aangekomen", "verzending",
    ],
    "pt": [
        "obrigado", "obrigada", "perfeito", "muito", "recomendo", "chegou",
        "ótimo", "adorei",
    ],
}

LANGUAGE_COUNTRY_MAP: Dict[str, str] = {
    "fr": "France",
    "en": "Royaume-Uni",
    "es": "Espagne",
    "it": "Italie",
    "de": "Allemagne",
    "nl": "Pays-Bas",
    "pt": "Portugal",
}


# =========================
# Location Normalization
# =========================
# Substring match (case-insensitive) replaces the captured location
KNOWN_COUNTRIES: List[str] = [
    "France",
    "Belgique",
    "Espagne",
    "Italie",
    "Allemagne",
    "Pays-Bas",
    "Luxembourg",
    "Portugal",
    "Autriche",
    "Pologne",
    "Lituanie",
    "République tchèque",
    "Slovaquie",
    "Hongrie",
    "Roumanie",
    "Suède",
    "Finlande",
    "Danemark",
    "Croatie",
    "Grèce",
    "Irlande",
    "Royaume-Uni",
    "États-Unis",
]


# =========================
# Logging Configuration
# =========================
LOG_LEVEL = os.getenv("VINTALYZE_LOG_LEVEL", "INFO").upper()

LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": LOG_LEVEL,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "vintalyze": {
            "level": "DEBUG",
            "handlers": ["console"],
            "propagate": False,
        }
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
}


def setup_logging(debug: bool = False):
    """
    Apply LOG_CONFIG

    Args:
        debug: Lower the console handler to DEBUG and use the detailed format
    """
    log_config = {
        **LOG_CONFIG,
        "handlers": {
            name: dict(handler) for name, handler in LOG_CONFIG["handlers"].items()
        },
    }
    if debug:
        log_config["handlers"]["console"]["level"] = "DEBUG"
        log_config["handlers"]["console"]["formatter"] = "detailed"
    logging.config.dictConfig(log_config)


# =========================
# Validation Helpers
# =========================
def validate_sales_convention(convention: str) -> str:
    """
    Check a sales convention name

    Raises:
        ValueError: If the convention is unknown
    """
    if convention not in SalesConvention.ALL:
        raise ValueError(
            f"Unknown sales convention '{convention}'. "
            f"Choose from: {', '.join(SalesConvention.ALL)}"
        )
    return convention


def validate_timeline_mode(mode: str) -> str:
    """
    Check a timeline mode name

    Raises:
        ValueError: If the mode is unknown
    """
    if mode not in TimelineMode.ALL:
        raise ValueError(
            f"Unknown timeline mode '{mode}'. "
            f"Choose from: {', '.join(TimelineMode.ALL)}"
        )
    return mode


# =========================
# Environment Info
# =========================
def print_config_summary():
    """Print configuration summary for debugging"""
    print("=" * 60)
    print("Vintalyze Configuration")
    print("=" * 60)
    print(f"Platform: {PLATFORM_NAME}")
    print(f"Max Input Characters: {MAX_INPUT_CHARS:,}")
    print(f"Sales Convention: {SALES_CONVENTION}")
    print(f"Timeline Mode: {TIMELINE_MODE}")
    print(f"Fallback Language: {FALLBACK_LANGUAGE or INTERNATIONAL_LABEL}")
    print("\nScore Weights:")
    for name, weight in SCORE_WEIGHTS.items():
        print(f"  {name.capitalize()}: {weight:.2f}")
    print(f"\nLanguages: {', '.join(LANGUAGE_KEYWORDS)}")
    print(f"Known Countries: {len(KNOWN_COUNTRIES)}")
    print("=" * 60)


if __name__ == "__main__":
    print_config_summary()
