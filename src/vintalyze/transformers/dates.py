# src/vintalyze/transformers/dates.py
# relative date parsing
from __future__ import annotations
import logging
import re
import unicodedata
from datetime import datetime, timedelta
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# "<quantity> <unit>" anywhere in the text, French or English wording.
# Quantity is numeric ("3 mois") or an article ("un an", "une semaine", "a day").
_REL_RX = re.compile(
    r"(?i)(?<!\w)(\d+|une?|an?|one)\s+"
    r"(minutes?|heures?|hours?|jours?|days?|semaines?|weeks?|mois|months?|années?|ans?|years?)"
    r"(?!\w)"
)

_UNIT_ALIASES = {
    "minute": "minutes",
    "minutes": "minutes",
    "heure": "hours",
    "heures": "hours",
    "hour": "hours",
    "hours": "hours",
    "jour": "days",
    "jours": "days",
    "day": "days",
    "days": "days",
    "semaine": "weeks",
    "semaines": "weeks",
    "week": "weeks",
    "weeks": "weeks",
    "mois": "months",
    "month": "months",
    "months": "months",
    "an": "years",
    "ans": "years",
    "année": "years",
    "années": "years",
    "year": "years",
    "years": "years",
}

_WORD_QUANTITIES = {"un", "une", "a", "an", "one"}


def _normalize_whitespace(text: str) -> str:
    """Normalize all whitespace characters (including non-breaking spaces) to regular spaces."""
    if not text:
        return text
    text = text.replace('\xa0', ' ')
    text = text.replace('\u202f', ' ')  # Narrow no-break space
    text = unicodedata.normalize('NFKC', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def parse_relative_date(text: str, now: datetime | None = None) -> datetime | None:
    """
    Convert relative timestamps to absolute datetimes:
      - "3 mois" / "il y a 3 mois"
      - "une semaine"
      - "2 ans", "1 année"
      - "5 days ago", "an hour ago"

    Months and years are subtracted on the calendar (Jan 31 minus one month
    is Dec 31, Mar 31 minus one month is the last day of February); shorter
    units are fixed durations.

    Returns None when no quantity/unit pair is found.
    """
    if not text:
        return None

    text = _normalize_whitespace(text)

    m = _REL_RX.search(text)
    if not m:
        logger.debug(f"Unrecognized date expression: {text!r}")
        return None

    qty_str = m.group(1).lower()
    if qty_str in _WORD_QUANTITIES:
        qty = 1
    else:
        qty = int(qty_str)

    unit = _UNIT_ALIASES[m.group(2).lower()]

    now = now or datetime.now()
    if unit in ("months", "years"):
        return now - relativedelta(**{unit: qty})
    return now - timedelta(**{unit: qty})

