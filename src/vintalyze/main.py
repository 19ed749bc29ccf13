"""
Analysis Orchestrator
Coordinates parse → enrich for one profile, or two profiles side by side
"""
import logging
from datetime import datetime
from typing import Dict, NamedTuple, Optional

import pandas as pd

from . import config
from .classify import LanguageClassifier
from .compare import merge_timelines
from .metrics import enrich
from .models import EnrichedProfileRecord
from .parser import ProfileParser

logger = logging.getLogger(__name__)


class Comparison(NamedTuple):
    first: EnrichedProfileRecord
    second: EnrichedProfileRecord
    timeline: pd.DataFrame


# =========================
# Analyzer
# =========================
class ProfileAnalyzer:
    """Runs the full analysis of pasted profile text"""

    def __init__(
        self,
        debug: bool = False,
        sales_convention: Optional[str] = None,
        timeline_mode: Optional[str] = None,
        window_months: int = config.TRAILING_WINDOW_MONTHS,
        weights: Optional[Dict[str, float]] = None,
        parser: Optional[ProfileParser] = None,
        classifier: Optional[LanguageClassifier] = None,
    ):
        """
        Initialize analyzer

        Args:
            debug: Enable debug logging
            sales_convention: "point" or "band" (uses config if None)
            timeline_mode: "adaptive" or "trailing" (uses config if None)
            window_months: Trailing window length
            weights: Performance score weights (uses config if None)
            parser: ProfileParser to use
            classifier: LanguageClassifier to use

        Raises:
            ValueError: If the convention or mode is unknown
        """
        self.debug = debug
        self.sales_convention = config.validate_sales_convention(
            sales_convention or config.SALES_CONVENTION
        )
        self.timeline_mode = config.validate_timeline_mode(
            timeline_mode or config.TIMELINE_MODE
        )
        self.window_months = window_months
        self.weights = weights or config.SCORE_WEIGHTS
        self.parser = parser or ProfileParser()
        self.classifier = classifier or LanguageClassifier()

        if debug:
            logger.setLevel(logging.DEBUG)

    def analyze(self, text: str, now: Optional[datetime] = None) -> EnrichedProfileRecord:
        """
        Parse and enrich one profile

        Args:
            text: Raw copy-paste of the profile page
            now: Reference time (defaults to the current time)

        Returns:
            EnrichedProfileRecord

        Raises:
            MissingRequiredFieldError: If no shop name can be found
        """
        now = now or datetime.now()
        raw = self.parser.parse(text)
        return enrich(
            raw,
            now=now,
            classifier=self.classifier,
            sales_convention=self.sales_convention,
            timeline_mode=self.timeline_mode,
            window_months=self.window_months,
            weights=self.weights,
        )

    def compare(
        self,
        first_text: str,
        second_text: str,
        now: Optional[datetime] = None,
    ) -> Comparison:
        """
        Analyze two profiles independently and join their timelines

        Both analyses share the same reference time so their months line up.
        """
        now = now or datetime.now()
        first = self.analyze(first_text, now=now)
        second = self.analyze(second_text, now=now)
        return Comparison(first, second, merge_timelines(first, second))


def analyze_profile(text: str, now: Optional[datetime] = None) -> EnrichedProfileRecord:
    """Analyze profile text with the default settings"""
    return ProfileAnalyzer().analyze(text, now=now)
