"""
Review language classification
Assigns a review comment to a country through a static keyword table
"""
import logging
import re
from typing import Dict, List, Optional, Pattern

from . import config

logger = logging.getLogger(__name__)


def _compile_keywords(keywords: List[str]) -> List[Pattern]:
    # Whole word / phrase match; "perfecto" must not count as "perfect"
    return [
        re.compile(rf"(?<!\w){re.escape(kw.lower())}(?!\w)")
        for kw in keywords
    ]


class LanguageClassifier:
    """
    Keyword-scoring language detector

    Each language scores one point per distinct keyword found in the text
    (case-insensitive). The best score wins; equal non-zero scores go to the
    language listed first. Text with no hit resolves to the fallback
    language if one is configured, otherwise to the International label.
    """

    def __init__(
        self,
        keywords: Optional[Dict[str, List[str]]] = None,
        country_map: Optional[Dict[str, str]] = None,
        fallback_language: Optional[str] = None,
        international_label: Optional[str] = None,
    ):
        """
        Initialize classifier

        Args:
            keywords: language code -> keyword list (uses config if None)
            country_map: language code -> country label (uses config if None)
            fallback_language: Language for texts without any keyword hit
            international_label: Label for unresolved texts
        """
        self.keywords = keywords if keywords is not None else config.LANGUAGE_KEYWORDS
        self.country_map = (
            country_map if country_map is not None else config.LANGUAGE_COUNTRY_MAP
        )
        self.fallback_language = (
            fallback_language if fallback_language is not None
            else config.FALLBACK_LANGUAGE
        )
        self.international_label = international_label or config.INTERNATIONAL_LABEL
        self._patterns = {
            lang: _compile_keywords(words) for lang, words in self.keywords.items()
        }

    def score(self, text: str) -> Dict[str, int]:
        """Keyword hit count per language"""
        if not text:
            return {lang: 0 for lang in self._patterns}
        lowered = text.lower()
        return {
            lang: sum(1 for rx in patterns if rx.search(lowered))
            for lang, patterns in self._patterns.items()
        }

    def detect_language(self, text: str) -> Optional[str]:
        """
        Most likely language code for a text

        Returns:
            Language code, the fallback language, or None when unresolved
        """
        scores = self.score(text)
        best_lang, best_score = None, 0
        for lang, hits in scores.items():
            if hits > best_score:
                best_lang, best_score = lang, hits

        if best_lang is None:
            return self.fallback_language
        return best_lang

    def classify(self, text: str) -> str:
        """
        Country label for a review comment

        Never raises; anything unresolved or unmapped is International.
        """
        lang = self.detect_language(text)
        if lang is None:
            logger.debug(f"Unclassifiable comment, using {self.international_label}: {text!r}")
            return self.international_label

        country = self.country_map.get(lang)
        if country is None:
            logger.debug(f"No country mapped for language '{lang}'")
            return self.international_label
        return country
