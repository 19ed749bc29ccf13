"""
Profile text parser
Turns the copy-pasted text of a seller profile page into a RawProfileRecord
"""
import logging
import re
from typing import Any, Callable, List, Optional, Sequence, Tuple

from . import config
from .models import Article, RawProfileRecord, ReviewEvent

logger = logging.getLogger(__name__)

Extractor = Callable[[str], Optional[Any]]


# =========================
# Custom Exceptions
# =========================
class ParseError(Exception):
    """Base exception for profile parsing errors"""

    reason = "parse-error"

    def __init__(self, message: str = config.PARSE_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


class MissingRequiredFieldError(ParseError):
    """Raised when the shop name cannot be located"""

    reason = "missing-required-field"

    def __init__(self, field: str = "shop_name", message: str = config.PARSE_ERROR_MESSAGE):
        super().__init__(message)
        self.field = field


# =========================
# Patterns
# =========================
# Counts as displayed on the page: "42", "1 234", "1.234", "1,2k", "3M"
_COUNT = r"(\d+(?:[ .,]\d{3})*(?:[.,]\d+)?[ ]?[kKM]?)"

# Exact "Boutique: <name>" label at the start of a line
_SHOP_LABEL_RX = re.compile(r"^[ \t]*Boutique:[ \t]*(\S+)", re.MULTILINE)
# Token at line start followed by the "À propos"/"About" marker
_SHOP_MARKER_RX = re.compile(
    r"^[ \t]*(\S+)\s*(?:[ÀA] propos|About)(?!\w)",
    re.MULTILINE,
)
# "À propos :" closing a line; the next line is its value, not a shop name
_MARKER_LABEL_END_RX = re.compile(r"(?:[ÀA] propos|About)[ \t]*:[ \t]*$", re.IGNORECASE)

_FOLLOWERS_NEXT_LINE_RX = re.compile(
    rf"(?<![\d.,]){_COUNT}[ \t]*\n[ \t]*(?:Abonnés|Followers)(?!\w)", re.IGNORECASE
)
_FOLLOWERS_SAME_LINE_RX = re.compile(
    rf"(?<![\d.,]){_COUNT}[ \t]+(?:Abonnés|Followers)(?!\w)", re.IGNORECASE
)
_FOLLOWING_NEXT_LINE_RX = re.compile(
    rf"(?<![\d.,]){_COUNT}[ \t]*\n[ \t]*(?:Abonnements?|Following)(?!\w)", re.IGNORECASE
)
_FOLLOWING_SAME_LINE_RX = re.compile(
    rf"(?<![\d.,]){_COUNT}[ \t]+(?:Abonnements?|Following)(?!\w)", re.IGNORECASE
)

_LOCATION_RX = re.compile(r"(?:[ÀA] propos|About)[ \t]*:[ \t]*([^\n]+)", re.IGNORECASE)

_RATING_RX = re.compile(
    r"(?<![\d.,])(\d+(?:[.,]\d+)?)[ \t]*\n\s*\((\d+(?:[ .,]\d{3})*)\)"
)

_REVIEW_FR_RX = re.compile(
    r"^(?P<reviewer>\S+)\s+il\s+y\s+a\s+(?P<when>(?:\d+|une?)\s+\w+)"
    r"(?:[\s:,.!-]+(?P<comment>.*))?$",
    re.IGNORECASE,
)
# Any other wording after "il y a" ("quelques jours"); kept as the time text
_REVIEW_FR_LOOSE_RX = re.compile(
    r"^(?P<reviewer>\S+)\s+il\s+y\s+a\s+(?P<when>.*?\S)[\s:,.!-]*$",
    re.IGNORECASE,
)
_REVIEW_EN_RX = re.compile(
    r"^(?P<reviewer>\S+)\s+(?P<when>\w+(?:\s+\w+){0,2}?)\s+ago(?!\w)[\s:,.!-]*(?P<comment>.*)$",
    re.IGNORECASE,
)
_REVIEW_HEADER_RXS = (_REVIEW_FR_RX, _REVIEW_FR_LOOSE_RX, _REVIEW_EN_RX)

_PRICE_RX = re.compile(
    r"(?:prix|price)\s*:\s*(\d+(?:[ .]\d{3})*(?:[.,]\d{1,2})?)\s*€", re.IGNORECASE
)
_BRAND_RX = re.compile(r"(?:marque|brand)\s*:\s*([^,\n]+?)\s*(?:,|$)", re.IGNORECASE | re.MULTILINE)


# =========================
# Value Helpers
# =========================
def parse_count(text: str) -> Optional[int]:
    """
    Parse a displayed count into an integer

    Handles thousands separators ("1 234", "1.234", "1,234") and k/M
    suffixes ("1,2k" -> 1200, "3M" -> 3000000).

    Returns None if text is empty or unparseable.
    """
    if not text or not isinstance(text, str):
        return None

    text = text.strip().replace(" ", "")
    multipliers = {"K": 1_000, "M": 1_000_000}

    match = re.match(r"^(\d+(?:[.,]\d+)?)([kKM])$", text)
    if match:
        number = float(match.group(1).replace(",", "."))
        return int(round(number * multipliers[match.group(2).upper()]))

    match = re.match(r"^\d+(?:[.,]\d{3})*$", text)
    if match:
        return int(re.sub(r"[.,]", "", text))

    return None


def parse_decimal(text: str) -> Optional[float]:
    """Parse "4.8", "4,8" or "1 250,50" into a float"""
    if not text:
        return None
    cleaned = text.strip().replace(" ", "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def normalize_location(location: str, countries: Sequence[str] = None) -> str:
    """Replace a location by the known country it mentions, if any"""
    countries = countries if countries is not None else config.KNOWN_COUNTRIES
    lowered = location.lower()
    for country in countries:
        if country.lower() in lowered:
            return country
    return location.strip()


def _first_match(extractors: Sequence[Extractor], text: str) -> Optional[Any]:
    """Run extractors in order; the first non-None result wins"""
    for extractor in extractors:
        value = extractor(text)
        if value is not None:
            return value
    return None


def _regex_group(rx: re.Pattern, convert: Callable[[str], Any] = str.strip) -> Extractor:
    """Build an extractor returning group 1 of the first match, converted"""
    def extract(text: str) -> Optional[Any]:
        m = rx.search(text)
        if not m:
            return None
        return convert(m.group(1))
    return extract


# =========================
# Field Extractors
# =========================
def extract_shop_marker(text: str) -> Optional[str]:
    """First token placed before an "À propos"/"About" marker"""
    for m in _SHOP_MARKER_RX.finditer(text):
        before = text[:m.start(1)].rstrip(" \t")
        previous_line = before[:-1].rsplit("\n", 1)[-1] if before.endswith("\n") else ""
        if _MARKER_LABEL_END_RX.search(previous_line):
            logger.debug(f"Skipping location value '{m.group(1)}' as shop name")
            continue
        return m.group(1)
    return None


SHOP_NAME_EXTRACTORS: List[Extractor] = [
    _regex_group(_SHOP_LABEL_RX),
    extract_shop_marker,
]

FOLLOWER_EXTRACTORS: List[Extractor] = [
    _regex_group(_FOLLOWERS_NEXT_LINE_RX, parse_count),
    _regex_group(_FOLLOWERS_SAME_LINE_RX, parse_count),
]

FOLLOWING_EXTRACTORS: List[Extractor] = [
    _regex_group(_FOLLOWING_NEXT_LINE_RX, parse_count),
    _regex_group(_FOLLOWING_SAME_LINE_RX, parse_count),
]

LOCATION_EXTRACTORS: List[Extractor] = [
    _regex_group(_LOCATION_RX),
]


def extract_rating(text: str) -> Optional[Tuple[float, int]]:
    """First "<rating>\\n(<count>)" pair with a rating on the 0-5 scale"""
    for m in _RATING_RX.finditer(text):
        rating = parse_decimal(m.group(1))
        count = parse_count(m.group(2))
        if rating is None or count is None:
            continue
        if config.MIN_RATING <= rating <= config.MAX_RATING:
            return rating, count
    return None


RATING_EXTRACTORS: List[Extractor] = [extract_rating]


def match_review_header(line: str) -> Optional[re.Match]:
    """Match a "<reviewer> il y a <n> <unit>" / "<reviewer> <n> <unit> ago" line"""
    for rx in _REVIEW_HEADER_RXS:
        m = rx.match(line)
        if m:
            return m
    return None


def _reply_marker_rx(shop_name: str) -> re.Pattern:
    # "MyShop", "MyShop :" or "Réponse de MyShop" on a line of its own
    return re.compile(
        rf"^(?:(?:Réponse|Reply)\s+(?:de|du vendeur|from)\s+)?{re.escape(shop_name)}\s*:?$",
        re.IGNORECASE,
    )


def extract_review_events(
    text: str,
    excluded_reviewers: Sequence[str] = (),
    replied_by: Optional[str] = None,
) -> Tuple[ReviewEvent, ...]:
    """
    Scan lines for review headers

    The comment is whatever follows the time on the header line, plus the
    next line when it is not itself a review header.

    Args:
        text: Profile text
        excluded_reviewers: Names whose reviews are dropped (platform, seller)
        replied_by: Shop whose replies are dropped; a header right under a line
            naming the shop (alone or as "Réponse de <shop>") is a reply

    Returns:
        Review events in page order
    """
    excluded = {name.lower() for name in excluded_reviewers if name}
    reply_rx = _reply_marker_rx(replied_by) if replied_by else None
    lines = [line.strip() for line in text.split("\n")]
    events = []

    for i, line in enumerate(lines):
        m = match_review_header(line)
        if not m:
            continue

        reviewer = m.group("reviewer")
        if reviewer.lower() in excluded:
            logger.debug(f"Skipping review by excluded reviewer '{reviewer}'")
            continue
        if reply_rx and i > 0 and reply_rx.match(lines[i - 1]):
            logger.debug(f"Skipping seller reply under '{lines[i - 1]}'")
            continue

        parts = []
        inline = (m.groupdict().get("comment") or "").strip()
        if inline:
            parts.append(inline)
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        if next_line and not match_review_header(next_line):
            parts.append(next_line)

        events.append(ReviewEvent(
            reviewer=reviewer,
            relative_time_text=" ".join(m.group("when").split()),
            comment_text=" ".join(parts),
        ))

    return tuple(events)


def extract_articles(text: str) -> Tuple[Tuple[Article, ...], Tuple[str, ...]]:
    """
    Collect "prix : N,NN €" / "marque : NAME," listings

    Returns:
        (articles, brands) - brands deduplicated case-insensitively, first
        spelling kept
    """
    articles = []
    brands = []
    seen = set()

    for line in text.split("\n"):
        brand_match = _BRAND_RX.search(line)
        brand = brand_match.group(1).strip() if brand_match else None
        if brand and brand.lower() not in seen:
            seen.add(brand.lower())
            brands.append(brand)

        price_match = _PRICE_RX.search(line)
        if price_match:
            price = parse_decimal(price_match.group(1))
            if price is not None:
                articles.append(Article(price=price, brand=brand))

    return tuple(articles), tuple(brands)


# =========================
# Parser
# =========================
class ProfileParser:
    """
    Heuristic parser for pasted profile pages

    Every optional field is extracted independently; only a missing shop
    name aborts the parse.
    """

    def __init__(
        self,
        platform_name: Optional[str] = None,
        max_input_chars: Optional[int] = None,
        known_countries: Optional[Sequence[str]] = None,
    ):
        """
        Initialize parser

        Args:
            platform_name: Automated reviewer name to ignore (uses config if None)
            max_input_chars: Truncate longer input (uses config if None)
            known_countries: Country names for location normalization
        """
        self.platform_name = platform_name or config.PLATFORM_NAME
        self.max_input_chars = max_input_chars or config.MAX_INPUT_CHARS
        self.known_countries = (
            known_countries if known_countries is not None else config.KNOWN_COUNTRIES
        )

    def _prepare(self, text: str) -> str:
        text = text or ""
        if len(text) > self.max_input_chars:
            logger.warning(
                f"Input has {len(text):,} characters, truncating to {self.max_input_chars:,}"
            )
            text = text[:self.max_input_chars]
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.replace("\xa0", " ").replace("\u202f", " ")

    def parse(self, text: str) -> RawProfileRecord:
        """
        Parse profile text

        Args:
            text: Raw copy-paste of the profile page

        Returns:
            RawProfileRecord

        Raises:
            MissingRequiredFieldError: If no shop name can be found
        """
        text = self._prepare(text)

        shop_name = _first_match(SHOP_NAME_EXTRACTORS, text)
        if not shop_name:
            logger.info("Shop name not found, aborting parse")
            raise MissingRequiredFieldError("shop_name")

        follower_count = _first_match(FOLLOWER_EXTRACTORS, text)
        following_count = _first_match(FOLLOWING_EXTRACTORS, text)

        location = _first_match(LOCATION_EXTRACTORS, text)
        if location:
            location = normalize_location(location, self.known_countries)

        rating, review_count = _first_match(RATING_EXTRACTORS, text) or (None, None)

        review_events = extract_review_events(
            text,
            excluded_reviewers=(self.platform_name, shop_name),
            replied_by=shop_name,
        )
        articles, brands = extract_articles(text)

        record = RawProfileRecord(
            shop_name=shop_name,
            follower_count=follower_count,
            following_count=following_count or 0,
            location=location or None,
            rating=rating,
            review_count=review_count,
            articles=articles,
            brands=brands,
            review_events=review_events,
        )
        logger.debug(
            f"Parsed '{shop_name}': {len(review_events)} reviews, "
            f"{len(articles)} articles"
        )
        return record


def parse_profile(text: str) -> RawProfileRecord:
    """Parse profile text with the default settings"""
    return ProfileParser().parse(text)
