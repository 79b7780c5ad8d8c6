"""Data normalization utilities for permalink cleanup and price parsing."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional
from urllib.parse import parse_qsl, urldefrag, urlencode, urljoin, urlsplit, urlunsplit

import structlog

logger = structlog.get_logger(__name__)


# Listing/search tracking parameters that never change which item a URL points at
TRACKING_PARAMS = frozenset(
    [
        "searchVariation",
        "position",
        "search_layout",
        "deal_print_id",
        "tracking_id",
        "reco_backend",
        "reco_client",
        "reco_item_pos",
        "reco_backend_type",
        "reco_id",
        "c_id",
        "c_uid",
        "source",
        "is_advertising",
        "wid",
        "sid",
        "polycard_client",
    ]
)

# Generic analytics/click-id conventions
TRACKING_PARAM_PATTERNS = [
    re.compile(r"^utm_"),
    re.compile(r"^(gclid|fbclid|msclkid|dclid)$"),
    re.compile(r"^mc_(cid|eid)$"),
]

# click.mercadolivre.com.br, click1.mercadolivre.com.br, ...
REDIRECTOR_HOST_RE = re.compile(r"^click\d*\.", re.IGNORECASE)

# Nested redirectors deeper than this are treated as a loop
MAX_REDIRECT_DEPTH = 10


def _is_tracking_param(name: str) -> bool:
    if name in TRACKING_PARAMS:
        return True
    return any(pattern.match(name) for pattern in TRACKING_PARAM_PATTERNS)


def _is_absolute(parts) -> bool:
    return bool(parts.scheme) and bool(parts.netloc)


def _nested_target(parts) -> Optional[str]:
    """Return the wrapped destination of a click-tracking URL, if any."""
    if not parts.hostname or not REDIRECTOR_HOST_RE.match(parts.hostname):
        return None
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key == "url" and value:
            return value
    return None


def normalize_permalink(raw_url: str) -> str:
    """Canonicalize a listing URL.

    Unwraps nested click-tracking redirectors, drops tracking query
    parameters and clears the fragment. Input that cannot be parsed as an
    absolute URL is returned unchanged.

    Args:
        raw_url: URL as found in the page markup or state blob

    Returns:
        Normalized absolute URL
    """
    if not raw_url:
        return raw_url

    try:
        parts = urlsplit(raw_url)
        if not _is_absolute(parts):
            return raw_url

        for _ in range(MAX_REDIRECT_DEPTH):
            target = _nested_target(parts)
            if not target:
                break
            nested = urlsplit(target)
            if not _is_absolute(nested):
                break
            parts = nested

        query = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if not _is_tracking_param(key)
        ]

        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path, urlencode(query, doseq=True), "")
        )
    except ValueError:
        logger.debug("permalink_parse_failed", url=raw_url)
        return raw_url


def resolve_url(base_url: str, ref: str) -> Optional[str]:
    """Resolve a link found on a page against the page URL.

    Returns:
        Absolute URL, or None when the reference is malformed
    """
    try:
        return urljoin(base_url, ref)
    except ValueError:
        logger.debug("url_resolve_failed", base_url=base_url, ref=ref)
        return None


def strip_fragment(url: str) -> str:
    """Remove the client-side fragment from a source URL before fetching."""
    try:
        return urldefrag(url).url
    except ValueError:
        return url


class PriceNormalizer:
    """Price parsing for pt-BR formatted amounts.

    Prices on the marketplace use "." for thousands and "," for decimals,
    e.g. "R$ 1.234,56". All values are returned as Decimal.
    """

    FRACTION_SELECTOR = ".andes-money-amount__fraction"
    CENTS_SELECTOR = ".andes-money-amount__cents"
    AMOUNT_CLASS = "andes-money-amount"

    @staticmethod
    def parse_locale_number(text: Optional[str]) -> Optional[Decimal]:
        """Parse a locale-formatted number.

        Handles formats like:
        - "1.234,56" -> 1234.56
        - "R$ 99,90" -> 99.90
        - "1.299" -> 1299

        Args:
            text: Raw price text

        Returns:
            Decimal value, or None if empty or unparseable
        """
        if not text:
            return None

        # Keep only digits and separators (drops currency symbols and spaces)
        cleaned = re.sub(r"[^\d.,]", "", text)
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
        if not cleaned:
            return None

        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            return None

        if not value.is_finite():
            return None
        return value

    @classmethod
    def parse_money_from_element(cls, element) -> Optional[Decimal]:
        """Parse a price from marketplace money markup.

        Reads the structured fraction/cents sub-parts when present and
        falls back to the element's raw text.

        Args:
            element: BeautifulSoup Tag (or None)

        Returns:
            Decimal price, or None
        """
        if element is None:
            return None

        if cls.AMOUNT_CLASS in (element.get("class") or []):
            target = element
        else:
            target = element.select_one(f".{cls.AMOUNT_CLASS}")
        if target is None:
            return cls.parse_locale_number(element.get_text())

        fraction_elem = target.select_one(cls.FRACTION_SELECTOR)
        cents_elem = target.select_one(cls.CENTS_SELECTOR)
        fraction = fraction_elem.get_text(strip=True) if fraction_elem else ""
        cents = cents_elem.get_text(strip=True) if cents_elem else ""

        if fraction:
            return cls.parse_locale_number(f"{fraction},{cents}" if cents else fraction)
        return cls.parse_locale_number(target.get_text())

    @classmethod
    def to_decimal(cls, value: Any) -> Optional[Decimal]:
        """Convert a JSON state value into a price.

        Numbers are taken as-is, strings go through locale parsing and
        objects are read through their "amount" key.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, dict):
            return cls.to_decimal(value.get("amount"))
        if isinstance(value, (int, float)):
            result = Decimal(str(value))
            return result if result.is_finite() and result >= 0 else None
        if isinstance(value, str):
            return cls.parse_locale_number(value)
        return None

    @staticmethod
    def discount_percentage(
        price_from: Optional[Decimal], price: Optional[Decimal]
    ) -> int:
        """Whole-number discount of price relative to price_from.

        Returns:
            Rounded percentage, or 0 when there is no valid discount context
        """
        if not price_from or not price or price_from <= 0 or price <= 0:
            return 0
        if price > price_from:
            return 0
        pct = ((price_from - price) / price_from * 100).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return max(0, int(pct))
