"""Server-rendered offer card extraction.

The marketplace has shipped several card layouts over time (classic search
results, grid items and "poly" cards) and any page may use any of them, so
each field is read through an ordered chain of selectors where the first
match wins.
"""

import re
from typing import Iterator, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from promohunter.scrapers.base import Offer
from promohunter.scrapers.utils.normalizer import (
    PriceNormalizer,
    normalize_permalink,
    resolve_url,
)


logger = structlog.get_logger(__name__)

CARD_SELECTORS = [
    "div.ui-search-result__wrapper",
    "li.ui-search-layout__item",
    "div.poly-card",
]

TITLE_LINK_SELECTORS = [
    "a.poly-component__title",
    "a.ui-search-link",
    ".poly-component__title-wrapper a",
]

CURRENT_PRICE_SELECTORS = [
    ".poly-price__current .andes-money-amount",
    ".andes-money-amount:not(.andes-money-amount--previous)",
    ".price-tag",
]

PREVIOUS_PRICE_SELECTORS = [
    "s.andes-money-amount--previous",
    ".andes-money-amount--previous",
    ".price-tag--light",
    ".price-tag-strike",
    "s",
]

# MLB1234567 or MLB-1234567 (site prefix + numeric item id)
ITEM_ID_RE = re.compile(r"(ML[A-Z])-?(\d{6,})")


def _first_match(card: Tag, selectors: List[str]) -> Optional[Tag]:
    for selector in selectors:
        elem = card.select_one(selector)
        if elem is not None:
            return elem
    return None


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def _extract_image(card: Tag, base_url: str) -> str:
    img = card.select_one("img")
    if img is None:
        return ""
    # Lazy-loaded images keep the real asset in data-src
    image = img.get("data-src") or img.get("src") or ""
    if not image or image.startswith("data:"):
        return ""
    return resolve_url(base_url, image) or ""


def _extract_item_id(card: Tag, href: str) -> str:
    item_id = card.get("data-id")
    if item_id:
        return str(item_id)
    match = ITEM_ID_RE.search(href)
    if match:
        return f"{match.group(1)}{match.group(2)}"
    return ""


def parse_card(card: Tag, base_url: str) -> Optional[Offer]:
    """Build an Offer from a single card element.

    Args:
        card: Card container element
        base_url: URL of the page, used to resolve relative links

    Returns:
        Offer, or None when the card has no title link
    """
    link = _first_match(card, TITLE_LINK_SELECTORS)
    if link is None:
        return None

    href = link.get("href") or ""
    title = _clean_text(link.get_text())
    if not href or not title:
        return None

    permalink = resolve_url(base_url, href)
    if not permalink:
        logger.debug("card_href_unresolvable", url=base_url, href=href)
        return None

    price = PriceNormalizer.parse_money_from_element(
        _first_match(card, CURRENT_PRICE_SELECTORS)
    )
    price_from = PriceNormalizer.parse_money_from_element(
        _first_match(card, PREVIOUS_PRICE_SELECTORS)
    )

    return Offer(
        id=_extract_item_id(card, href),
        title=title,
        price=price,
        price_from=price_from,
        permalink=normalize_permalink(permalink),
        image=_extract_image(card, base_url),
    )


def iter_dom_offers(html: str, base_url: str) -> Iterator[Offer]:
    """Yield offers for every parseable card on the page, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    cards = soup.select(", ".join(CARD_SELECTORS))
    logger.debug("dom_cards_found", url=base_url, count=len(cards))

    # Grid items wrap a poly-card; only the outermost container is parsed
    card_ids = {id(card) for card in cards}
    for card in cards:
        if any(id(parent) in card_ids for parent in card.parents):
            continue
        offer = parse_card(card, base_url)
        if offer is not None:
            yield offer


def extract_from_dom(html: str, base_url: str) -> List[Offer]:
    """Extract offers from server-rendered card markup."""
    return list(iter_dom_offers(html, base_url))
