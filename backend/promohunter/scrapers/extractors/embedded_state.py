"""Fallback extraction from the hydration state embedded in the page.

Client-rendered result pages ship no offer cards, only a JSON blob assigned
to ``window.__PRELOADED_STATE__``. Its shape is deep and undocumented, so
offers are found structurally: any object carrying both a permalink and a
title is treated as one.
"""

import json
import re
from typing import Any, Dict, Iterator, List, Optional, Set

import structlog

from promohunter.scrapers.base import Offer
from promohunter.scrapers.extractors.dom import ITEM_ID_RE
from promohunter.scrapers.utils.normalizer import (
    PriceNormalizer,
    normalize_permalink,
    resolve_url,
)


logger = structlog.get_logger(__name__)

PRELOADED_STATE_RE = re.compile(
    r"window\.__PRELOADED_STATE__\s*=\s*({.*?});\s*</script>", re.DOTALL
)

PERMALINK_KEYS = ("permalink",)
TITLE_KEYS = ("title",)
PRICE_KEYS = ("price",)
ORIGINAL_PRICE_KEYS = ("original_price",)
IMAGE_KEYS = ("thumbnail",)

# Deeper nodes are ignored rather than risking RecursionError
MAX_DEPTH = 64


def _first_str(node: Dict[str, Any], keys) -> str:
    for key in keys:
        value = node.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _first_value(node: Dict[str, Any], keys) -> Any:
    for key in keys:
        if node.get(key) is not None:
            return node[key]
    return None


def load_state(html: str) -> Optional[Any]:
    """Locate and decode the embedded state blob.

    Returns:
        Parsed JSON value, or None when the page has no blob or it is malformed
    """
    match = PRELOADED_STATE_RE.search(html)
    if not match:
        return None

    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning("embedded_state_parse_failed", error=str(e))
        return None


def iter_offer_nodes(node: Any, depth: int = 0) -> Iterator[Dict[str, Any]]:
    """Depth-first walk yielding every offer-shaped object.

    Object values are visited in key order, then array elements in index
    order. A matching node is yielded before its own children.
    """
    if depth > MAX_DEPTH:
        return

    if isinstance(node, dict):
        if _first_str(node, PERMALINK_KEYS) and _first_str(node, TITLE_KEYS):
            yield node
        for value in node.values():
            yield from iter_offer_nodes(value, depth + 1)
    elif isinstance(node, list):
        for item in node:
            yield from iter_offer_nodes(item, depth + 1)


def _node_to_offer(node: Dict[str, Any], base_url: str) -> Optional[Offer]:
    resolved = resolve_url(base_url, _first_str(node, PERMALINK_KEYS))
    if not resolved:
        return None
    permalink = normalize_permalink(resolved)

    image = _first_str(node, IMAGE_KEYS)
    if image.startswith("data:"):
        image = ""
    elif image:
        image = resolve_url(base_url, image) or ""

    item_id = node.get("id")
    if item_id is None or item_id == "":
        match = ITEM_ID_RE.search(permalink)
        item_id = f"{match.group(1)}{match.group(2)}" if match else ""

    return Offer(
        id=str(item_id),
        title=_first_str(node, TITLE_KEYS),
        price=PriceNormalizer.to_decimal(_first_value(node, PRICE_KEYS)),
        price_from=PriceNormalizer.to_decimal(_first_value(node, ORIGINAL_PRICE_KEYS)),
        permalink=permalink,
        image=image,
    )


def extract_from_embedded_state(html: str, base_url: str) -> List[Offer]:
    """Extract offers from the page's embedded state blob.

    Duplicate references to the same item inside the blob (the same listing
    shown in several carousels) are collapsed, keeping the first.

    Args:
        html: Raw page markup
        base_url: URL of the page, used to resolve relative links

    Returns:
        Offers in walk order; empty when the page has no usable blob
    """
    state = load_state(html)
    if state is None:
        return []

    offers: List[Offer] = []
    seen: Set[str] = set()

    for node in iter_offer_nodes(state):
        offer = _node_to_offer(node, base_url)
        if offer is None or offer.permalink in seen:
            continue
        seen.add(offer.permalink)
        offers.append(offer)

    logger.debug("embedded_state_offers_found", url=base_url, count=len(offers))
    return offers
