"""Offer record shared by every extraction strategy.

Extractors build Offer instances; the orchestrator deduplicates them by
permalink and downstream services enrich headline/discount fields.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass
class Offer:
    """Normalized marketplace listing scraped from one results page."""

    title: str
    permalink: str  # Absolute, tracker-free URL; the dedup key
    price: Optional[Decimal] = None
    price_from: Optional[Decimal] = None  # Original ("was") price
    id: str = ""
    image: str = ""
    headline: str = ""
    coupon: str = ""
    discount_pct: int = 0

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.title:
            raise ValueError("title is required")
        if not self.permalink:
            raise ValueError("permalink is required")
        if self.price is not None and self.price < 0:
            raise ValueError("price must be a non-negative Decimal")
        if self.price_from is not None and self.price_from < 0:
            raise ValueError("price_from must be a non-negative Decimal")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the flat shape used by the offers table and exports.

        A missing original price is rendered as an empty string, matching
        what the table and spreadsheet consumers expect.
        """
        return {
            "id": self.id,
            "headline": self.headline,
            "title": self.title,
            "price_from": float(self.price_from) if self.price_from is not None else "",
            "price": float(self.price) if self.price is not None else None,
            "coupon": self.coupon,
            "permalink": self.permalink,
            "image": self.image,
            "discount_pct": self.discount_pct,
        }
