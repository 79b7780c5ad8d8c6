"""Business services layered on top of the scraper."""

from promohunter.services.headline import generate_headline
from promohunter.services.offer_service import (
    EmptySourceListError,
    OfferService,
    ScrapeResult,
    parse_source_urls,
)

__all__ = [
    "generate_headline",
    "EmptySourceListError",
    "OfferService",
    "ScrapeResult",
    "parse_source_urls",
]
