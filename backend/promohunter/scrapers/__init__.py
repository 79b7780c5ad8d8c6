"""Scraper system for extracting offers from marketplace result pages.

This package provides:
- The Offer record shared by all extraction strategies
- Card-markup and embedded-state extractors
- Permalink/price normalization and fetch-with-retry utilities
- The sequential multi-page orchestrator
"""

from .base import Offer
from .scraper_service import OfferScraper, scrape_offers

__all__ = [
    # Data structures
    "Offer",
    # Orchestration
    "OfferScraper",
    "scrape_offers",
]
