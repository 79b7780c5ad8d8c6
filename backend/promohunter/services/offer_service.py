"""Scrape job service.

Bridges the scrape request coming from the offers tab and the scraper:
parses the URL list, runs the scrape, then computes discounts, applies the
minimum-discount filter and optionally fills headlines.
"""

from dataclasses import dataclass
from typing import List

import structlog

from promohunter.core.exceptions import PromoHunterException
from promohunter.scrapers.base import Offer
from promohunter.scrapers.scraper_service import OfferScraper
from promohunter.scrapers.utils.normalizer import PriceNormalizer
from promohunter.schemas.offer import ScrapeRequest
from promohunter.services.headline import generate_headline

logger = structlog.get_logger(__name__)

NO_RESULTS_MESSAGE = "Nenhum item encontrado com seus critérios."
NO_URLS_MESSAGE = "Forneça pelo menos uma URL."


class EmptySourceListError(PromoHunterException):
    """Raised when a scrape request contains no usable URL."""

    def __init__(self):
        super().__init__(NO_URLS_MESSAGE)


@dataclass
class ScrapeResult:
    """Outcome of a scrape job."""

    offers: List[Offer]
    message: str


def parse_source_urls(text: str) -> List[str]:
    """Split a textarea value into URLs: one per line, blanks dropped."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class OfferService:
    """Runs scrape jobs and post-processes their offers."""

    def __init__(self, scraper: OfferScraper):
        self.scraper = scraper
        self.logger = logger.bind(service="offer_service")

    async def run(self, request: ScrapeRequest) -> ScrapeResult:
        """Execute a scrape job.

        Args:
            request: Validated scrape request

        Returns:
            ScrapeResult with the surviving offers and a user-facing message

        Raises:
            EmptySourceListError: If the request holds no URL
        """
        urls = parse_source_urls(request.urls_text)
        if not urls:
            raise EmptySourceListError()

        self.logger.info(
            "scrape_job_started",
            sources=len(urls),
            max_items=request.max_items,
            min_discount=request.min_discount,
        )

        offers = await self.scraper.scrape(urls, request.max_items)
        offers = self.process_offers(
            offers,
            min_discount=request.min_discount,
            with_headlines=request.generate_headline,
        )

        if not offers:
            return ScrapeResult(offers=[], message=NO_RESULTS_MESSAGE)
        return ScrapeResult(
            offers=offers,
            message=f"Foram raspados {len(offers)} itens com sucesso.",
        )

    @staticmethod
    def process_offers(
        offers: List[Offer],
        min_discount: int = 0,
        with_headlines: bool = False,
    ) -> List[Offer]:
        """Compute discounts, filter by minimum discount and fill headlines.

        Args:
            offers: Offers as returned by the scraper (modified in place)
            min_discount: Minimum discount percentage; 0 keeps everything
            with_headlines: Generate headlines for offers that have none

        Returns:
            The surviving offers, order preserved
        """
        for offer in offers:
            offer.discount_pct = PriceNormalizer.discount_percentage(offer.price_from, offer.price)

        if min_discount > 0:
            offers = [offer for offer in offers if offer.discount_pct >= min_discount]

        if with_headlines:
            for offer in offers:
                if not offer.headline:
                    offer.headline = generate_headline(offer.title, offer.price_from, offer.price)

        return offers
