"""FastAPI dependency injection providers."""

from promohunter.scrapers.scraper_service import OfferScraper
from promohunter.services.offer_service import OfferService


def get_offer_scraper() -> OfferScraper:
    """Return a scraper configured from settings.

    Each request gets its own instance so dedup state is never shared
    between concurrent scrape jobs.
    """
    return OfferScraper()


def get_offer_service() -> OfferService:
    """Return the scrape job service.

    Usage:
        @router.post("/scrape")
        async def scrape(service: OfferService = Depends(get_offer_service)):
            ...
    """
    return OfferService(get_offer_scraper())
