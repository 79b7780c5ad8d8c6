"""Scrape orchestration.

Walks a list of source pages one at a time, extracts offers from each page
(card markup first, embedded state as fallback) and merges them into a
single deduplicated, capped result set.
"""

import asyncio
import random
import time
from typing import Callable, List, Optional, Set

import httpx
import structlog

from promohunter.config import settings
from promohunter.core.exceptions import ScraperError
from promohunter.scrapers.base import Offer
from promohunter.scrapers.extractors.dom import extract_from_dom
from promohunter.scrapers.extractors.embedded_state import extract_from_embedded_state
from promohunter.scrapers.utils.normalizer import strip_fragment
from promohunter.scrapers.utils.retry import SleepFunc, fetch_with_retry


logger = structlog.get_logger(__name__)

# Failures that only cost us one source page
SOURCE_ERRORS = (ScraperError, httpx.HTTPError, httpx.InvalidURL)


class OfferScraper:
    """Sequential multi-page offer scraper.

    Sources are fetched strictly one after another with a politeness delay
    in between. After every source has been processed the deduplicated
    collection is shuffled and truncated to ``max_items``, so the result is
    a fair sample across all sources rather than a prefix of the first ones.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        backoff_base: Optional[float] = None,
        politeness_delay: Optional[float] = None,
        time_budget: Optional[float] = None,
        sleep: SleepFunc = asyncio.sleep,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the scraper.

        Args:
            client: Shared httpx client (a per-run client is created if omitted)
            max_retries: Fetch attempts per source
            backoff_base: Retry backoff unit in seconds
            politeness_delay: Seconds to wait between source URLs
            time_budget: Wall-clock seconds after which no new source is fetched;
                0 or None disables the budget
            sleep: Awaitable delay primitive (injectable for tests)
            rng: Random source used for the final shuffle
            clock: Monotonic clock used for the time budget
        """
        self.client = client
        self.max_retries = max_retries if max_retries is not None else settings.SCRAPER_MAX_RETRIES
        self.backoff_base = (
            backoff_base if backoff_base is not None else settings.SCRAPER_BACKOFF_BASE
        )
        self.politeness_delay = (
            politeness_delay if politeness_delay is not None else settings.SCRAPER_POLITENESS_DELAY
        )
        self.time_budget = (
            time_budget if time_budget is not None else settings.SCRAPER_TIME_BUDGET_SECONDS
        )
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.clock = clock
        self.logger = logger.bind(service="offer_scraper")

    async def scrape(self, source_urls: List[str], max_items: int) -> List[Offer]:
        """Scrape every source URL and return at most ``max_items`` offers.

        Args:
            source_urls: Result/offer page URLs, processed in order
            max_items: Maximum number of offers returned

        Returns:
            Randomly sampled, permalink-deduplicated offers. Empty if every
            source failed.
        """
        if self.client is not None:
            return await self._scrape_all(self.client, source_urls, max_items)

        async with httpx.AsyncClient(
            timeout=settings.SCRAPER_TIMEOUT, follow_redirects=True
        ) as client:
            return await self._scrape_all(client, source_urls, max_items)

    async def _scrape_all(
        self,
        client: httpx.AsyncClient,
        source_urls: List[str],
        max_items: int,
    ) -> List[Offer]:
        offers: List[Offer] = []
        seen: Set[str] = set()
        started = self.clock()

        for index, raw_url in enumerate(source_urls):
            if index > 0:
                await self.sleep(self.politeness_delay)

            if self.time_budget and self.clock() - started >= self.time_budget:
                self.logger.warning(
                    "scrape_time_budget_exhausted",
                    processed=index,
                    remaining=len(source_urls) - index,
                    collected=len(offers),
                )
                break

            page_offers = await self._scrape_source(client, raw_url)

            added = 0
            for offer in page_offers:
                if offer.permalink in seen:
                    continue
                seen.add(offer.permalink)
                offers.append(offer)
                added += 1

            self.logger.info(
                "source_processed",
                url=raw_url,
                extracted=len(page_offers),
                added=added,
                total=len(offers),
            )

        result = self._sample(offers, max_items)
        self.logger.info(
            "scrape_complete",
            sources=len(source_urls),
            unique_offers=len(offers),
            returned=len(result),
        )
        return result

    async def _scrape_source(self, client: httpx.AsyncClient, raw_url: str) -> List[Offer]:
        """Fetch one source page and extract its offers. Never raises for fetch errors."""
        url = strip_fragment(raw_url)
        self.logger.info("scraping_source", url=url)

        try:
            response = await fetch_with_retry(
                url,
                self.max_retries,
                self.backoff_base,
                client=client,
                sleep=self.sleep,
            )
        except SOURCE_ERRORS as e:
            self.logger.error("source_fetch_failed", url=url, error=str(e))
            return []

        if response.status_code == 404:
            self.logger.warning("source_not_found", url=url)
            return []

        html = response.text
        # Relative links resolve against the final URL after redirects
        base_url = str(response.url)

        offers = extract_from_dom(html, base_url)
        if offers:
            self.logger.debug("dom_offers_found", url=url, count=len(offers))
            return offers

        offers = extract_from_embedded_state(html, base_url)
        self.logger.info("embedded_state_fallback", url=url, count=len(offers))
        return offers

    def _sample(self, offers: List[Offer], max_items: int) -> List[Offer]:
        if max_items <= 0:
            return []
        sampled = list(offers)
        self.rng.shuffle(sampled)
        return sampled[:max_items]


async def scrape_offers(source_urls: List[str], max_items: Optional[int] = None) -> List[Offer]:
    """Convenience entry point using configured defaults."""
    if max_items is None:
        max_items = settings.SCRAPER_DEFAULT_MAX_ITEMS
    return await OfferScraper().scrape(source_urls, max_items)
