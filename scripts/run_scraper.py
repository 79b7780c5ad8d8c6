"""Manual scraper runner for testing and debugging source pages.

This script scrapes one or more marketplace result pages and prints the
offers found, the same way the scrape endpoint would return them.

Usage:
    python scripts/run_scraper.py --url https://www.mercadolivre.com.br/ofertas
    python scripts/run_scraper.py --file urls.txt --max-items 50
    python scripts/run_scraper.py --url ... --min-discount 30 --headlines
"""

import asyncio
import argparse
import sys
import os
from decimal import Decimal
from typing import List, Optional

# Add backend to path so we can import promohunter without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from promohunter.config import settings
from promohunter.scrapers.scraper_service import OfferScraper
from promohunter.schemas.offer import MAX_ITEMS_LOWER, MAX_ITEMS_UPPER, ScrapeRequest
from promohunter.services.offer_service import OfferService


async def run_scraper(
    urls: List[str],
    max_items: int,
    min_discount: int = 0,
    headlines: bool = False,
    limit: int = 10,
):
    """Scrape the given URLs and display the results.

    Args:
        urls: Source page URLs
        max_items: Maximum number of offers to keep
        min_discount: Minimum discount percentage filter
        headlines: Generate local headlines
        limit: Maximum number of offers to display (default: 10)
    """
    print(f"\n{'='*70}")
    print(f"  Scraping {len(urls)} source URL(s)")
    print(f"{'='*70}")
    print(f"  📦 Max items: {max_items}")
    if min_discount:
        print(f"  📉 Min discount: {min_discount}%")
    print(f"  📊 Display Limit: {limit}")
    print(f"{'='*70}\n")

    service = OfferService(OfferScraper())
    request = ScrapeRequest(
        urls_text="\n".join(urls),
        max_items=max_items,
        generate_headline=headlines,
        min_discount=min_discount,
    )

    print("🔍 Fetching offers...\n")
    result = await service.run(request)
    offers = result.offers

    print(f"ℹ️  {result.message}\n")
    if not offers:
        return

    print(f"{'='*70}")
    print(f"  Top {min(limit, len(offers))} Offers")
    print(f"{'='*70}\n")

    for i, offer in enumerate(offers[:limit], 1):
        print(f"[{i}] {offer.title}")
        if offer.headline:
            print(f"    📣 Headline: {offer.headline}")
        print(f"    💰 Price: {_format_price(offer.price)}")
        if offer.price_from:
            print(f"    🔖 Original: {_format_price(offer.price_from)}")
        if offer.discount_pct:
            print(f"    📉 Discount: {offer.discount_pct}%")
        if offer.id:
            print(f"    🏷️  ID: {offer.id}")
        print(f"    🔗 URL: {offer.permalink}")
        print()

    print(f"{'='*70}")
    print(f"  Summary")
    print(f"{'='*70}")
    print(f"  Total Offers: {len(offers)}")
    print(f"  Displayed: {min(limit, len(offers))}")

    discounted = [o for o in offers if o.discount_pct]
    if discounted:
        avg_discount = sum(o.discount_pct for o in discounted) / len(discounted)
        print(f"  Avg Discount: {avg_discount:.1f}%")
    print(f"{'='*70}\n")


def _format_price(price: Optional[Decimal]) -> str:
    """Format a price in Brazilian reais (R$ 1.234,56)."""
    if price is None:
        return "-"
    formatted = f"{price:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def _read_urls(args) -> List[str]:
    urls = list(args.url or [])
    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            urls.extend(line.strip() for line in fh if line.strip())
    return urls


def main():
    """Parse arguments and run the scraper."""
    parser = argparse.ArgumentParser(
        description="Scrape marketplace offer pages for testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_scraper.py --url https://www.mercadolivre.com.br/ofertas
  python scripts/run_scraper.py --file urls.txt --max-items 50
  python scripts/run_scraper.py --url ... --min-discount 30 --headlines
        """,
    )

    parser.add_argument(
        "--url",
        action="append",
        help="Source page URL (repeatable)",
    )

    parser.add_argument(
        "--file",
        help="Text file with one source URL per line",
    )

    parser.add_argument(
        "--max-items",
        type=int,
        default=settings.SCRAPER_DEFAULT_MAX_ITEMS,
        help=f"Maximum number of offers to keep (default: {settings.SCRAPER_DEFAULT_MAX_ITEMS})",
    )

    parser.add_argument(
        "--min-discount",
        type=int,
        default=0,
        help="Drop offers below this discount percentage (default: 0)",
    )

    parser.add_argument(
        "--headlines",
        action="store_true",
        help="Generate local headlines for each offer",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of offers to display (default: 10)",
    )

    args = parser.parse_args()

    urls = _read_urls(args)
    if not urls:
        parser.error("provide at least one --url or a --file with URLs")
    if not MAX_ITEMS_LOWER <= args.max_items <= MAX_ITEMS_UPPER:
        parser.error(f"--max-items must be between {MAX_ITEMS_LOWER} and {MAX_ITEMS_UPPER}")
    if not 0 <= args.min_discount <= 100:
        parser.error("--min-discount must be between 0 and 100")

    asyncio.run(
        run_scraper(urls, args.max_items, args.min_discount, args.headlines, args.limit)
    )


if __name__ == "__main__":
    main()
