"""Browser request headers for marketplace page fetches.

The marketplace serves different markup (or blocks the request) when the
client does not look like a desktop browser, so every fetch carries a
realistic User-Agent and an Accept-Language header.
"""

import random
from typing import Dict, List, Optional

from promohunter.config import settings


# Desktop browsers only; mobile agents get a different page layout
USER_AGENTS: List[str] = [
    # Chrome on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    # Chrome on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    # Firefox on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
    # Edge on Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36 Edg/131.0.0.0",
    # Chrome on Linux
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
]


def get_random_user_agent() -> str:
    """Get a random user-agent string from the pool."""
    return random.choice(USER_AGENTS)


def build_browser_headers(
    user_agent: Optional[str] = None,
    accept_language: Optional[str] = None,
) -> Dict[str, str]:
    """Build the headers sent with every page fetch.

    Args:
        user_agent: Fixed User-Agent, or None to pick one at random
        accept_language: Accept-Language value, defaults to the configured locale

    Returns:
        Header dict for httpx
    """
    return {
        "User-Agent": user_agent or get_random_user_agent(),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": accept_language or settings.SCRAPER_ACCEPT_LANGUAGE,
    }
