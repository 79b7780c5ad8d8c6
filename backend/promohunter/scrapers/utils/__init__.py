"""Scraper utilities for fetching, request headers, and data normalization."""

from .user_agents import (
    build_browser_headers,
    get_random_user_agent,
    USER_AGENTS,
)
from .normalizer import (
    PriceNormalizer,
    normalize_permalink,
    resolve_url,
    strip_fragment,
    TRACKING_PARAMS,
)
from .retry import fetch_with_retry


__all__ = [
    # Request headers
    "build_browser_headers",
    "get_random_user_agent",
    "USER_AGENTS",
    # Normalization
    "PriceNormalizer",
    "normalize_permalink",
    "resolve_url",
    "strip_fragment",
    "TRACKING_PARAMS",
    # Fetching
    "fetch_with_retry",
]
