"""Custom exception classes for the application."""

from typing import Optional


class PromoHunterException(Exception):
    """Base exception for all PromoHunter errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ScraperError(PromoHunterException):
    """Raised when a scraper encounters an error."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Scraper error for {source}: {message}")


class FetchError(ScraperError):
    """Raised when a page fetch ends with a non-successful HTTP status."""

    def __init__(self, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(url, f"HTTP error! status: {status_code}")


class RateLimitError(FetchError):
    """Raised when the target site answers 429 or 503."""

    def __init__(self, url: str, status_code: int = 429):
        super().__init__(url, status_code)
        self.message = f"Rate limit exceeded for {url} (status {status_code})"
        self.args = (self.message,)
