"""Pydantic schemas for the PromoHunter API.

All request/response models are defined here for easy import.
"""

from promohunter.schemas.health import HealthCheckResponse
from promohunter.schemas.offer import OfferResponse, ScrapeRequest, ScrapeResponse

__all__ = [
    # Health
    "HealthCheckResponse",
    # Offers
    "OfferResponse",
    "ScrapeRequest",
    "ScrapeResponse",
]
