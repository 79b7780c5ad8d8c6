"""Pydantic schemas for the scrape endpoint."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

MAX_ITEMS_LOWER = 10
MAX_ITEMS_UPPER = 1000


class ScrapeRequest(BaseModel):
    """Scrape job submitted from the offers tab."""

    urls_text: str = Field(
        ...,
        min_length=1,
        description="Source page URLs, one per line",
        examples=["https://www.mercadolivre.com.br/ofertas"],
    )
    max_items: int = Field(
        300,
        ge=MAX_ITEMS_LOWER,
        le=MAX_ITEMS_UPPER,
        description="Maximum number of offers returned",
    )
    generate_headline: bool = Field(
        False,
        description="Fill empty headlines with the local headline generator",
    )
    min_discount: int = Field(
        0,
        ge=0,
        le=100,
        description="Drop offers whose discount percentage is below this value",
    )


class OfferResponse(BaseModel):
    """A single scraped offer."""

    id: str = ""
    headline: str = ""
    title: str
    price_from: Union[float, str] = ""
    price: Optional[float] = None
    coupon: str = ""
    permalink: str
    image: str = ""
    discount_pct: int = 0


class ScrapeResponse(BaseModel):
    """Scrape endpoint response envelope."""

    status: str = "success"
    data: List[OfferResponse]
    message: str
