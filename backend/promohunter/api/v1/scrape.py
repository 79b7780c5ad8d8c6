"""Scrape endpoint.

Runs a scrape job synchronously within the request and returns the
curated offers. Individual source failures never fail the request; they
only shrink the result.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from promohunter.dependencies import get_offer_service
from promohunter.schemas.offer import OfferResponse, ScrapeRequest, ScrapeResponse
from promohunter.services.offer_service import EmptySourceListError, OfferService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post(
    "",
    response_model=ScrapeResponse,
    summary="Scrape offers from marketplace result pages",
)
async def scrape_offers(
    body: ScrapeRequest,
    service: OfferService = Depends(get_offer_service),
) -> ScrapeResponse:
    """Scrape the submitted URLs and return the matching offers.

    Raises:
        HTTPException: 422 when the URL list is empty after trimming
    """
    try:
        result = await service.run(body)
    except EmptySourceListError as e:
        raise HTTPException(
            status_code=422,
            detail=e.message,
        )

    logger.info("scrape_request_complete", returned=len(result.offers))

    return ScrapeResponse(
        data=[OfferResponse(**offer.to_dict()) for offer in result.offers],
        message=result.message,
    )
