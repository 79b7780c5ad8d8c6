"""Health check endpoint."""

from fastapi import APIRouter

from promohunter import __version__
from promohunter.config import settings
from promohunter.schemas import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Return service health status.

    The scraper keeps no connections open between jobs, so the process
    being up is the whole check.
    """
    return HealthCheckResponse(
        status="ok",
        environment=settings.ENVIRONMENT,
        version=__version__,
    )
