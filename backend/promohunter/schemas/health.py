"""Health check schemas."""

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str
    environment: str
    version: str
