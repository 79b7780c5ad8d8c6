"""PromoHunter Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promohunter import __version__
from promohunter.api.v1.router import api_v1_router
from promohunter.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting PromoHunter API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(
        f"Scraper: retries={settings.SCRAPER_MAX_RETRIES} "
        f"backoff={settings.SCRAPER_BACKOFF_BASE}s "
        f"delay={settings.SCRAPER_POLITENESS_DELAY}s"
    )

    yield

    logger.info("Shutting down PromoHunter API server...")


app = FastAPI(
    title="PromoHunter API",
    description="Marketplace offer scraper for WhatsApp deal groups",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:9002",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "PromoHunter API",
        "version": __version__,
        "description": "Marketplace offer scraper",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/api/v1/health",
    }
