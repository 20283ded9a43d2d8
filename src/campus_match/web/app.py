"""
Campus Match Web - FastAPI application.

Hosts the onboarding API; the React frontend talks to it under /api.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_match import __version__
from campus_match.config import settings
from onboarding.api import router as onboarding_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Campus Match", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Campus Match starting up...")
    logger.info(f"  Environment: {settings.app_env}")
    logger.info(f"  Photo host: {settings.cloudinary_cloud_name or '(not configured)'}")


# CORS middleware for React frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(onboarding_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
