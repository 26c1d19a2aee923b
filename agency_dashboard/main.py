"""
FastAPI application entry point for the Agency Dashboard API.

This module configures logging, CORS and the upstream data client lifecycle,
registers the API routers, and starts the ASGI server when run directly.

Dependency injection keeps the routers testable: the data client, the
caller's credentials and the settings are all provided through
agency_dashboard.core.dependencies and can be overridden in tests.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agency_dashboard import __version__
from agency_dashboard.api import api_router
from agency_dashboard.core.config import get_settings
from agency_dashboard.core.data_client import close_data_client, init_data_client

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown.

    On startup:
        - Create the shared data API client

    On shutdown:
        - Close the data API client's connection pool
    """
    # Startup
    logger.info("Agency Dashboard API starting")
    await init_data_client()

    yield

    # Shutdown
    logger.info("Agency Dashboard API shutting down")
    try:
        await close_data_client()
    except Exception as e:
        logger.error(f"Error closing data API client: {e}")


# Create FastAPI application
app = FastAPI(
    title="Agency Dashboard API",
    version=__version__,
    description=(
        "Backend for the agency sales dashboard. "
        "Aggregates call and sales series into chart buckets, builds "
        "agent and carrier snapshots, and serves breakdown reports."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware for the desktop shell's dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Agency Dashboard API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agency_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
