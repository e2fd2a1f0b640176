"""
Main FastAPI application for the Lead Qualification API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .routes import conversations, classifications
from .services import Services
from config.settings import get_settings, Settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    services = services or Services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        logger.info(f"{settings.api_title} starting up...")
        await services.initialize()
        logger.info(f"{settings.api_title} ready")
        yield
        logger.info(f"{settings.api_title} shutting down...")
        await services.shutdown()

    app = FastAPI(
        title=settings.api_title,
        description="Rule-based lead qualification: metadata extraction, guided questioning and Hot/Cold/Invalid classification.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    app.include_router(conversations.router, prefix="/api/v1", tags=["Conversations"])
    app.include_router(classifications.router, prefix="/api/v1", tags=["Reporting"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/api/v1/health")
    async def health():
        return {
            "status": "healthy" if services.is_ready else "starting",
            "services": services.health(),
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
