"""FastAPI application factory for the trendfeed web API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from trendfeed.errors import CrawlCancelled
from trendfeed.service import AggregationService
from trendfeed.web.routes import health_router, router

logger = logging.getLogger(__name__)


def create_app(service: AggregationService, lifespan=None) -> FastAPI:
    """Build and return a configured FastAPI application."""
    app = FastAPI(title="Trendfeed", docs_url="/api/docs", lifespan=lifespan)
    app.state.service = service

    @app.exception_handler(CrawlCancelled)
    async def crawl_cancelled_handler(request: Request, exc: CrawlCancelled):
        logger.info("Crawl for %s cancelled: %s", request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Service is shutting down", "error_type": "cancelled"},
        )

    app.include_router(health_router)
    app.include_router(router, prefix="/api/v1")
    return app
