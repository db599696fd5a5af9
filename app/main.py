from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api import build_router
from app.config import config_warnings, settings
from app.db import close_pool, get_pool
from app.logging import configure_logging
from app.middleware import RequestIdMiddleware
from app.reference import get_reference_table

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()
    for message in config_warnings(settings):
        logger.warning(message)

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(build_router())

    @app.on_event("startup")
    async def startup():
        """Load reference data and open the database pool"""
        get_reference_table()
        await get_pool()

    @app.on_event("shutdown")
    async def shutdown():
        """Close database pool on shutdown"""
        await close_pool()

    @app.get("/")
    async def root():
        return {"service": settings.SERVICE_NAME, "status": "ok", "version": settings.SERVICE_VERSION}

    return app


app = create_app()
