from __future__ import annotations

from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.routes.emails import router as emails_router
from app.api.routes.palettes import router as palettes_router
from app.api.routes.reference import router as reference_router
from app.api.routes.uploads import router as uploads_router


def build_router() -> APIRouter:
    r = APIRouter()
    r.include_router(health_router)
    r.include_router(uploads_router)
    r.include_router(palettes_router)
    r.include_router(emails_router)
    r.include_router(reference_router)
    return r
