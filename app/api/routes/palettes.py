from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_palette_service
from app.domain.errors import ConfigError, PaletteNotFound
from app.domain.models import AnalyzeRequest, AnalyzeResponse, PaletteView
from app.services.palette_service import PaletteService

logger = logging.getLogger("palette_routes")

router = APIRouter(prefix="/api/palettes", tags=["palettes"])


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_palette(
    req: AnalyzeRequest,
    svc: PaletteService = Depends(get_palette_service),
) -> AnalyzeResponse:
    try:
        palette_id = await svc.analyze(str(req.image_url))
    except ConfigError as e:
        logger.error("analyze_config_error", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="classifier_not_configured")
    except Exception:
        # Upstream, schema and persistence failures all look the same to the caller.
        logger.exception("analyze_failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal_error")
    return AnalyzeResponse(id=palette_id)


@router.get("/latest", response_model=PaletteView)
async def get_latest_palette(svc: PaletteService = Depends(get_palette_service)) -> PaletteView:
    view = await svc.get_latest()
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="palette_not_found")
    return view


@router.get("/{palette_id}", response_model=PaletteView)
async def get_palette(
    palette_id: int,
    svc: PaletteService = Depends(get_palette_service),
) -> PaletteView:
    try:
        return await svc.get_by_id(palette_id)
    except PaletteNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="palette_not_found")
