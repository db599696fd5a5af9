from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_palette_service
from app.domain.errors import EmailDeliveryError, EmailNotConfigured, PaletteNotFound
from app.domain.models import PaletteEmailRequest, PaletteEmailResponse
from app.services.palette_service import PaletteService

logger = logging.getLogger("palette_email_routes")

router = APIRouter(prefix="/api/palette-emails", tags=["palette_emails"])


@router.post("", response_model=PaletteEmailResponse)
async def save_palette_email(
    req: PaletteEmailRequest,
    svc: PaletteService = Depends(get_palette_service),
) -> PaletteEmailResponse:
    try:
        await svc.email_palette(str(req.email), req.palette_id, req.seasonal_type)
    except PaletteNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="palette_not_found")
    except EmailNotConfigured:
        logger.error("email_service_unavailable")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="email_service_unavailable")
    except EmailDeliveryError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="email_delivery_failed")
    return PaletteEmailResponse(success=True)
