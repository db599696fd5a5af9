from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from app.config import settings
from app.reference import get_reference_table

router = APIRouter(prefix="/api/health", tags=["health"])

_STARTED_AT = time.time()


@router.get("")
@router.get("/")
async def health() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "time_utc": now.isoformat(),
        "uptime_s": round(time.time() - _STARTED_AT, 3),
    }


@router.get("/ready")
async def ready() -> Dict[str, Any]:
    return {
        "status": "ready",
        "reference_entries": len(get_reference_table()),
        "classifier_configured": bool(settings.OPENAI_API_KEY),
        "email_configured": bool(settings.RESEND_API_KEY),
    }
