from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.deps import get_storage_service
from app.config import settings
from app.domain.models import UploadResponse
from app.services.azure_storage_service import AzureStorageService

logger = logging.getLogger("upload_routes")

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("", response_model=UploadResponse)
async def upload_photo(
    file: UploadFile = File(...),
    storage: AzureStorageService = Depends(get_storage_service),
) -> UploadResponse:
    content_type = (file.content_type or "").strip().lower()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="not_an_image")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_file")
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="file_too_large")

    try:
        storage_path, sas_url = await storage.upload_image(data, content_type, file.filename)
    except Exception:
        logger.exception("upload_failed", extra={"content_type": content_type, "bytes": len(data)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="upload_failed")

    return UploadResponse(url=sas_url, storage_path=storage_path, content_type=content_type, bytes=len(data))
