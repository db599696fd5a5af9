from __future__ import annotations

from fastapi import HTTPException, status

from app.db import get_pool
from app.domain.errors import StorageNotConfigured
from app.reference import get_reference_table
from app.repos.palette_repo import PaletteRepo
from app.services.azure_storage_service import AzureStorageService
from app.services.palette_service import PaletteService


async def get_palette_service() -> PaletteService:
    pool = await get_pool()
    return PaletteService(repo=PaletteRepo(pool), reference=get_reference_table())


def get_storage_service() -> AzureStorageService:
    try:
        return AzureStorageService()
    except StorageNotConfigured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage_not_configured")
