from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from app.domain.models import SeasonalReferenceEntry
from app.reference import get_reference_table

router = APIRouter(prefix="/api/reference", tags=["reference"])


@router.get("/{season}", response_model=List[SeasonalReferenceEntry])
async def list_season_entries(season: str) -> List[SeasonalReferenceEntry]:
    entries = get_reference_table().entries_for(season)
    if not entries:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="season_not_found")
    return entries


@router.get("/{season}/{sub_season}", response_model=SeasonalReferenceEntry)
async def get_reference_entry(season: str, sub_season: str) -> SeasonalReferenceEntry:
    entry = get_reference_table().lookup(season, sub_season)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reference_not_found")
    return entry
