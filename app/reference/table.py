from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from app.config import settings
from app.domain.enums import REPRESENTATIVE_SUB_SEASON, Season, SubSeason
from app.domain.errors import ReferenceDataError
from app.domain.models import SeasonalReferenceEntry

logger = logging.getLogger(__name__)

SeasonKey = Union[Season, str]
SubSeasonKey = Union[SubSeason, str]


class ReferenceTable:
    """
    Read-only seasonal reference data (season -> sub-season -> entry).

    Built once from the bundled JSON file and never mutated. Keys are enums;
    raw strings passed to lookup() are normalized first, so callers never have
    to care about casing.
    """

    def __init__(self, entries: Mapping[Season, Mapping[SubSeason, SeasonalReferenceEntry]]):
        self._entries = MappingProxyType(
            {season: MappingProxyType(dict(subs)) for season, subs in entries.items()}
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ReferenceTable":
        entries: dict[Season, dict[SubSeason, SeasonalReferenceEntry]] = {}
        for raw_season, subs in raw.items():
            try:
                season = Season.parse(raw_season)
            except ValueError as e:
                raise ReferenceDataError(str(e)) from e
            if not isinstance(subs, Mapping):
                raise ReferenceDataError(f"season {raw_season!r} must map sub-seasons to entries")

            bucket = entries.setdefault(season, {})
            for raw_sub, body in subs.items():
                try:
                    sub_season = SubSeason.parse(raw_sub)
                    bucket[sub_season] = SeasonalReferenceEntry.model_validate(
                        {**dict(body), "season": season, "sub_season": sub_season}
                    )
                except (ValueError, TypeError, ValidationError) as e:
                    raise ReferenceDataError(f"invalid reference entry {raw_season}/{raw_sub}: {e}") from e
        return cls(entries)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ReferenceTable":
        p = Path(path)
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ReferenceDataError(f"reference table not found: {p}") from e
        except json.JSONDecodeError as e:
            raise ReferenceDataError(f"reference table is not valid JSON: {p}: {e}") from e
        if not isinstance(raw, dict):
            raise ReferenceDataError(f"reference table root must be an object: {p}")

        table = cls.from_dict(raw)
        logger.info("reference_table_loaded", extra={"path": str(p), "entries": len(table)})
        return table

    def __len__(self) -> int:
        return sum(len(subs) for subs in self._entries.values())

    def lookup(
        self,
        season: SeasonKey,
        sub_season: Optional[SubSeasonKey] = None,
    ) -> Optional[SeasonalReferenceEntry]:
        try:
            s = Season.parse(season)
            ss = SubSeason.parse(sub_season) if sub_season is not None else REPRESENTATIVE_SUB_SEASON[s]
        except ValueError:
            return None
        return self._entries.get(s, {}).get(ss)

    def entries_for(self, season: SeasonKey) -> List[SeasonalReferenceEntry]:
        try:
            s = Season.parse(season)
        except ValueError:
            return []
        subs = self._entries.get(s, {})
        return [subs[ss] for ss in SubSeason.for_season(s) if ss in subs]

    def all_entries(self) -> List[SeasonalReferenceEntry]:
        return [e for season in Season for e in self.entries_for(season)]


@lru_cache(maxsize=1)
def get_reference_table() -> ReferenceTable:
    return ReferenceTable.load(settings.REFERENCE_TABLE_PATH)
