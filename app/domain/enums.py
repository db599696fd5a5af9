from __future__ import annotations

from enum import Enum
from typing import Any, Dict


def _fold(raw: Any) -> str:
    """Casefold and collapse separators: ' Light-spring ' -> 'light spring'."""
    s = str(raw or "").strip().lower().replace("_", " ").replace("-", " ")
    return " ".join(s.split())


class Season(str, Enum):
    spring = "Spring"
    summer = "Summer"
    autumn = "Autumn"
    winter = "Winter"

    @property
    def db_value(self) -> str:
        """Postgres `season` enum label."""
        return self.value.lower()

    @classmethod
    def parse(cls, raw: Any) -> "Season":
        if isinstance(raw, cls):
            return raw
        key = _fold(raw)
        if key == "fall":
            return cls.autumn
        for member in cls:
            if member.name == key:
                return member
        raise ValueError(f"unknown season: {raw!r}")


class SubSeason(str, Enum):
    bright_winter = "Bright Winter"
    true_winter = "True Winter"
    dark_winter = "Dark Winter"
    light_summer = "Light Summer"
    true_summer = "True Summer"
    soft_summer = "Soft Summer"
    light_spring = "Light Spring"
    true_spring = "True Spring"
    bright_spring = "Bright Spring"
    soft_autumn = "Soft Autumn"
    true_autumn = "True Autumn"
    dark_autumn = "Dark Autumn"

    @property
    def season(self) -> Season:
        return Season.parse(self.value.split(" ", 1)[1])

    @classmethod
    def parse(cls, raw: Any) -> "SubSeason":
        if isinstance(raw, cls):
            return raw
        key = _fold(raw).replace(" fall", " autumn")
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"unknown sub-season: {raw!r}")

    @classmethod
    def for_season(cls, season: Season) -> list["SubSeason"]:
        return [s for s in cls if s.season is season]


class Gender(str, Enum):
    male = "male"
    female = "female"

    @classmethod
    def parse(cls, raw: Any) -> "Gender":
        if isinstance(raw, cls):
            return raw
        key = _fold(raw)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown gender: {raw!r}") from None


# "True X" stands in for the whole season at legacy season-only call sites.
REPRESENTATIVE_SUB_SEASON: Dict[Season, SubSeason] = {
    Season.spring: SubSeason.true_spring,
    Season.summer: SubSeason.true_summer,
    Season.autumn: SubSeason.true_autumn,
    Season.winter: SubSeason.true_winter,
}
