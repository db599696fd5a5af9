from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator, model_validator

from app.domain.enums import Gender, Season, SubSeason

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# -----------------------------------------------------------------------------
# Classification (external model contract)
# -----------------------------------------------------------------------------

class RecommendedColor(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    hex: str = Field(pattern=HEX_PATTERN)
    reason: str = Field(min_length=1)

    @field_validator("hex")
    @classmethod
    def upper_hex(cls, v: str) -> str:
        return v.upper()


class ClassificationResult(BaseModel):
    """
    Validated model output. Field aliases match the JSON schema sent to the
    inference provider; python names are used everywhere else.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    season: Season
    sub_season: SubSeason = Field(alias="subseason")
    recommended_colors: List[RecommendedColor] = Field(
        alias="recommendedColors", min_length=3, max_length=3
    )
    gender: Gender

    @field_validator("season", mode="before")
    @classmethod
    def parse_season(cls, v: Any) -> Season:
        return Season.parse(v)

    @field_validator("sub_season", mode="before")
    @classmethod
    def parse_sub_season(cls, v: Any) -> SubSeason:
        return SubSeason.parse(v)

    @field_validator("gender", mode="before")
    @classmethod
    def parse_gender(cls, v: Any) -> Gender:
        return Gender.parse(v)

    @model_validator(mode="after")
    def sub_season_matches_season(self) -> "ClassificationResult":
        if self.sub_season.season is not self.season:
            raise ValueError(
                f"sub-season {self.sub_season.value} does not belong to {self.season.value}"
            )
        return self

    @model_validator(mode="after")
    def distinct_recommended_hexes(self) -> "ClassificationResult":
        # colours are keyed by hex downstream; hexes are already upper-cased here
        hexes = [c.hex for c in self.recommended_colors]
        if len(set(hexes)) != len(hexes):
            raise ValueError(f"recommended colours repeat a hex: {hexes}")
        return self


class ClassifyOutcome(BaseModel):
    """Tagged result of one classification call: payload or structured error."""
    ok: bool
    result: Optional[ClassificationResult] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, result: ClassificationResult) -> "ClassifyOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, error_code: str, error_message: str = "") -> "ClassifyOutcome":
        return cls(ok=False, error_code=error_code, error_message=error_message[:500])


# -----------------------------------------------------------------------------
# Static reference table
# -----------------------------------------------------------------------------

class Swatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    hex: str = Field(pattern=HEX_PATTERN)
    name: str = Field(min_length=1)


class CelebrityTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    reason: str = Field(min_length=1)


class CelebrityTemplates(BaseModel):
    model_config = ConfigDict(frozen=True)

    female: CelebrityTemplate
    male: CelebrityTemplate

    def for_gender(self, gender: Gender) -> CelebrityTemplate:
        return self.male if gender is Gender.male else self.female


class SeasonalReferenceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    season: Season
    sub_season: SubSeason
    description: str
    percentage: float = Field(ge=0, le=100)
    colors: Tuple[Swatch, ...] = Field(min_length=1)
    celebrities: CelebrityTemplates

    @model_validator(mode="after")
    def sub_season_matches_season(self) -> "SeasonalReferenceEntry":
        if self.sub_season.season is not self.season:
            raise ValueError(f"{self.sub_season.value} filed under {self.season.value}")
        return self


# -----------------------------------------------------------------------------
# Assembled view (read side)
# -----------------------------------------------------------------------------

class ColourView(BaseModel):
    name: str
    reason: str
    percentage: Optional[float] = None


class CelebrityView(BaseModel):
    name: str
    gender: Gender
    reason: str


class ColourTrend(BaseModel):
    hex: str
    name: str
    percentage: float


class PaletteView(BaseModel):
    id: int
    season: Season
    sub_season: SubSeason
    description: Optional[str] = None
    percentage: Optional[float] = None
    # hex -> details; recommended colours only
    colours: Dict[str, ColourView] = Field(default_factory=dict)
    celebrity: Optional[CelebrityView] = None
    # taxonomy colours for the sub-season, in reference order
    swatches: List[Swatch] = Field(default_factory=list)
    trends: List[ColourTrend] = Field(default_factory=list)
    share_percentage: Optional[int] = None
    created_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# HTTP bodies
# -----------------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    image_url: HttpUrl


class AnalyzeResponse(BaseModel):
    id: int


class PaletteEmailRequest(BaseModel):
    email: EmailStr
    palette_id: int = Field(ge=1)
    seasonal_type: Optional[str] = Field(default=None, max_length=64)


class PaletteEmailResponse(BaseModel):
    success: bool = True


class UploadResponse(BaseModel):
    url: str
    storage_path: str
    content_type: str
    bytes: int
