from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from app.domain.enums import Gender, Season, SubSeason
from app.domain.errors import ClassificationFailed, PaletteNotFound, ReferenceNotFound
from app.domain.models import (
    CelebrityView,
    ClassificationResult,
    ColourView,
    PaletteView,
    SeasonalReferenceEntry,
    Swatch,
)
from app.reference import ReferenceTable
from app.repos.palette_repo import PaletteRepo
from app.services.classifier import SeasonClassifier
from app.services.email_service import PaletteMailer
from app.services.palette_stats import color_trends, fallback_share, share_percentage

logger = logging.getLogger(__name__)

DEFAULT_CELEBRITY_REASON = "A perfect style icon for your color palette"

Row = Dict[str, Any]


def synthesize_reason(colour_name: str, sub_season: SubSeason) -> str:
    return f"This {colour_name} perfectly complements your {sub_season.value} palette."


def _as_float(value: Any) -> Optional[float]:
    # NUMERIC columns come back as Decimal
    if value is None:
        return None
    return float(value)


# -----------------------------------------------------------------------------
# Write side
# -----------------------------------------------------------------------------

def build_palette_rows(
    result: ClassificationResult,
    reference: SeasonalReferenceEntry,
) -> Tuple[Row, List[Row], Row]:
    """
    Shape one classification into (palette, colors, celebrity) rows.

    Taxonomy colours and description/percentage are copied out of the
    reference entry, so later reference edits never rewrite past results.
    """
    palette: Row = {
        "season": result.season.db_value,
        "sub_season": result.sub_season.value,
        "description": reference.description,
        "percentage": reference.percentage,
    }

    colors: List[Row] = [
        {
            "name": swatch.name,
            "hex": swatch.hex.upper(),
            "percentage": None,
            "is_recommended": False,
            "reason": None,
        }
        for swatch in reference.colors
    ]
    n = len(result.recommended_colors)
    colors.extend(
        {
            "name": rec.name,
            "hex": rec.hex.upper(),
            "percentage": fallback_share(index, n),
            "is_recommended": True,
            "reason": rec.reason,
        }
        for index, rec in enumerate(result.recommended_colors)
    )

    template = reference.celebrities.for_gender(result.gender)
    celebrity: Row = {"name": template.name, "gender": result.gender.value}

    return palette, colors, celebrity


# -----------------------------------------------------------------------------
# Read side
# -----------------------------------------------------------------------------

def assemble_palette_view(
    palette_row: Row,
    color_rows: List[Row],
    celebrity_row: Optional[Row],
    reference: Optional[SeasonalReferenceEntry] = None,
) -> PaletteView:
    """
    Join stored rows into the presentation structure.

    `colours` carries recommended colours only; taxonomy colours go to
    `swatches`. A null stored reason gets a generated sentence, a present one
    is passed through untouched.
    """
    season = Season.parse(palette_row["season"])
    sub_season = SubSeason.parse(palette_row["sub_season"])

    colours: Dict[str, ColourView] = {}
    swatches: List[Swatch] = []
    for c in color_rows:
        hex_code = str(c["hex"]).upper()
        if not c.get("is_recommended"):
            swatches.append(Swatch(hex=hex_code, name=c["name"]))
            continue
        reason = c.get("reason")
        colours[hex_code] = ColourView(
            name=c["name"],
            reason=reason if reason is not None else synthesize_reason(c["name"], sub_season),
            percentage=_as_float(c.get("percentage")),
        )

    celebrity: Optional[CelebrityView] = None
    if celebrity_row:
        gender = Gender.parse(celebrity_row["gender"])
        reason = DEFAULT_CELEBRITY_REASON
        if reference is not None:
            reason = reference.celebrities.for_gender(gender).reason
        celebrity = CelebrityView(name=celebrity_row["name"], gender=gender, reason=reason)

    return PaletteView(
        id=int(palette_row["id"]),
        season=season,
        sub_season=sub_season,
        description=palette_row.get("description"),
        percentage=_as_float(palette_row.get("percentage")),
        colours=colours,
        celebrity=celebrity,
        swatches=swatches,
        trends=color_trends(colours),
        share_percentage=share_percentage(sub_season.value),
        created_at=palette_row.get("created_at"),
    )


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------

class PaletteService:
    def __init__(
        self,
        repo: PaletteRepo,
        reference: ReferenceTable,
        classifier: Optional[SeasonClassifier] = None,
        mailer: Optional[PaletteMailer] = None,
    ):
        self.repo = repo
        self.reference = reference
        self.classifier = classifier
        self.mailer = mailer

    async def analyze(self, image_url: str) -> int:
        """Classify the photo, persist the result and return the palette id."""
        classifier = self.classifier or SeasonClassifier()
        outcome = await classifier.classify(image_url)
        if not outcome.ok or outcome.result is None:
            logger.error(
                "palette_classification_failed",
                extra={"error_code": outcome.error_code, "error_message": outcome.error_message},
            )
            raise ClassificationFailed(outcome.error_code or "unknown", outcome.error_message or "")

        palette_id = await self.persist(outcome.result)
        logger.info(
            "palette_analyzed",
            extra={
                "palette_id": palette_id,
                "season": outcome.result.season.value,
                "sub_season": outcome.result.sub_season.value,
            },
        )
        return palette_id

    async def persist(self, result: ClassificationResult) -> int:
        entry = self.reference.lookup(result.season, result.sub_season)
        if entry is None:
            raise ReferenceNotFound(result.season.value, result.sub_season.value)

        palette, colors, celebrity = build_palette_rows(result, entry)
        return await self.repo.insert_palette_bundle(palette, colors, celebrity)

    async def _view_for_row(self, palette_row: Row) -> PaletteView:
        palette_id = int(palette_row["id"])
        color_rows = await self.repo.list_colors(palette_id)
        celebrity_row = await self.repo.get_celebrity(palette_id)
        entry = self.reference.lookup(palette_row["season"], palette_row["sub_season"])
        return assemble_palette_view(palette_row, color_rows, celebrity_row, entry)

    async def get_by_id(self, palette_id: int) -> PaletteView:
        row = await self.repo.get_palette(palette_id)
        if not row:
            raise PaletteNotFound(palette_id)
        return await self._view_for_row(row)

    async def get_latest(self) -> Optional[PaletteView]:
        row = await self.repo.get_latest_palette()
        if not row:
            return None
        return await self._view_for_row(row)

    async def email_palette(self, email: str, palette_id: int, seasonal_type: Optional[str] = None) -> None:
        view = await self.get_by_id(palette_id)
        await self.repo.insert_palette_email(email, palette_id)

        mailer = self.mailer or PaletteMailer()
        await mailer.send(email, view, seasonal_type or view.sub_season.value)
        logger.info("palette_emailed", extra={"palette_id": palette_id})
