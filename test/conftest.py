"""
Shared fixtures.

External collaborators (Postgres, the inference API, Resend, Azure Blob) are
replaced with small in-memory fakes so the suite runs without network or DB.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import pytest

from app.domain.models import ClassificationResult, ClassifyOutcome, PaletteView
from app.reference import ReferenceTable, get_reference_table


class FakePaletteRepo:
    """In-memory stand-in for PaletteRepo with the same method surface."""

    def __init__(self) -> None:
        self.palettes: Dict[int, Dict[str, Any]] = {}
        self.colors: List[Dict[str, Any]] = []
        self.celebrities: List[Dict[str, Any]] = []
        self.emails: List[Dict[str, Any]] = []
        self._next_id = 1

    async def insert_palette_bundle(
        self,
        palette: Dict[str, Any],
        colors: Sequence[Dict[str, Any]],
        celebrity: Optional[Dict[str, Any]],
    ) -> int:
        pid = self._next_id
        self._next_id += 1
        self.palettes[pid] = {
            "id": pid,
            "season": palette["season"],
            "sub_season": palette["sub_season"],
            "description": palette.get("description"),
            "percentage": Decimal(str(palette["percentage"])) if palette.get("percentage") is not None else None,
            "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        }
        for i, c in enumerate(colors):
            pct = c.get("percentage")
            self.colors.append(
                {
                    "id": len(self.colors) + 1,
                    "palette_id": pid,
                    "name": c["name"],
                    "hex": c["hex"],
                    "percentage": Decimal(str(pct)) if pct is not None else None,
                    "is_recommended": bool(c.get("is_recommended")),
                    "reason": c.get("reason"),
                }
            )
        if celebrity:
            self.celebrities.append({"id": len(self.celebrities) + 1, "palette_id": pid, **celebrity})
        return pid

    async def get_palette(self, palette_id: int) -> Optional[Dict[str, Any]]:
        row = self.palettes.get(palette_id)
        return dict(row) if row else None

    async def get_latest_palette(self) -> Optional[Dict[str, Any]]:
        if not self.palettes:
            return None
        return dict(self.palettes[max(self.palettes)])

    async def list_colors(self, palette_id: int) -> List[Dict[str, Any]]:
        return [dict(c) for c in self.colors if c["palette_id"] == palette_id]

    async def get_celebrity(self, palette_id: int) -> Optional[Dict[str, Any]]:
        for c in self.celebrities:
            if c["palette_id"] == palette_id:
                return dict(c)
        return None

    async def insert_palette_email(self, email: str, palette_id: int) -> int:
        self.emails.append({"email": email, "palette_id": palette_id})
        return len(self.emails)


class FakeClassifier:
    def __init__(self, outcome: ClassifyOutcome) -> None:
        self.outcome = outcome
        self.calls: List[str] = []

    async def classify(self, photo_url: str) -> ClassifyOutcome:
        self.calls.append(photo_url)
        return self.outcome


class FakeMailer:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.sent: List[Dict[str, Any]] = []

    async def send(self, to: str, view: PaletteView, seasonal_type: str) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "palette_id": view.id, "seasonal_type": seasonal_type})
        return "email_123"


@pytest.fixture(scope="session")
def reference_table() -> ReferenceTable:
    return get_reference_table()


@pytest.fixture
def fake_repo() -> FakePaletteRepo:
    return FakePaletteRepo()


@pytest.fixture
def light_spring_payload() -> Dict[str, Any]:
    """Model output in the wire shape (aliases, raw strings)."""
    return {
        "season": "Spring",
        "subseason": "Light Spring",
        "recommendedColors": [
            {"name": "Coral", "hex": "#FF6F61", "reason": "Coral warms your light golden skin."},
            {"name": "Peach", "hex": "#ffdab9", "reason": "Peach echoes the softness of your features."},
            {"name": "Mint", "hex": "#A8E6CF", "reason": "Mint brightens your clear eyes."},
        ],
        "gender": "female",
    }


@pytest.fixture
def light_spring_result(light_spring_payload: Dict[str, Any]) -> ClassificationResult:
    return ClassificationResult.model_validate(light_spring_payload)
