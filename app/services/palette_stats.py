from __future__ import annotations

from typing import Dict, List, Optional

from app.domain.models import ColourTrend, ColourView

TREND_STEP = 3.3


def fallback_share(index: int, limit: int = 3) -> float:
    """Descending placeholder share for colour #index: 9.9, 6.6, 3.3 ..."""
    return round((limit - index) * TREND_STEP, 1)


def color_trends(colours: Dict[str, ColourView], limit: int = 3) -> List[ColourTrend]:
    trends: List[ColourTrend] = []
    for index, (hex_code, colour) in enumerate(list(colours.items())[:limit]):
        pct = colour.percentage if colour.percentage is not None else fallback_share(index, limit)
        trends.append(ColourTrend(hex=hex_code, name=colour.name, percentage=pct))
    return trends


def share_percentage(label: Optional[str]) -> Optional[int]:
    """Stable 85-97 figure derived from the first letter of the label."""
    s = (label or "").strip()
    if not s:
        return None
    return 85 + (ord(s[0].lower()) % 13)
