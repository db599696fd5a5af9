from __future__ import annotations

from typing import Any, Dict

from app.domain.enums import Gender, Season, SubSeason
from app.domain.models import HEX_PATTERN

# Prompt text is tuned independently of the code; keep the required output
# fields in sync with classification_schema().
CLASSIFICATION_SYSTEM_PROMPT = """\
You are an expert personal color analyst. You classify a person's natural
coloring (skin undertone, hair, eyes and the contrast between them) into the
12-season color system.

The four seasons and their sub-seasons:
- Spring (warm, clear): Light Spring, True Spring, Bright Spring
- Summer (cool, soft): Light Summer, True Summer, Soft Summer
- Autumn (warm, muted): Soft Autumn, True Autumn, Dark Autumn
- Winter (cool, clear): Bright Winter, True Winter, Dark Winter

Heuristics:
- Undertone decides warm (Spring/Autumn) versus cool (Summer/Winter).
- Overall lightness or depth decides Light versus Dark sub-seasons.
- Chroma decides Bright (clear, high contrast) versus Soft (muted, blended).
- "True" sub-seasons sit at the center of their season with no dominant
  secondary trait.
- Ignore makeup, hair dye and lighting casts where they are obvious.

The sub-season MUST belong to the season you choose.
"""

CLASSIFICATION_USER_PROMPT = """\
Analyze the person in this photo and return:
- season: one of Spring, Summer, Autumn, Winter
- subseason: one of the 12 sub-seasons listed above
- recommendedColors: exactly 3 colors that would suit this person best, each
  with a short name, a hex code in the form #RRGGBB and a one-sentence reason
  written to the person in the second person
- gender: male or female, as presented in the photo, used only to pick a
  style icon
"""


def build_classification_prompt() -> Dict[str, str]:
    return {"system": CLASSIFICATION_SYSTEM_PROMPT, "user": CLASSIFICATION_USER_PROMPT}


def classification_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": False,
        "required": ["season", "subseason", "recommendedColors", "gender"],
        "properties": {
            "season": {"type": "string", "enum": [s.value for s in Season]},
            "subseason": {"type": "string", "enum": [s.value for s in SubSeason]},
            "recommendedColors": {
                "type": "array",
                "minItems": 3,
                "maxItems": 3,
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "required": ["name", "hex", "reason"],
                    "properties": {
                        "name": {"type": "string"},
                        "hex": {"type": "string", "pattern": HEX_PATTERN},
                        "reason": {"type": "string"},
                    },
                },
            },
            "gender": {"type": "string", "enum": [g.value for g in Gender]},
        },
    }
