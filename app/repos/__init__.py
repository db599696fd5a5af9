"""
Repositories package.

IMPORTANT:
- Do not instantiate repos here.
- Keep this module side-effect free.
"""

__all__ = ["PaletteRepo"]

from .palette_repo import PaletteRepo
