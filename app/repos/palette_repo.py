from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

logger = logging.getLogger(__name__)


def _numeric(value: Optional[float]) -> Optional[Decimal]:
    """NUMERIC(5,2) parameter."""
    if value is None:
        return None
    return Decimal(str(round(float(value), 2)))


class PaletteRepo:
    """
    Append-only access to palette, colors, celebrities and palette_email.
    There are deliberately no update/delete methods.
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def insert_palette_bundle(
        self,
        palette: Dict[str, Any],
        colors: Sequence[Dict[str, Any]],
        celebrity: Optional[Dict[str, Any]],
    ) -> int:
        """
        Insert one palette with its color and celebrity rows in a single
        transaction. Either every row lands or none does.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                palette_id = await conn.fetchval(
                    """
                    INSERT INTO palette (season, sub_season, description, percentage)
                    VALUES ($1::season, $2::sub_season, $3, $4)
                    RETURNING id
                    """,
                    palette["season"],
                    palette["sub_season"],
                    palette.get("description"),
                    _numeric(palette.get("percentage")),
                )

                if colors:
                    await conn.executemany(
                        """
                        INSERT INTO colors (palette_id, name, hex, percentage, is_recommended, reason)
                        VALUES ($1, $2, $3, $4, $5, $6)
                        """,
                        [
                            (
                                palette_id,
                                c["name"],
                                c["hex"],
                                _numeric(c.get("percentage")),
                                bool(c.get("is_recommended")),
                                c.get("reason"),
                            )
                            for c in colors
                        ],
                    )

                if celebrity:
                    await conn.execute(
                        """
                        INSERT INTO celebrities (palette_id, name, gender)
                        VALUES ($1, $2, $3::gender)
                        """,
                        palette_id,
                        celebrity["name"],
                        celebrity["gender"],
                    )

        logger.info(
            "palette_inserted",
            extra={"palette_id": palette_id, "colors": len(colors), "celebrity": bool(celebrity)},
        )
        return int(palette_id)

    async def get_palette(self, palette_id: int) -> Optional[Dict[str, Any]]:
        sql = """
        SELECT id, season::text AS season, sub_season::text AS sub_season,
               description, percentage, created_at
        FROM palette
        WHERE id = $1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(sql, palette_id)
        return dict(row) if row else None

    async def get_latest_palette(self) -> Optional[Dict[str, Any]]:
        sql = """
        SELECT id, season::text AS season, sub_season::text AS sub_season,
               description, percentage, created_at
        FROM palette
        ORDER BY created_at DESC, id DESC
        LIMIT 1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(sql)
        return dict(row) if row else None

    async def list_colors(self, palette_id: int) -> List[Dict[str, Any]]:
        sql = """
        SELECT id, palette_id, name, hex, percentage, is_recommended, reason
        FROM colors
        WHERE palette_id = $1
        ORDER BY id
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(sql, palette_id)
        return [dict(r) for r in rows]

    async def get_celebrity(self, palette_id: int) -> Optional[Dict[str, Any]]:
        sql = """
        SELECT id, palette_id, name, gender::text AS gender
        FROM celebrities
        WHERE palette_id = $1
        ORDER BY id
        LIMIT 1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(sql, palette_id)
        return dict(row) if row else None

    async def insert_palette_email(self, email: str, palette_id: int) -> int:
        sql = """
        INSERT INTO palette_email (email, palette_id)
        VALUES ($1, $2)
        RETURNING id
        """
        async with self.pool.acquire() as conn:
            return int(await conn.fetchval(sql, email, palette_id))
