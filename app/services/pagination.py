from dataclasses import dataclass
from math import ceil
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings

settings = get_settings()


@dataclass
class Page:
    items: list[Any]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


async def paginate(db: AsyncSession, stmt: Select, page: int = 1, limit: int | None = None) -> Page:
    """Run `stmt` for one page (1-based). `limit` is clamped to the configured maximum."""
    page = max(page, 1)
    limit = min(max(limit or settings.default_page_size, 1), settings.max_page_size)

    total = await db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    result = await db.execute(stmt.limit(limit).offset((page - 1) * limit))
    return Page(items=list(result.scalars().all()), page=page, limit=limit, total=total or 0)
