"""Points (XP) ranking.

Points only grow through milestone bonuses paid by the goal streak engine,
so this is the read side of ``apply_completion``.
"""

from __future__ import annotations

import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import User


async def get_points_leaderboard(db: AsyncSession, limit: int = 10, page: int = 1) -> dict:
    """Active users ranked by points, ties broken by user id. Paginated."""
    active = User.is_active.is_(True)

    total_entries = (
        await db.execute(select(func.count()).select_from(User).where(active))
    ).scalar_one()

    offset = (page - 1) * limit
    result = await db.execute(
        select(User)
        .where(active)
        .order_by(User.points.desc(), User.id.asc())
        .offset(offset)
        .limit(limit)
    )
    users = list(result.scalars().all())

    return {
        "entries": [(offset + i, user) for i, user in enumerate(users, start=1)],
        "pagination": {
            "total_entries": total_entries,
            "current_page": page,
            "total_pages": math.ceil(total_entries / limit) if limit else 0,
        },
    }
