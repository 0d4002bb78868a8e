"""Badge catalog seed data, derived from the streak milestone table."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import BadgeDefinition
from pact.gamification.milestones import STREAK_MILESTONES

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    {
        "slug": m.badge_slug,
        "name": m.name,
        "description": m.description,
        "badge_type": "consistency_master",
        "level": m.level,
        "points_rewarded": m.bonus_xp,
        "sort_order": i,
    }
    for i, m in enumerate(STREAK_MILESTONES, start=1)
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert all milestone badge definitions. Returns number of badges seeded."""
    existing = {
        b.slug: b
        for b in (await db.execute(select(BadgeDefinition))).scalars()
    }

    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        badge = existing.get(badge_data["slug"])
        if badge is None:
            db.add(BadgeDefinition(**badge_data))
        else:
            for key, value in badge_data.items():
                setattr(badge, key, value)
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badge definitions", seeded)
    return seeded
