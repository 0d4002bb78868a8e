"""Badge catalog lookups and earned-badge queries."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import BadgeDefinition, UserBadge

logger = logging.getLogger(__name__)


async def get_badge_by_slug(db: AsyncSession, slug: str) -> BadgeDefinition | None:
    """Fetch a badge definition by slug."""
    result = await db.execute(
        select(BadgeDefinition).where(BadgeDefinition.slug == slug)
    )
    return result.scalar_one_or_none()


def catalog_resolver(db: AsyncSession):
    """Bind the catalog lookup to a session, for ``apply_completion``."""

    async def resolve(slug: str) -> BadgeDefinition | None:
        return await get_badge_by_slug(db, slug)

    return resolve


async def list_active_badges(db: AsyncSession) -> list[BadgeDefinition]:
    """All active badge definitions in display order."""
    result = await db.execute(
        select(BadgeDefinition)
        .where(BadgeDefinition.is_active.is_(True))
        .order_by(BadgeDefinition.sort_order)
    )
    return list(result.scalars().all())


async def count_active_badges(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(BadgeDefinition).where(BadgeDefinition.is_active.is_(True))
    )
    return result.scalar_one()


async def get_earned_badges(db: AsyncSession, user_id: int) -> list[tuple[BadgeDefinition, datetime]]:
    """Badges a user has earned with their earn time, most recent first."""
    result = await db.execute(
        select(BadgeDefinition, UserBadge.earned_at)
        .join(UserBadge, UserBadge.badge_id == BadgeDefinition.id)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), BadgeDefinition.sort_order.desc())
    )
    return [(row[0], row[1]) for row in result.all()]
