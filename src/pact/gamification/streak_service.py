"""Daily check-in streaks.

Unlike the goal-completion streak, a check-in streak only grows when the
previous check-in was on the day before (UTC). Missing a day restarts it
at 1, and a second check-in on the same day is refused.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import Streak

logger = logging.getLogger(__name__)


def _utc_day(dt: datetime):
    """Calendar day in UTC. Naive datetimes (as SQLite returns them) are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()


async def get_user_streak(db: AsyncSession, user_id: int) -> Streak | None:
    """Fetch a user's check-in streak record."""
    result = await db.execute(select(Streak).where(Streak.user_id == user_id))
    return result.scalar_one_or_none()


async def log_daily_check_in(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
) -> Streak:
    """Record today's check-in and return the updated streak.

    Raises ValueError if the user already checked in today.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    streak = await get_user_streak(db, user_id)
    if streak is None:
        streak = Streak(user_id=user_id, streak_count=1, last_check_in=now)
        db.add(streak)
        await db.commit()
        logger.info("New check-in streak started for user %d", user_id)
        return streak

    today = _utc_day(now)
    last_day = _utc_day(streak.last_check_in) if streak.last_check_in else None

    if last_day == today:
        raise ValueError("You have already checked in today.")

    if last_day is not None and last_day == today - timedelta(days=1):
        streak.streak_count += 1
    else:
        streak.streak_count = 1

    streak.last_check_in = now
    await db.commit()
    logger.info("Check-in streak updated for user %d: %d days", user_id, streak.streak_count)
    return streak


async def reset_user_streak(db: AsyncSession, user_id: int) -> bool:
    """Reset a user's check-in streak. Returns False if the user has none."""
    streak = await get_user_streak(db, user_id)
    if streak is None:
        return False

    streak.streak_count = 0
    streak.last_check_in = None
    await db.commit()
    logger.info("Check-in streak reset for user %d", user_id)
    return True


async def get_streak_leaderboard(db: AsyncSession, limit: int = 10, page: int = 1) -> dict:
    """Top check-in streaks, paginated, longest first."""
    offset = (page - 1) * limit

    total_result = await db.execute(select(func.count()).select_from(Streak))
    total_entries = total_result.scalar_one()

    result = await db.execute(
        select(Streak)
        .order_by(Streak.streak_count.desc(), Streak.user_id.asc())
        .offset(offset)
        .limit(limit)
    )
    streaks = list(result.scalars().all())

    return {
        "streaks": streaks,
        "pagination": {
            "total_entries": total_entries,
            "current_page": page,
            "total_pages": math.ceil(total_entries / limit) if limit else 0,
        },
    }
