"""Goal business logic.

Rules:
- A goal is only visible to, and editable by, its owner (admins can list all)
- A goal can be completed once; completing it advances the owner's streak
- Milestone badges and bonus XP are applied in the same transaction as the
  completion, then announced after commit
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import Goal, Notification, User
from pact.events import EventPublisher, broadcast_channel
from pact.gamification.badge_service import catalog_resolver
from pact.gamification.streak_engine import CompletionResult, apply_completion
from pact.notifications.service import build_notification, push_notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalCompletion:
    goal: Goal
    result: CompletionResult


async def create_goal(
    db: AsyncSession,
    user_id: int,
    title: str,
    description: str,
    due_date: date | None = None,
    is_public: bool = False,
) -> Goal:
    """Create a goal owned by ``user_id``."""
    if not title.strip() or not description.strip():
        raise ValueError("Title and description are required")

    goal = Goal(
        user_id=user_id,
        title=title.strip(),
        description=description.strip(),
        due_date=due_date,
        is_public=is_public,
        progress=0,
    )
    db.add(goal)
    await db.commit()
    logger.info("Goal %d created by user %d", goal.id, user_id)
    return goal


async def get_user_goal(db: AsyncSession, user_id: int, goal_id: int) -> Goal | None:
    """Fetch a goal only if ``user_id`` owns it."""
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_goal_progress(db: AsyncSession, user_id: int, goal_id: int, progress: int) -> Goal | None:
    """Set progress (0-100) on an owned goal. Returns None if not found/owned."""
    if not 0 <= progress <= 100:
        raise ValueError("Progress must be between 0 and 100")

    goal = await get_user_goal(db, user_id, goal_id)
    if goal is None:
        return None

    goal.progress = progress
    await db.commit()
    return goal


async def list_user_goals(db: AsyncSession, user_id: int) -> list[Goal]:
    """A user's own goals, newest first."""
    result = await db.execute(
        select(Goal).where(Goal.user_id == user_id).order_by(Goal.created_at.desc(), Goal.id.desc())
    )
    return list(result.scalars().all())


async def list_public_goals(db: AsyncSession) -> list[Goal]:
    """Goals shared publicly, newest first."""
    result = await db.execute(
        select(Goal).where(Goal.is_public.is_(True)).order_by(Goal.created_at.desc(), Goal.id.desc())
    )
    return list(result.scalars().all())


async def list_all_goals(db: AsyncSession) -> list[Goal]:
    """Every goal, newest first (admin view)."""
    result = await db.execute(select(Goal).order_by(Goal.created_at.desc(), Goal.id.desc()))
    return list(result.scalars().all())


async def get_completion_dates(db: AsyncSession, user_id: int) -> list[str]:
    """ISO dates (YYYY-MM-DD) of every completed goal, for the streak calendar."""
    result = await db.execute(
        select(Goal.completed_at)
        .where(Goal.user_id == user_id, Goal.completed_at.is_not(None))
        .order_by(Goal.completed_at.asc())
    )
    return [completed_at.date().isoformat() for completed_at in result.scalars()]


async def complete_goal(
    db: AsyncSession,
    publisher: EventPublisher,
    user_id: int,
    goal_id: int,
    now: datetime | None = None,
) -> GoalCompletion | None:
    """Mark a goal complete and apply streak rewards.

    Returns None if the goal does not exist or is not owned by the user.
    Raises ValueError if the goal was already completed; this check is what
    keeps the streak from being advanced twice for one goal.

    The user row is read, modified and written without a lock. Two
    completions racing for the same user can lose one increment.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    goal = await get_user_goal(db, user_id, goal_id)
    if goal is None:
        return None
    if goal.completed_at is not None:
        raise ValueError("Goal already completed")

    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise LookupError("User not found")

    goal.completed_at = now
    result = await apply_completion(user, catalog_resolver(db))
    user.last_goal_completed_at = now

    notification: Notification | None = None
    if result.badge_awarded is not None:
        badge = result.badge_awarded
        notification = build_notification(
            user_id=user_id,
            type_="gamification",
            subtype="badge_earned",
            title=f'Badge Earned: "{badge.name}"',
            description=f"{result.new_streak} goals in a row. +{result.bonus_xp} XP",
            action_url="/profile/badges",
        )
        db.add(notification)

    await db.commit()

    logger.info(
        "Goal %d completed by user %d: streak=%d badge=%s bonus_xp=%d",
        goal.id, user_id, result.new_streak, result.badge_slug, result.bonus_xp,
    )

    await _announce_completion(publisher, user, goal, result)
    if notification is not None:
        await push_notification(publisher, notification)

    return GoalCompletion(goal=goal, result=result)


async def _announce_completion(
    publisher: EventPublisher,
    user: User,
    goal: Goal,
    result: CompletionResult,
) -> None:
    """Broadcast goal_completed (and badge_earned) for feeds and overlays."""
    await publisher.publish(
        broadcast_channel("goal_completed"),
        {
            "user_id": user.id,
            "goal_id": goal.id,
            "title": goal.title,
            "new_streak": result.new_streak,
            "bonus_xp": result.bonus_xp,
            "points": user.points,
        },
    )
    if result.badge_awarded is not None:
        await publisher.publish(
            broadcast_channel("badge_earned"),
            {
                "user_id": user.id,
                "badge_slug": result.badge_slug,
                "badge_name": result.badge_awarded.name,
                "bonus_xp": result.bonus_xp,
            },
        )
