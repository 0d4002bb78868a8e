"""Goal-completion streak and milestone rewards.

``apply_completion`` runs once per completed goal. It mutates the in-memory
user (streak, points, badges) and leaves persistence to the caller; the only
read it performs is the badge catalog lookup passed in as ``resolve_badge``.

The streak is incremented on every call, with no check for missed days.
The daily check-in flow in ``streak_service`` resets on gaps; this one does
not. The function is also not idempotent, so callers must make sure a goal
can only be completed once.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from pact.gamification.milestones import find_milestone

logger = logging.getLogger(__name__)


class BadgeRef(Protocol):
    slug: str


class StreakHolder(Protocol):
    streak_count: int | None
    points: int | None
    badges: list[Any]


BadgeResolver = Callable[[str], Awaitable[BadgeRef | None]]


@dataclass(frozen=True)
class CompletionResult:
    new_streak: int
    badge_awarded: BadgeRef | None = None
    bonus_xp: int = 0

    @property
    def badge_slug(self) -> str | None:
        return self.badge_awarded.slug if self.badge_awarded is not None else None


def has_badge_slug(user: StreakHolder, slug: str) -> bool:
    """Check if the user's badge collection already holds ``slug``."""
    return any(getattr(b, "slug", b) == slug for b in user.badges)


async def apply_completion(user: StreakHolder, resolve_badge: BadgeResolver) -> CompletionResult:
    """Advance the user's streak by one and pay out a milestone if one is hit.

    Returns the new streak, the badge appended to ``user.badges`` (if any)
    and the bonus XP added to ``user.points`` (0 if none). Bonus XP is paid
    whenever the milestone is hit, even if the badge was already owned.
    """
    new_streak = (user.streak_count or 0) + 1
    user.streak_count = new_streak

    milestone = find_milestone(new_streak)
    if milestone is None:
        return CompletionResult(new_streak=new_streak)

    awarded: BadgeRef | None = None
    if not has_badge_slug(user, milestone.badge_slug):
        badge = await resolve_badge(milestone.badge_slug)
        if badge is None:
            logger.warning("Milestone badge missing from catalog: %s", milestone.badge_slug)
        else:
            user.badges.append(badge)
            awarded = badge

    bonus_xp = 0
    if milestone.bonus_xp > 0:
        bonus_xp = milestone.bonus_xp
        user.points = (user.points or 0) + bonus_xp

    return CompletionResult(new_streak=new_streak, badge_awarded=awarded, bonus_xp=bonus_xp)
