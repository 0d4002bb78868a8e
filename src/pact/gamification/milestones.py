"""Streak milestone table.

Each milestone fires once, when a goal-completion streak reaches its
threshold exactly. Thresholds must be strictly increasing; this is checked
at import time so a bad edit fails fast.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Milestone:
    threshold: int
    badge_slug: str
    bonus_xp: int
    name: str
    level: str = "Bronze"

    @property
    def description(self) -> str:
        return f"Complete goals {self.threshold} times in a row"


STREAK_MILESTONES: tuple[Milestone, ...] = (
    Milestone(3, "badge-3day", 20, "Warming Up"),
    Milestone(7, "badge-7day", 50, "One Week Strong"),
    Milestone(14, "badge-14day", 100, "Fortnight Focus", "Silver"),
    Milestone(30, "badge-30day", 250, "Monthly Machine", "Silver"),
    Milestone(100, "badge-100day", 1000, "Centurion", "Gold"),
)


def validate_milestones(milestones: tuple[Milestone, ...]) -> None:
    """Raise ValueError unless thresholds are positive and strictly increasing."""
    previous = 0
    for m in milestones:
        if m.threshold <= previous:
            raise ValueError(
                f"Milestone thresholds must be strictly increasing: {m.threshold} after {previous}"
            )
        if m.bonus_xp < 0:
            raise ValueError(f"Milestone {m.badge_slug} has negative bonus XP")
        previous = m.threshold


validate_milestones(STREAK_MILESTONES)

_BY_THRESHOLD: dict[int, Milestone] = {m.threshold: m for m in STREAK_MILESTONES}


def find_milestone(streak: int) -> Milestone | None:
    """Return the milestone whose threshold equals ``streak``, if any."""
    return _BY_THRESHOLD.get(streak)


def next_milestone(streak: int) -> Milestone | None:
    """Return the first milestone still ahead of ``streak``."""
    for m in STREAK_MILESTONES:
        if m.threshold > streak:
            return m
    return None
