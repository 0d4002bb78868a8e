"""Gamification API endpoints: badges, milestones, points ranking, check-in streaks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pact.auth.dependencies import get_current_admin, get_current_user
from pact.config import get_settings
from pact.database import get_session
from pact.db.models import BadgeDefinition, Streak, User
from pact.events import EventPublisher, get_publisher
from pact.gamification.badge_service import (
    count_active_badges,
    get_badge_by_slug,
    get_earned_badges,
    list_active_badges,
)
from pact.gamification.milestones import STREAK_MILESTONES, Milestone, next_milestone
from pact.gamification.points_service import get_points_leaderboard
from pact.gamification.schemas import (
    AllBadgesResponse,
    AllMilestonesResponse,
    BadgeDefinitionResponse,
    CheckInStreakResponse,
    EarnedBadgeResponse,
    GamificationSummaryResponse,
    LeaderboardPagination,
    MilestoneEntry,
    PointsLeaderboardEntry,
    PointsLeaderboardResponse,
    StreakLeaderboardResponse,
    UserBadgesResponse,
)
from pact.gamification.streak_service import (
    get_streak_leaderboard,
    get_user_streak,
    log_daily_check_in,
    reset_user_streak,
)
from pact.notifications.service import create_notification

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


def _badge_response(b: BadgeDefinition) -> BadgeDefinitionResponse:
    return BadgeDefinitionResponse(
        slug=b.slug,
        name=b.name,
        description=b.description,
        badge_type=b.badge_type,
        level=b.level,
        points_rewarded=b.points_rewarded,
    )


def _milestone_entry(m: Milestone) -> MilestoneEntry:
    return MilestoneEntry(
        threshold=m.threshold,
        badge_slug=m.badge_slug,
        bonus_xp=m.bonus_xp,
        name=m.name,
        level=m.level,
    )


def _streak_response(s: Streak) -> CheckInStreakResponse:
    return CheckInStreakResponse(
        user_id=s.user_id,
        username=s.user.username if s.user else None,
        streak_count=s.streak_count,
        last_check_in=s.last_check_in,
    )


# ── Public endpoints ──


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """Get all active badge definitions."""
    badges = await list_active_badges(db)
    return AllBadgesResponse(badges=[_badge_response(b) for b in badges])


@router.get("/badges/{slug}", response_model=BadgeDefinitionResponse)
async def get_badge(slug: str, db: AsyncSession = Depends(get_session)):
    """Get a single badge definition."""
    badge = await get_badge_by_slug(db, slug)
    if badge is None:
        raise HTTPException(status_code=404, detail="Badge not found")
    return _badge_response(badge)


@router.get("/milestones", response_model=AllMilestonesResponse)
async def list_milestones():
    """Get the streak milestone table."""
    return AllMilestonesResponse(milestones=[_milestone_entry(m) for m in STREAK_MILESTONES])


@router.get("/streaks/leaderboard", response_model=StreakLeaderboardResponse)
async def streak_leaderboard(
    limit: int = Query(10, ge=1),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_session),
):
    """Longest check-in streaks."""
    limit = min(limit, get_settings().leaderboard_max_page_size)
    board = await get_streak_leaderboard(db, limit, page)
    return StreakLeaderboardResponse(
        streaks=[_streak_response(s) for s in board["streaks"]],
        pagination=LeaderboardPagination(**board["pagination"]),
    )


# ── Authenticated endpoints ──


@router.get("/leaderboard/points", response_model=PointsLeaderboardResponse)
async def points_leaderboard(
    limit: int = Query(10, ge=1),
    page: int = Query(1, ge=1),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Users ranked by points earned from milestone bonuses."""
    limit = min(limit, get_settings().leaderboard_max_page_size)
    board = await get_points_leaderboard(db, limit, page)
    return PointsLeaderboardResponse(
        entries=[
            PointsLeaderboardEntry(
                rank=rank,
                user_id=u.id,
                username=u.username,
                points=u.points,
                streak_count=u.streak_count,
            )
            for rank, u in board["entries"]
        ],
        pagination=LeaderboardPagination(**board["pagination"]),
    )


@router.get("/users/me/badges", response_model=UserBadgesResponse)
async def get_my_badges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get current user's earned badges."""
    earned = await get_earned_badges(db, user.id)
    return UserBadgesResponse(
        earned=[
            EarnedBadgeResponse(slug=b.slug, name=b.name, level=b.level, earned_at=earned_at)
            for b, earned_at in earned
        ],
        total_available=await count_active_badges(db),
        total_earned=len(earned),
    )


@router.get("/users/me/gamification", response_model=GamificationSummaryResponse)
async def get_my_summary(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Points, goal streak and badge progress for the current user."""
    upcoming = next_milestone(user.streak_count)
    return GamificationSummaryResponse(
        points=user.points,
        streak_count=user.streak_count,
        last_goal_completed_at=user.last_goal_completed_at,
        badges_earned=sum(1 for b in user.badges if b.is_active),
        badges_total=await count_active_badges(db),
        next_milestone=_milestone_entry(upcoming) if upcoming else None,
    )


@router.post("/streaks/check-in", response_model=CheckInStreakResponse)
async def check_in(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Log today's check-in."""
    try:
        streak = await log_daily_check_in(db, user.id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return CheckInStreakResponse(
        user_id=user.id,
        username=user.username,
        streak_count=streak.streak_count,
        last_check_in=streak.last_check_in,
    )


@router.get("/streaks/me", response_model=CheckInStreakResponse)
async def get_my_streak(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Current user's check-in streak."""
    streak = await get_user_streak(db, user.id)
    if streak is None:
        raise HTTPException(status_code=404, detail="Streak not found for this user")
    return _streak_response(streak)


@router.post("/streaks/{user_id}/reset", status_code=200)
async def reset_streak(
    user_id: int,
    _admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Reset a user's check-in streak (admin only)."""
    if not await reset_user_streak(db, user_id):
        raise HTTPException(status_code=404, detail="No streak found for this user")

    await create_notification(
        db, publisher, user_id,
        type_="system",
        subtype="streak_reset",
        title="Streak Reset",
        description="Your check-in streak was reset by an administrator.",
        action_url="/profile/streaks",
    )
    return {"detail": "Streak reset"}
