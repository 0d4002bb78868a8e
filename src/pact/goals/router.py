"""Goal API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from pact.auth.dependencies import get_current_admin, get_current_user
from pact.database import get_session
from pact.db.models import User
from pact.events import EventPublisher, get_publisher
from pact.goals.schemas import (
    CompleteGoalResponse,
    CreateGoalRequest,
    GoalListResponse,
    GoalResponse,
    StreakDatesResponse,
    UpdateProgressRequest,
)
from pact.goals.service import (
    complete_goal,
    create_goal,
    get_completion_dates,
    list_all_goals,
    list_public_goals,
    list_user_goals,
    update_goal_progress,
)

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])

_NOT_FOUND = "Goal not found or not owned by user"


@router.get("", response_model=GoalListResponse)
async def get_all_goals(
    _admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_session),
):
    """All goals (admin only)."""
    goals = await list_all_goals(db)
    return GoalListResponse(goals=[GoalResponse.model_validate(g) for g in goals])


@router.post("", response_model=GoalResponse, status_code=201)
async def create_new_goal(
    body: CreateGoalRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Create a goal for the current user."""
    try:
        goal = await create_goal(
            db, user.id, body.title, body.description,
            due_date=body.due_date, is_public=body.is_public,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return GoalResponse.model_validate(goal)


@router.get("/mine", response_model=GoalListResponse)
async def get_my_goals(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """The current user's goals."""
    goals = await list_user_goals(db, user.id)
    return GoalListResponse(goals=[GoalResponse.model_validate(g) for g in goals])


@router.get("/public", response_model=GoalListResponse)
async def get_public_goals(db: AsyncSession = Depends(get_session)):
    """Public goals (no auth required)."""
    goals = await list_public_goals(db)
    return GoalListResponse(goals=[GoalResponse.model_validate(g) for g in goals])


@router.get("/streak-dates", response_model=StreakDatesResponse)
async def get_streak_dates(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Completion dates of the current user's goals, for the streak calendar."""
    return StreakDatesResponse(dates=await get_completion_dates(db, user.id))


@router.put("/{goal_id}/progress", response_model=GoalResponse)
async def set_goal_progress(
    goal_id: int,
    body: UpdateProgressRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Update progress on an owned goal."""
    try:
        goal = await update_goal_progress(db, user.id, goal_id, body.progress)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if goal is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return GoalResponse.model_validate(goal)


@router.put("/{goal_id}/complete", response_model=CompleteGoalResponse)
async def mark_goal_complete(
    goal_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Mark a goal complete; advances the streak and pays milestone rewards."""
    try:
        completion = await complete_goal(db, publisher, user.id, goal_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    if completion is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)

    return CompleteGoalResponse(
        goal=GoalResponse.model_validate(completion.goal),
        new_streak=completion.result.new_streak,
        bonus_xp=completion.result.bonus_xp,
        badge_awarded=completion.result.badge_slug,
    )
