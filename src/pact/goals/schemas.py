"""Request/response schemas for goal endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class CreateGoalRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    due_date: date | None = None
    is_public: bool = False


class UpdateProgressRequest(BaseModel):
    progress: int = Field(ge=0, le=100)


class GoalResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    due_date: date | None = None
    progress: int
    is_public: bool
    completed_at: datetime | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class GoalListResponse(BaseModel):
    goals: list[GoalResponse]


class CompleteGoalResponse(BaseModel):
    goal: GoalResponse
    new_streak: int
    bonus_xp: int
    badge_awarded: str | None = None


class StreakDatesResponse(BaseModel):
    dates: list[str]
