"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


# --- Badge ---


class BadgeDefinitionResponse(BaseModel):
    slug: str
    name: str
    description: str
    badge_type: str
    level: str
    points_rewarded: int


class EarnedBadgeResponse(BaseModel):
    slug: str
    name: str
    level: str
    earned_at: datetime


class UserBadgesResponse(BaseModel):
    earned: list[EarnedBadgeResponse]
    total_available: int
    total_earned: int


class AllBadgesResponse(BaseModel):
    badges: list[BadgeDefinitionResponse]


# --- Milestones ---


class MilestoneEntry(BaseModel):
    threshold: int
    badge_slug: str
    bonus_xp: int
    name: str
    level: str


class AllMilestonesResponse(BaseModel):
    milestones: list[MilestoneEntry]


# --- Summary ---


class GamificationSummaryResponse(BaseModel):
    points: int
    streak_count: int
    last_goal_completed_at: datetime | None = None
    badges_earned: int
    badges_total: int
    next_milestone: MilestoneEntry | None = None


# --- Check-in streaks ---


class CheckInStreakResponse(BaseModel):
    user_id: int
    username: str | None = None
    streak_count: int
    last_check_in: datetime | None = None


class LeaderboardPagination(BaseModel):
    total_entries: int
    current_page: int
    total_pages: int


class StreakLeaderboardResponse(BaseModel):
    streaks: list[CheckInStreakResponse]
    pagination: LeaderboardPagination


class PointsLeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str
    points: int
    streak_count: int


class PointsLeaderboardResponse(BaseModel):
    entries: list[PointsLeaderboardEntry]
    pagination: LeaderboardPagination
