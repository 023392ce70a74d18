"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

# --- Points ---


class PointsHistoryEntry(BaseModel):
    id: int
    amount: int
    reason: str
    task_id: int | None = None
    created_at: datetime | None = None


class PointsHistoryResponse(BaseModel):
    entries: list[PointsHistoryEntry]
    total: int


# --- Levels ---


class LevelResponse(BaseModel):
    level: int
    points_into_level: int
    points_for_level: int
    next_level: int
    next_level_at: int


class UserStatsResponse(BaseModel):
    user_id: int
    points: int
    level: int
    streak: int
    last_active_date: date | None = None
    points_into_level: int
    points_for_level: int
    next_level_at: int
    achievements_unlocked: int


# --- Achievements ---


class AchievementResponse(BaseModel):
    slug: str
    title: str
    description: str | None = None
    icon: str | None = None
    points_required: int
    trigger_type: str


class AllAchievementsResponse(BaseModel):
    achievements: list[AchievementResponse]


class UnlockedAchievementResponse(BaseModel):
    slug: str
    title: str
    icon: str | None = None
    achieved_at: datetime


class UserAchievementsResponse(BaseModel):
    unlocked: list[UnlockedAchievementResponse]
    total_available: int
    total_unlocked: int


# --- Activity ---


class ActivityResponse(BaseModel):
    streak: int
    last_active_date: date | None = None
    achievements_unlocked: list[str] = []
