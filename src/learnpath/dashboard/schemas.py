"""Dashboard response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SubjectPerformance(BaseModel):
    subject: str
    completed: int
    total: int
    completion_rate: float


class WeeklyProgress(BaseModel):
    week: str
    completed: int


class RecentActivityItem(BaseModel):
    task_id: int
    title: str
    status: str
    subject: str | None = None
    updated_at: datetime


class UserAnalyticsResponse(BaseModel):
    """Student dashboard: task counts, per-subject performance and weekly progress."""

    user_id: int
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    completion_rate: float
    points: int
    level: int
    streak: int
    subject_performance: list[SubjectPerformance]
    weekly_progress: list[WeeklyProgress]
    recent_activity: list[RecentActivityItem]


class CoachStatsResponse(BaseModel):
    coach_id: int
    total_students: int
    tasks_assigned: int
    completed_today: int
    pending_tasks: int
