"""Dashboard aggregation for students and coaches.

Both views are computed on read from the task table and the user's
gamification projection. Nothing here writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from learnpath.db.models import Task
from learnpath.tasks.service import get_tasks
from learnpath.users.service import get_coach_students, get_user

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

PROGRESS_WEEKS = 4
RECENT_ACTIVITY_DAYS = 7
RECENT_ACTIVITY_LIMIT = 10
UNCATEGORIZED = "Uncategorized"


def _as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def _local_day(ts: datetime) -> date:
    """Calendar day on the server clock, the same day boundary streaks use."""
    return _as_utc(ts).astimezone().date()


def _rate(completed: int, total: int) -> float:
    return round(100 * completed / total, 1) if total else 0.0


def subject_performance(tasks: Sequence[Task]) -> list[dict]:
    """Completed/total per subject, in order of first appearance."""
    subjects: dict[str, dict] = {}
    for task in tasks:
        entry = subjects.setdefault(task.subject or UNCATEGORIZED, {"completed": 0, "total": 0})
        entry["total"] += 1
        if task.status == "completed":
            entry["completed"] += 1

    return [
        {
            "subject": name,
            "completed": entry["completed"],
            "total": entry["total"],
            "completion_rate": _rate(entry["completed"], entry["total"]),
        }
        for name, entry in subjects.items()
    ]


def weekly_progress(tasks: Sequence[Task], now: datetime) -> list[dict]:
    """Completions per week over the last four weeks, oldest week first.

    A task counts in the week its last update falls in.
    """
    window_start = now - timedelta(weeks=PROGRESS_WEEKS)
    counts = [0] * PROGRESS_WEEKS
    for task in tasks:
        if task.status != "completed" or task.updated_at is None:
            continue
        elapsed = _as_utc(task.updated_at) - window_start
        if elapsed < timedelta(0) or elapsed > timedelta(weeks=PROGRESS_WEEKS):
            continue
        counts[min(PROGRESS_WEEKS - 1, elapsed.days // 7)] += 1

    return [{"week": f"Week {i + 1}", "completed": n} for i, n in enumerate(counts)]


def recent_activity(tasks: Sequence[Task], now: datetime) -> list[dict]:
    since = now - timedelta(days=RECENT_ACTIVITY_DAYS)
    recent = [t for t in tasks if t.updated_at is not None and _as_utc(t.updated_at) >= since]
    recent.sort(key=lambda t: (_as_utc(t.updated_at), t.id), reverse=True)
    return [
        {
            "task_id": t.id,
            "title": t.title,
            "status": t.status,
            "subject": t.subject,
            "updated_at": _as_utc(t.updated_at),
        }
        for t in recent[:RECENT_ACTIVITY_LIMIT]
    ]


async def get_user_analytics(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
) -> dict | None:
    """Student dashboard analytics. None if the user does not exist."""
    user = await get_user(db, user_id)
    if user is None:
        return None

    if now is None:
        now = datetime.now(timezone.utc)

    tasks = await get_tasks(db, user_id)
    completed = sum(1 for t in tasks if t.status == "completed")
    in_progress = sum(1 for t in tasks if t.status == "in-progress")

    analytics = {
        "user_id": user_id,
        "total_tasks": len(tasks),
        "completed_tasks": completed,
        "in_progress_tasks": in_progress,
        "pending_tasks": len(tasks) - completed - in_progress,
        "completion_rate": _rate(completed, len(tasks)),
        "points": user.points,
        "level": user.level,
        "streak": user.streak,
        "subject_performance": subject_performance(tasks),
        "weekly_progress": weekly_progress(tasks, now),
        "recent_activity": recent_activity(tasks, now),
    }

    logger.debug("user_analytics_built", user_id=user_id, total_tasks=len(tasks))
    return analytics


async def get_coach_stats(
    db: AsyncSession,
    coach_id: int,
    now: datetime | None = None,
) -> dict | None:
    """Coach dashboard summary over all supervised students.

    Returns None when the id does not belong to a coach.
    """
    coach = await get_user(db, coach_id)
    if coach is None or coach.user_type != "coach":
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    today = _local_day(now)

    students = await get_coach_students(db, coach_id)
    tasks: list[Task] = []
    if students:
        result = await db.execute(
            select(Task).where(Task.user_id.in_([s.id for s in students]))
        )
        tasks = list(result.scalars().all())

    return {
        "coach_id": coach_id,
        "total_students": len(students),
        "tasks_assigned": sum(1 for t in tasks if t.assigned_by_coach_id == coach_id),
        "completed_today": sum(
            1 for t in tasks
            if t.status == "completed" and t.updated_at is not None and _local_day(t.updated_at) == today
        ),
        "pending_tasks": sum(1 for t in tasks if t.status == "pending"),
    }
