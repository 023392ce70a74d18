"""Task store and the completion orchestrator.

Completing a task is the only gamification trigger: the non-completed ->
completed edge awards points, updates the streak and re-evaluates
achievements. The task status is committed first; each follow-up step is
committed on its own and failures are logged without undoing the status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from learnpath.db.models import Task
from learnpath.gamification.achievement_service import AchievementEvaluator
from learnpath.gamification.points_service import add_points
from learnpath.gamification.streak_service import update_streak
from learnpath.tasks.categorization import categorize_task
from learnpath.users.service import get_user

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

TASK_STATUSES = ("pending", "in-progress", "completed")

BASE_COMPLETION_POINTS = 10
SUBJECT_BONUS: dict[str, int] = {
    "Mathematics": 5,
    "Science": 5,
    "History": 5,
    "English": 5,
    "Physical Activity": 5,
    "Life Skills": 5,
    "Interest / Passion": 10,
}

_IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})
_REQUIRED_FIELDS = frozenset({"title", "category", "order", "is_coach_task", "proof_files"})


def completion_points(subject: str | None) -> int:
    """Points for completing a task in `subject`. Unknown or missing subjects get the base only."""
    return BASE_COMPLETION_POINTS + SUBJECT_BONUS.get(subject or "", 0)


@dataclass
class CompletionResult:
    task: Task
    points_awarded: int = 0
    streak: int | None = None
    achievements_unlocked: list[str] = field(default_factory=list)
    already_completed: bool = False


async def get_task(db: AsyncSession, task_id: int) -> Task | None:
    return await db.get(Task, task_id)


async def get_tasks(db: AsyncSession, user_id: int) -> list[Task]:
    """All tasks for a user in display order."""
    result = await db.execute(
        select(Task).where(Task.user_id == user_id).order_by(Task.order, Task.id)
    )
    return list(result.scalars().all())


async def get_tasks_by_status(db: AsyncSession, user_id: int, status: str) -> list[Task]:
    result = await db.execute(
        select(Task)
        .where(Task.user_id == user_id, Task.status == status)
        .order_by(Task.order, Task.id)
    )
    return list(result.scalars().all())


async def create_task(
    db: AsyncSession,
    user_id: int,
    title: str,
    description: str | None = None,
    subject: str | None = None,
    resource_link: str | None = None,
    category: str = "brain",
    due_date: str | None = None,
    assigned_by_coach_id: int | None = None,
) -> Task:
    """
    Create a pending task for a user.

    When no subject is given one is guessed from the title and description.

    Raises:
        ValueError: If the title is blank, the user does not exist, or the
            assigning coach is not a coach.
    """
    if not title or not title.strip():
        msg = "Task title is required"
        raise ValueError(msg)

    if await get_user(db, user_id) is None:
        msg = "User not found"
        raise ValueError(msg)

    if assigned_by_coach_id is not None:
        coach = await get_user(db, assigned_by_coach_id)
        if coach is None or coach.user_type != "coach":
            msg = "Coach not found"
            raise ValueError(msg)

    if subject is None:
        subject = categorize_task(title, description)

    now = datetime.now(timezone.utc)
    task = Task(
        user_id=user_id,
        title=title.strip(),
        description=description,
        subject=subject,
        resource_link=resource_link,
        category=category,
        status="pending",
        due_date=due_date,
        assigned_by_coach_id=assigned_by_coach_id,
        is_coach_task=assigned_by_coach_id is not None,
        proof_files=[],
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    await db.flush()

    logger.info("task_created", task_id=task.id, user_id=user_id, subject=subject)
    return task


async def update_task(
    db: AsyncSession,
    redis: object,
    task_id: int,
    changes: dict[str, Any],
) -> Task | None:
    """
    Apply a partial update. A status change to completed goes through
    complete_task so the gamification side effects fire exactly once.

    Raises:
        ValueError: On an unknown status or a non-updatable field.
    """
    task = await get_task(db, task_id)
    if task is None:
        return None

    changes = dict(changes)
    status = changes.pop("status", None)
    if status is not None and status not in TASK_STATUSES:
        msg = f"Unknown task status: {status}"
        raise ValueError(msg)

    for name, value in changes.items():
        if name in _IMMUTABLE_FIELDS or not hasattr(Task, name):
            msg = f"Field cannot be updated: {name}"
            raise ValueError(msg)
        if name in _REQUIRED_FIELDS and (value is None or (name == "title" and not value.strip())):
            msg = f"Field cannot be empty: {name}"
            raise ValueError(msg)
        if name == "title":
            value = value.strip()
        setattr(task, name, value)

    if status is not None and status != "completed":
        task.status = status
    task.updated_at = datetime.now(timezone.utc)
    await db.commit()

    if status == "completed":
        result = await complete_task(db, redis, task_id)
        return result.task if result else None

    return task


async def complete_task(
    db: AsyncSession,
    redis: object,
    task_id: int,
    proof: dict[str, Any] | None = None,
) -> CompletionResult | None:
    """
    Mark a task completed and run the gamification steps.

    Returns None when the task does not exist. Completing an already
    completed task only updates proof fields and has no gamification
    side effects.
    """
    task = await get_task(db, task_id)
    if task is None:
        return None

    already_completed = task.status == "completed"
    if proof:
        for name in ("proof_text", "proof_link", "proof_files"):
            if proof.get(name) is not None:
                setattr(task, name, proof[name])

    task.status = "completed"
    task.updated_at = datetime.now(timezone.utc)
    await db.commit()

    if already_completed:
        return CompletionResult(task=task, already_completed=True)

    user_id = task.user_id
    subject = task.subject
    result = CompletionResult(task=task)
    log = logger.bind(task_id=task_id, user_id=user_id)

    amount = completion_points(subject)
    try:
        record = await add_points(
            db,
            redis,
            user_id,
            amount,
            reason=f'Completed task: "{task.title}"',
            task_id=task_id,
            idempotency_key=f"task-complete:{task_id}",
        )
        await db.commit()
        if record is not None:
            result.points_awarded = amount
    except Exception:
        await db.rollback()
        log.error("task_completion_points_failed", exc_info=True)

    try:
        user = await update_streak(db, redis, user_id)
        await db.commit()
        if user is not None:
            result.streak = user.streak
    except Exception:
        await db.rollback()
        log.error("task_completion_streak_failed", exc_info=True)

    try:
        evaluator = AchievementEvaluator(db, redis)
        result.achievements_unlocked = await evaluator.evaluate(user_id)
        await db.commit()
    except Exception:
        await db.rollback()
        log.error("task_completion_achievements_failed", exc_info=True)

    # A rollback above expires loaded instances
    await db.refresh(task)

    log.info(
        "task_completed",
        points=result.points_awarded,
        streak=result.streak,
        achievements=result.achievements_unlocked,
    )
    return result
