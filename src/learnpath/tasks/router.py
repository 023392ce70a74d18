"""Task endpoints, including the completion trigger for gamification."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.database import get_session
from learnpath.dependencies import get_redis_dep
from learnpath.tasks.schemas import (
    TaskCompleteRequest,
    TaskCompletionResponse,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskStatus,
    TaskUpdateRequest,
)
from learnpath.tasks.service import (
    complete_task,
    create_task,
    get_task,
    get_tasks,
    get_tasks_by_status,
    update_task,
)
from learnpath.users.service import get_user

router = APIRouter(prefix="/api/v1", tags=["Tasks"])


@router.post("/users/{user_id}/tasks", response_model=TaskResponse, status_code=201)
async def add_task(
    user_id: int,
    body: TaskCreateRequest,
    db: AsyncSession = Depends(get_session),
):
    """Create a task. The subject is guessed from the title when omitted."""
    if await get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        task = await create_task(db, user_id=user_id, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return TaskResponse.model_validate(task)


@router.get("/users/{user_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    user_id: int,
    status: TaskStatus | None = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """A user's tasks, optionally filtered by status."""
    if await get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    if status is None:
        tasks = await get_tasks(db, user_id)
    else:
        tasks = await get_tasks_by_status(db, user_id, status)
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def read_task(task_id: int, db: AsyncSession = Depends(get_session)):
    task = await get_task(db, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.model_validate(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def patch_task(
    task_id: int,
    body: TaskUpdateRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Partial update. Setting status to completed runs the completion flow."""
    try:
        task = await update_task(db, redis, task_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.model_validate(task)


@router.put("/tasks/{task_id}/complete", response_model=TaskCompletionResponse)
async def complete(
    task_id: int,
    body: TaskCompleteRequest | None = None,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Mark a task completed with optional proof of work.

    Points, streak and achievements are best-effort: the response reports
    success whenever the status change was saved.
    """
    proof = body.model_dump(exclude_none=True) if body else None
    result = await complete_task(db, redis, task_id, proof=proof)
    if result is None:
        raise HTTPException(status_code=404, detail="Task not found")

    return TaskCompletionResponse(
        task=TaskResponse.model_validate(result.task),
        points_awarded=result.points_awarded,
        streak=result.streak,
        achievements_unlocked=result.achievements_unlocked,
        already_completed=result.already_completed,
    )
