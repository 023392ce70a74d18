"""Request/response schemas for task endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskCategory = Literal["brain", "body", "heart", "community"]


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    subject: str | None = Field(None, max_length=64)
    resource_link: str | None = None
    category: TaskCategory = "brain"
    due_date: str | None = Field(None, max_length=32)
    assigned_by_coach_id: int | None = None


class TaskUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    subject: str | None = Field(None, max_length=64)
    resource_link: str | None = None
    category: TaskCategory | None = None
    status: TaskStatus | None = None
    due_date: str | None = Field(None, max_length=32)
    order: int | None = None


class TaskCompleteRequest(BaseModel):
    proof_text: str | None = None
    proof_link: str | None = None
    proof_files: list[str] | None = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: str | None = None
    subject: str | None = None
    resource_link: str | None = None
    category: str
    status: str
    due_date: str | None = None
    assigned_by_coach_id: int | None = None
    is_coach_task: bool
    order: int
    proof_text: str | None = None
    proof_link: str | None = None
    proof_files: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]


class TaskCompletionResponse(BaseModel):
    task: TaskResponse
    points_awarded: int
    streak: int | None = None
    achievements_unlocked: list[str] = []
    already_completed: bool = False
