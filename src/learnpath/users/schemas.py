"""Request/response schemas for user endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    name: str | None = Field(None, max_length=128)
    user_type: Literal["student", "coach"] = "student"
    coach_id: int | None = None


class UserUpdateRequest(BaseModel):
    name: str | None = Field(None, max_length=128)
    coach_id: int | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None = None
    user_type: str
    coach_id: int | None = None
    points: int
    level: int
    streak: int
    last_active_date: date | None = None
    created_at: datetime | None = None


class StudentListResponse(BaseModel):
    students: list[UserResponse]
