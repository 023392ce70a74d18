"""User endpoints: /api/v1/users/* and the coach roster."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.database import get_session
from learnpath.users.schemas import (
    StudentListResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from learnpath.users.service import create_user, get_coach_students, get_user, update_user

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1", tags=["Users"])


@router.post("/users", response_model=UserResponse, status_code=201)
async def register_user(
    body: UserCreateRequest,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Create a student or coach account."""
    try:
        user = await create_user(
            db,
            email=body.email,
            name=body.name,
            user_type=body.user_type,
            coach_id=body.coach_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def read_user(
    user_id: int,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Get a user's profile and gamification summary fields."""
    user = await get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def patch_user(
    user_id: int,
    body: UserUpdateRequest,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update profile fields. Points, level and streak are not writable."""
    try:
        user = await update_user(db, user_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    await db.commit()
    return UserResponse.model_validate(user)


@router.get("/coaches/{coach_id}/students", response_model=StudentListResponse)
async def list_students(
    coach_id: int,
    db: AsyncSession = Depends(get_session),
) -> StudentListResponse:
    """Students supervised by a coach, for the coach dashboard."""
    coach = await get_user(db, coach_id)
    if coach is None or coach.user_type != "coach":
        raise HTTPException(status_code=404, detail="Coach not found")

    students = await get_coach_students(db, coach_id)
    return StudentListResponse(students=[UserResponse.model_validate(s) for s in students])
