"""User store: lookup, creation and partial updates."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from learnpath.db.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

USER_TYPES = frozenset({"student", "coach"})

# Gamification fields are owned by the points ledger and streak tracker
_PROTECTED_FIELDS = frozenset({"id", "points", "level", "streak", "last_active_date", "created_at"})


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by id."""
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    name: str | None = None,
    user_type: str = "student",
    coach_id: int | None = None,
) -> User:
    """
    Create a user.

    Raises:
        ValueError: If the email is taken, the user type is unknown, or the coach does not exist.
    """
    if user_type not in USER_TYPES:
        msg = f"Unknown user type: {user_type}"
        raise ValueError(msg)

    if await get_user_by_email(db, email) is not None:
        msg = "Email already registered"
        raise ValueError(msg)

    if coach_id is not None:
        coach = await get_user(db, coach_id)
        if coach is None or coach.user_type != "coach":
            msg = "Coach not found"
            raise ValueError(msg)

    now = datetime.now(timezone.utc)
    user = User(
        email=email.lower(),
        name=name,
        user_type=user_type,
        coach_id=coach_id,
        points=0,
        level=1,
        streak=0,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.flush()

    logger.info("user_created", user_id=user.id, user_type=user_type)
    return user


async def update_user(db: AsyncSession, user_id: int, changes: dict[str, Any]) -> User | None:
    """
    Apply a partial update to profile fields.

    Raises:
        ValueError: If a gamification-owned or unknown field is targeted.
    """
    user = await get_user(db, user_id)
    if user is None:
        return None

    for field, value in changes.items():
        if field in _PROTECTED_FIELDS or not hasattr(User, field):
            msg = f"Field cannot be updated: {field}"
            raise ValueError(msg)
        if field == "coach_id" and value is not None:
            coach = await get_user(db, value)
            if coach is None or coach.user_type != "coach":
                msg = "Coach not found"
                raise ValueError(msg)
        setattr(user, field, value)

    user.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return user


async def get_coach_students(db: AsyncSession, coach_id: int) -> list[User]:
    """Students supervised by a coach."""
    result = await db.execute(
        select(User).where(User.coach_id == coach_id).order_by(User.id)
    )
    return list(result.scalars().all())
