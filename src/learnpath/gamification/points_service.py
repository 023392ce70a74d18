"""Points ledger with idempotency, projection upkeep and level-up detection."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import PointsHistory, User
from learnpath.gamification.levels import compute_level

logger = logging.getLogger(__name__)


async def _lock_user(db: AsyncSession, user_id: int) -> User | None:
    """Load a user row with a row lock so per-user updates serialize."""
    result = await db.execute(
        select(User).where(User.id == user_id).with_for_update()
    )
    return result.scalar_one_or_none()


async def add_points(
    db: AsyncSession,
    redis: object,
    user_id: int,
    amount: int,
    reason: str,
    task_id: int | None = None,
    idempotency_key: str | None = None,
) -> PointsHistory | None:
    """Append a ledger entry and update the user's cached points/level.

    Returns the new record, or None if idempotency_key was already used.
    Raises LookupError if the user does not exist.

    After appending:
    1. user.points = points_before + amount
    2. user.level recomputed from user.points
    3. If level increased, publish level_up
    """
    if idempotency_key is not None:
        existing = await db.execute(
            select(PointsHistory).where(PointsHistory.idempotency_key == idempotency_key)
        )
        if existing.scalar_one_or_none():
            return None

    user = await _lock_user(db, user_id)
    if user is None:
        msg = f"User {user_id} not found"
        raise LookupError(msg)

    now = datetime.now(timezone.utc)

    record = PointsHistory(
        user_id=user_id,
        amount=amount,
        reason=reason,
        task_id=task_id,
        idempotency_key=idempotency_key,
        created_at=now,
    )
    db.add(record)

    old_level = user.level
    user.points = user.points + amount
    user.level = compute_level(user.points)
    user.updated_at = now

    await db.flush()

    if user.level > old_level:
        await _emit_level_up(redis, user_id, old_level, user.level)

    return record


async def get_points_history(db: AsyncSession, user_id: int) -> list[PointsHistory]:
    """All ledger entries for a user, newest first."""
    result = await db.execute(
        select(PointsHistory)
        .where(PointsHistory.user_id == user_id)
        .order_by(PointsHistory.created_at.desc(), PointsHistory.id.desc())
    )
    return list(result.scalars().all())


async def get_ledger_total(db: AsyncSession, user_id: int) -> int:
    """Sum of all ledger amounts for a user."""
    result = await db.execute(
        select(func.coalesce(func.sum(PointsHistory.amount), 0)).where(PointsHistory.user_id == user_id)
    )
    return int(result.scalar_one())


async def get_user_stats(db: AsyncSession, user_id: int) -> dict | None:
    """Points, level and streak computed from the ledger (not the cache)."""
    user = await db.get(User, user_id)
    if user is None:
        return None

    points = await get_ledger_total(db, user_id)
    return {
        "points": points,
        "level": compute_level(points),
        "streak": user.streak,
    }


async def rebuild_points_projection(db: AsyncSession, user_id: int) -> User | None:
    """Replay the ledger into the user's cached points/level."""
    user = await _lock_user(db, user_id)
    if user is None:
        return None

    points = await get_ledger_total(db, user_id)
    if points != user.points:
        logger.warning(
            "Points projection drift for user %d: cached=%d ledger=%d",
            user_id, user.points, points,
        )
    user.points = points
    user.level = compute_level(points)
    user.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return user


async def _emit_level_up(
    redis: object,
    user_id: int,
    old_level: int,
    new_level: int,
) -> None:
    """Broadcast a level-up event for live dashboards."""
    logger.info("User %d levelled up: %d -> %d", user_id, old_level, new_level)
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[union-attr]
            "pubsub:level_up",
            json.dumps({
                "user_id": user_id,
                "old_level": old_level,
                "new_level": new_level,
            }),
        )
    except Exception:
        logger.warning("Failed to publish level_up broadcast", exc_info=True)
