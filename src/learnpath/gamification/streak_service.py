"""Daily streak tracking."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import User

logger = logging.getLogger(__name__)


def next_streak(current: int, last_active: date | None, today: date) -> tuple[int, date | None]:
    """Return (streak, last_active_date) after an activity on `today`.

    - first activity ever: 1
    - same day, or last_active in the future (clock skew): unchanged
    - consecutive day: +1
    - gap of 2+ days: reset to 1
    """
    if last_active is None:
        return 1, today

    diff_days = (today - last_active).days
    if diff_days <= 0:
        return current, last_active
    if diff_days == 1:
        return current + 1, today
    return 1, today


async def update_streak(
    db: AsyncSession,
    redis: object,
    user_id: int,
    now: datetime | None = None,
) -> User | None:
    """Record a streak-qualifying activity for the user.

    Days are calendar days of the server's local clock. Returns the user,
    or None if the user does not exist.
    """
    if now is None:
        now = datetime.now()
    today = now.date()

    result = await db.execute(
        select(User).where(User.id == user_id).with_for_update()
    )
    user = result.scalar_one_or_none()
    if user is None:
        return None

    old_streak = user.streak
    streak, last_active = next_streak(user.streak, user.last_active_date, today)
    if streak == old_streak and last_active == user.last_active_date:
        return user

    user.streak = streak
    user.last_active_date = last_active
    user.updated_at = datetime.now(timezone.utc)
    await db.flush()

    event = "streak_extended" if streak > old_streak else "streak_reset"
    await _emit_streak_update(redis, user_id, event, streak)
    return user


async def _emit_streak_update(redis: object, user_id: int, event: str, streak: int) -> None:
    """Broadcast a streak change."""
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[union-attr]
            "pubsub:streak_update",
            json.dumps({
                "user_id": user_id,
                "event": event,
                "streak": streak,
            }),
        )
    except Exception:
        logger.warning("Failed to publish streak_update", exc_info=True)
