"""Streak tests: daily cadence, same-day repeats, gaps and clock skew."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import User
from learnpath.gamification.streak_service import next_streak, update_streak

DAY = date(2026, 3, 2)


class TestNextStreak:
    """Pure streak transition."""

    def test_first_activity_starts_streak(self):
        assert next_streak(0, None, DAY) == (1, DAY)

    def test_same_day_is_noop(self):
        assert next_streak(4, DAY, DAY) == (4, DAY)

    def test_consecutive_day_increments(self):
        assert next_streak(4, DAY, DAY + timedelta(days=1)) == (5, DAY + timedelta(days=1))

    def test_gap_resets_to_one(self):
        assert next_streak(4, DAY, DAY + timedelta(days=2)) == (1, DAY + timedelta(days=2))

    def test_last_active_in_future_is_noop(self):
        """Clock skew: an activity dated before the last one changes nothing."""
        assert next_streak(3, DAY, DAY - timedelta(days=1)) == (3, DAY)

    def test_month_boundary(self):
        assert next_streak(2, date(2026, 1, 31), date(2026, 2, 1)) == (3, date(2026, 2, 1))


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0, 0)


class TestUpdateStreak:
    """Streak persisted on the user row."""

    @pytest.mark.asyncio
    async def test_three_consecutive_days(self, db_session: AsyncSession, student: User):
        for offset in range(3):
            await update_streak(db_session, None, student.id, now=_at(DAY + timedelta(days=offset)))
            await db_session.commit()

        user = await db_session.get(User, student.id)
        assert user.streak == 3
        assert user.last_active_date == DAY + timedelta(days=2)

    @pytest.mark.asyncio
    async def test_skipped_day_resets(self, db_session: AsyncSession, student: User):
        await update_streak(db_session, None, student.id, now=_at(DAY))
        await update_streak(db_session, None, student.id, now=_at(DAY + timedelta(days=2)))
        await db_session.commit()

        user = await db_session.get(User, student.id)
        assert user.streak == 1
        assert user.last_active_date == DAY + timedelta(days=2)

    @pytest.mark.asyncio
    async def test_same_day_twice_counts_once(self, db_session: AsyncSession, student: User):
        await update_streak(db_session, None, student.id, now=_at(DAY, 8))
        await update_streak(db_session, None, student.id, now=_at(DAY, 22))
        await db_session.commit()

        user = await db_session.get(User, student.id)
        assert user.streak == 1

    @pytest.mark.asyncio
    async def test_unknown_user_returns_none(self, db_session: AsyncSession):
        assert await update_streak(db_session, None, 9999, now=_at(DAY)) is None

    @pytest.mark.asyncio
    async def test_publishes_streak_update(self, db_session: AsyncSession, student: User, fake_redis):
        await update_streak(db_session, fake_redis, student.id, now=_at(DAY))
        fake_redis.publish.assert_awaited_once()
        channel = fake_redis.publish.await_args.args[0]
        assert channel == "pubsub:streak_update"

    @pytest.mark.asyncio
    async def test_no_publish_when_unchanged(self, db_session: AsyncSession, student: User, fake_redis):
        await update_streak(db_session, None, student.id, now=_at(DAY))
        await update_streak(db_session, fake_redis, student.id, now=_at(DAY, 18))
        fake_redis.publish.assert_not_awaited()
