"""Points ledger tests: projection consistency, idempotency and level-up events."""

from __future__ import annotations

import json

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import PointsHistory, User
from learnpath.gamification.points_service import (
    add_points,
    get_ledger_total,
    get_points_history,
    get_user_stats,
    rebuild_points_projection,
)


class TestAddPoints:
    """Test add_points."""

    @pytest.mark.asyncio
    async def test_appends_entry_and_updates_projection(self, db_session: AsyncSession, student: User):
        record = await add_points(db_session, None, student.id, 40, "Completed task: Essay")
        await db_session.commit()

        assert record is not None
        assert record.amount == 40
        assert student.points == 40
        assert student.level == 1

    @pytest.mark.asyncio
    async def test_level_matches_ledger_after_many_awards(self, db_session: AsyncSession, student: User):
        for amount in (15, 20, 10, 15, 20, 20, 15, 10):
            await add_points(db_session, None, student.id, amount, "award")
        await db_session.commit()

        total = await get_ledger_total(db_session, student.id)
        assert total == 125
        assert student.points == total
        assert student.level == total // 100 + 1

    @pytest.mark.asyncio
    async def test_idempotency_key_prevents_duplicate(self, db_session: AsyncSession, student: User):
        first = await add_points(db_session, None, student.id, 15, "award", idempotency_key="task-complete:1")
        second = await add_points(db_session, None, student.id, 15, "award", idempotency_key="task-complete:1")
        await db_session.commit()

        assert first is not None
        assert second is None
        count = await db_session.execute(
            select(func.count()).select_from(PointsHistory).where(PointsHistory.user_id == student.id)
        )
        assert count.scalar_one() == 1
        assert student.points == 15

    @pytest.mark.asyncio
    async def test_negative_amount_is_recorded(self, db_session: AsyncSession, student: User):
        await add_points(db_session, None, student.id, 50, "award")
        await add_points(db_session, None, student.id, -20, "correction")
        await db_session.commit()
        assert student.points == 30

    @pytest.mark.asyncio
    async def test_unknown_user_raises(self, db_session: AsyncSession):
        with pytest.raises(LookupError):
            await add_points(db_session, None, 9999, 10, "award")

    @pytest.mark.asyncio
    async def test_level_up_publishes_event(self, db_session: AsyncSession, student: User, fake_redis):
        await add_points(db_session, fake_redis, student.id, 90, "award")
        fake_redis.publish.assert_not_awaited()

        await add_points(db_session, fake_redis, student.id, 15, "award")
        fake_redis.publish.assert_awaited_once()
        channel, payload = fake_redis.publish.await_args.args
        assert channel == "pubsub:level_up"
        assert json.loads(payload) == {"user_id": student.id, "old_level": 1, "new_level": 2}

    @pytest.mark.asyncio
    async def test_publish_failure_is_not_raised(self, db_session: AsyncSession, student: User, fake_redis):
        fake_redis.publish.side_effect = ConnectionError("redis down")
        record = await add_points(db_session, fake_redis, student.id, 150, "award")
        assert record is not None
        assert student.level == 2


class TestLedgerQueries:
    """History, stats and projection rebuild."""

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, db_session: AsyncSession, student: User):
        await add_points(db_session, None, student.id, 10, "first")
        await add_points(db_session, None, student.id, 20, "second")
        await db_session.commit()

        history = await get_points_history(db_session, student.id)
        assert [h.reason for h in history] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_stats_read_from_ledger(self, db_session: AsyncSession, student: User):
        await add_points(db_session, None, student.id, 230, "award")
        await db_session.commit()

        stats = await get_user_stats(db_session, student.id)
        assert stats == {"points": 230, "level": 3, "streak": 0}

    @pytest.mark.asyncio
    async def test_stats_for_unknown_user(self, db_session: AsyncSession):
        assert await get_user_stats(db_session, 9999) is None

    @pytest.mark.asyncio
    async def test_rebuild_repairs_drift(self, db_session: AsyncSession, student: User):
        await add_points(db_session, None, student.id, 120, "award")
        student.points = 999
        student.level = 10
        await db_session.commit()

        user = await rebuild_points_projection(db_session, student.id)
        await db_session.commit()

        assert user.points == 120
        assert user.level == 2
