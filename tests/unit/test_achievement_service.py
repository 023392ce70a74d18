"""Achievement evaluation tests: predicates, idempotency and thresholds."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import Achievement, Task, User, UserAchievement
from learnpath.gamification.achievement_service import (
    AchievementEvaluator,
    AchievementRule,
    UserProgress,
    get_user_achievements,
    is_unlocked,
)


def _rule(trigger_type: str, threshold: int = 0, points_required: int = 0) -> AchievementRule:
    return AchievementRule(
        id=1,
        slug="test",
        title="Test",
        icon=None,
        points_required=points_required,
        trigger_type=trigger_type,
        threshold=threshold,
    )


def _progress(**overrides) -> UserProgress:
    values = {"completed_tasks": 0, "streak": 0, "points": 0, "distinct_subjects": 0}
    values.update(overrides)
    return UserProgress(**values)


async def _add_tasks(db: AsyncSession, user_id: int, count: int, status: str = "completed", subject: str | None = None):
    for i in range(count):
        db.add(Task(user_id=user_id, title=f"Task {i}", subject=subject, status=status, proof_files=[]))
    await db.commit()


class TestPredicates:
    """Test is_unlocked for each trigger type."""

    def test_completed_tasks_threshold(self):
        rule = _rule("completed_tasks", threshold=10)
        assert not is_unlocked(_progress(completed_tasks=9), rule)
        assert is_unlocked(_progress(completed_tasks=10), rule)

    def test_streak_threshold(self):
        rule = _rule("streak", threshold=7)
        assert not is_unlocked(_progress(streak=6), rule)
        assert is_unlocked(_progress(streak=7), rule)

    def test_points_uses_points_required(self):
        rule = _rule("points", points_required=500)
        assert not is_unlocked(_progress(points=499), rule)
        assert is_unlocked(_progress(points=500), rule)

    def test_distinct_subjects_threshold(self):
        rule = _rule("distinct_subjects", threshold=3)
        assert is_unlocked(_progress(distinct_subjects=3), rule)

    def test_unknown_trigger_never_unlocks(self):
        assert not is_unlocked(_progress(completed_tasks=100), _rule("moon_phase"))


class TestAchievementEvaluator:
    """Evaluator against the seeded achievement set."""

    @pytest.mark.asyncio
    async def test_first_task_unlocked(self, db_session: AsyncSession, student: User):
        await _add_tasks(db_session, student.id, 1)

        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        await db_session.commit()

        assert awarded == ["first_task"]

    @pytest.mark.asyncio
    async def test_evaluate_twice_awards_once(self, db_session: AsyncSession, student: User):
        await _add_tasks(db_session, student.id, 1)

        first = await AchievementEvaluator(db_session, None).evaluate(student.id)
        await db_session.commit()
        second = await AchievementEvaluator(db_session, None).evaluate(student.id)
        await db_session.commit()

        assert first == ["first_task"]
        assert second == []
        count = await db_session.execute(
            select(func.count()).select_from(UserAchievement).where(UserAchievement.user_id == student.id)
        )
        assert count.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_nine_tasks_is_not_task_master(self, db_session: AsyncSession, student: User):
        await _add_tasks(db_session, student.id, 9)

        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        assert "task_master" not in awarded

        await _add_tasks(db_session, student.id, 1)
        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        assert awarded == ["task_master"]

    @pytest.mark.asyncio
    async def test_explorer_counts_distinct_subjects(self, db_session: AsyncSession, student: User):
        for subject in ("Mathematics", "Science", "History"):
            await _add_tasks(db_session, student.id, 1, status="pending", subject=subject)

        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        assert awarded == ["explorer"]

    @pytest.mark.asyncio
    async def test_points_and_streak_achievements(self, db_session: AsyncSession, student: User):
        student.points = 500
        student.streak = 7
        await db_session.commit()

        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        assert set(awarded) == {"streak_champion", "dedicated_learner"}

    @pytest.mark.asyncio
    async def test_unknown_user_awards_nothing(self, db_session: AsyncSession):
        assert await AchievementEvaluator(db_session, None).evaluate(9999) == []

    @pytest.mark.asyncio
    async def test_unlock_publishes_event(self, db_session: AsyncSession, student: User, fake_redis):
        await _add_tasks(db_session, student.id, 1)

        await AchievementEvaluator(db_session, fake_redis).evaluate(student.id)

        channel, payload = fake_redis.publish.await_args.args
        assert channel == "pubsub:achievement_unlocked"
        assert json.loads(payload)["slug"] == "first_task"

    @pytest.mark.asyncio
    async def test_user_achievements_listed(self, db_session: AsyncSession, student: User):
        await _add_tasks(db_session, student.id, 1)
        await AchievementEvaluator(db_session, None).evaluate(student.id)
        await db_session.commit()

        unlocked = await get_user_achievements(db_session, student.id)
        assert [ua.achievement.slug for ua in unlocked] == ["first_task"]

    @pytest.mark.asyncio
    async def test_lost_race_keeps_earlier_awards(self, db_session: AsyncSession, student: User, monkeypatch):
        student.points = 500
        student.streak = 7
        achievement_id = (await db_session.execute(
            select(Achievement.id).where(Achievement.slug == "dedicated_learner")
        )).scalar_one()
        # Another request already unlocked dedicated_learner after the existence check
        db_session.add(UserAchievement(
            user_id=student.id,
            achievement_id=achievement_id,
            achieved_at=datetime.now(timezone.utc),
        ))
        await db_session.commit()

        async def never_unlocked(db, user_id, achievement_id):
            return False

        monkeypatch.setattr("learnpath.gamification.achievement_service.has_achievement", never_unlocked)

        awarded = await AchievementEvaluator(db_session, None).evaluate(student.id)
        await db_session.commit()

        assert awarded == ["streak_champion"]
        unlocked = await get_user_achievements(db_session, student.id)
        assert {ua.achievement.slug for ua in unlocked} == {"streak_champion", "dedicated_learner"}
