"""Dashboard aggregation tests: student analytics and coach summary."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.dashboard.service import get_coach_stats, get_user_analytics
from learnpath.db.models import Task, User
from learnpath.users.service import create_user

NOW = datetime(2026, 3, 20, 12, 0, tzinfo=timezone.utc)


def _task(user_id: int, status: str, subject: str | None, days_ago: float, **fields) -> Task:
    return Task(
        user_id=user_id,
        title=f"{subject or 'Misc'} {status}",
        subject=subject,
        status=status,
        proof_files=[],
        created_at=NOW - timedelta(days=60),
        updated_at=NOW - timedelta(days=days_ago),
        **fields,
    )


class TestUserAnalytics:

    @pytest.mark.asyncio
    async def test_counts_and_rates(self, db_session: AsyncSession, student: User):
        db_session.add_all([
            _task(student.id, "completed", "Mathematics", 1),
            _task(student.id, "pending", "Mathematics", 2),
            _task(student.id, "completed", "Science", 10),
            _task(student.id, "in-progress", None, 40),
            _task(student.id, "completed", "Science", 40),
        ])
        await db_session.commit()

        analytics = await get_user_analytics(db_session, student.id, now=NOW)

        assert analytics["total_tasks"] == 5
        assert analytics["completed_tasks"] == 3
        assert analytics["in_progress_tasks"] == 1
        assert analytics["pending_tasks"] == 1
        assert analytics["completion_rate"] == 60.0
        assert analytics["subject_performance"] == [
            {"subject": "Mathematics", "completed": 1, "total": 2, "completion_rate": 50.0},
            {"subject": "Science", "completed": 2, "total": 2, "completion_rate": 100.0},
            {"subject": "Uncategorized", "completed": 0, "total": 1, "completion_rate": 0.0},
        ]

    @pytest.mark.asyncio
    async def test_weekly_progress_covers_four_weeks(self, db_session: AsyncSession, student: User):
        db_session.add_all([
            _task(student.id, "completed", "Mathematics", 1),
            _task(student.id, "completed", "Science", 10),
            _task(student.id, "completed", "Science", 27),
            _task(student.id, "completed", "Science", 40),
            _task(student.id, "pending", "History", 3),
        ])
        await db_session.commit()

        analytics = await get_user_analytics(db_session, student.id, now=NOW)

        assert analytics["weekly_progress"] == [
            {"week": "Week 1", "completed": 1},
            {"week": "Week 2", "completed": 0},
            {"week": "Week 3", "completed": 1},
            {"week": "Week 4", "completed": 1},
        ]

    @pytest.mark.asyncio
    async def test_recent_activity_newest_first(self, db_session: AsyncSession, student: User):
        db_session.add_all([
            _task(student.id, "pending", "History", 3),
            _task(student.id, "completed", "Mathematics", 1),
            _task(student.id, "completed", "Science", 20),
        ])
        await db_session.commit()

        analytics = await get_user_analytics(db_session, student.id, now=NOW)

        assert [a["subject"] for a in analytics["recent_activity"]] == ["Mathematics", "History"]

    @pytest.mark.asyncio
    async def test_projection_fields_come_from_user(self, db_session: AsyncSession, student: User):
        student.points = 240
        student.level = 3
        student.streak = 4
        await db_session.commit()

        analytics = await get_user_analytics(db_session, student.id, now=NOW)

        assert (analytics["points"], analytics["level"], analytics["streak"]) == (240, 3, 4)

    @pytest.mark.asyncio
    async def test_no_tasks(self, db_session: AsyncSession, student: User):
        analytics = await get_user_analytics(db_session, student.id, now=NOW)

        assert analytics["total_tasks"] == 0
        assert analytics["completion_rate"] == 0.0
        assert analytics["subject_performance"] == []
        assert [w["completed"] for w in analytics["weekly_progress"]] == [0, 0, 0, 0]

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session: AsyncSession):
        assert await get_user_analytics(db_session, 9999) is None


class TestCoachStats:

    @pytest.mark.asyncio
    async def test_summary_over_supervised_students(self, db_session: AsyncSession, coach: User):
        first = await create_user(db_session, email="first@example.com", coach_id=coach.id)
        second = await create_user(db_session, email="second@example.com", coach_id=coach.id)
        other = await create_user(db_session, email="other@example.com")
        db_session.add_all([
            _task(first.id, "pending", "Science", 5, assigned_by_coach_id=coach.id, is_coach_task=True),
            _task(first.id, "completed", "Mathematics", 0),
            _task(second.id, "completed", "History", 2),
            _task(second.id, "pending", "English", 1),
            _task(other.id, "pending", "English", 1),
        ])
        await db_session.commit()

        stats = await get_coach_stats(db_session, coach.id, now=NOW)

        assert stats == {
            "coach_id": coach.id,
            "total_students": 2,
            "tasks_assigned": 1,
            "completed_today": 1,
            "pending_tasks": 2,
        }

    @pytest.mark.asyncio
    async def test_coach_without_students(self, db_session: AsyncSession, coach: User):
        stats = await get_coach_stats(db_session, coach.id, now=NOW)

        assert stats["total_students"] == 0
        assert stats["tasks_assigned"] == 0
        assert stats["completed_today"] == 0
        assert stats["pending_tasks"] == 0

    @pytest.mark.asyncio
    async def test_student_is_not_a_coach(self, db_session: AsyncSession, student: User):
        assert await get_coach_stats(db_session, student.id) is None
