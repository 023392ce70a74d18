"""Achievement seed data, loaded once when the achievements table is empty."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import Achievement

logger = logging.getLogger(__name__)

ACHIEVEMENT_SEED_DATA: list[dict] = [
    {
        "slug": "first_task",
        "title": "First Task",
        "description": "Complete your first task",
        "icon": "CheckCircle",
        "points_required": 0,
        "trigger_type": "completed_tasks",
        "trigger_config": {"threshold": 1},
        "sort_order": 1,
    },
    {
        "slug": "task_master",
        "title": "Task Master",
        "description": "Complete 10 tasks",
        "icon": "Trophy",
        "points_required": 100,
        "trigger_type": "completed_tasks",
        "trigger_config": {"threshold": 10},
        "sort_order": 2,
    },
    {
        "slug": "streak_champion",
        "title": "Streak Champion",
        "description": "Maintain a 7-day learning streak",
        "icon": "Fire",
        "points_required": 0,
        "trigger_type": "streak",
        "trigger_config": {"threshold": 7},
        "sort_order": 3,
    },
    {
        "slug": "explorer",
        "title": "Explorer",
        "description": "Try 3 different subjects",
        "icon": "Compass",
        "points_required": 0,
        "trigger_type": "distinct_subjects",
        "trigger_config": {"threshold": 3},
        "sort_order": 4,
    },
    {
        "slug": "dedicated_learner",
        "title": "Dedicated Learner",
        "description": "Earn 500 points",
        "icon": "Star",
        "points_required": 500,
        "trigger_type": "points",
        "trigger_config": {},
        "sort_order": 5,
    },
]


async def seed_achievements(db: AsyncSession) -> int:
    """Insert the default achievements if none exist. Returns rows inserted."""
    count = await db.execute(select(func.count()).select_from(Achievement))
    if count.scalar_one() > 0:
        return 0

    now = datetime.now(timezone.utc)
    for data in ACHIEVEMENT_SEED_DATA:
        db.add(Achievement(**data, created_at=now))

    await db.commit()
    logger.info("Seeded %d achievements", len(ACHIEVEMENT_SEED_DATA))
    return len(ACHIEVEMENT_SEED_DATA)
