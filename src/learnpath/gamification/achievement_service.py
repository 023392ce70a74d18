"""Achievement evaluation: re-checks every unlock predicate for one user."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.models import Achievement, Task, User, UserAchievement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProgress:
    """Snapshot of the stats achievement predicates read."""

    completed_tasks: int
    streak: int
    points: int
    distinct_subjects: int


@dataclass(frozen=True)
class AchievementRule:
    """Plain copy of an Achievement row, safe to use after a session rollback."""

    id: int
    slug: str
    title: str
    icon: str | None
    points_required: int
    trigger_type: str
    threshold: int

    @classmethod
    def from_model(cls, achievement: Achievement) -> AchievementRule:
        config = achievement.trigger_config or {}
        return cls(
            id=achievement.id,
            slug=achievement.slug,
            title=achievement.title,
            icon=achievement.icon,
            points_required=achievement.points_required,
            trigger_type=achievement.trigger_type,
            threshold=int(config.get("threshold", 0)),
        )


# trigger_type -> predicate(progress, rule)
ACHIEVEMENT_TRIGGERS: dict[str, Callable[[UserProgress, AchievementRule], bool]] = {
    "completed_tasks": lambda p, r: p.completed_tasks >= r.threshold,
    "streak": lambda p, r: p.streak >= r.threshold,
    "points": lambda p, r: p.points >= r.points_required,
    "distinct_subjects": lambda p, r: p.distinct_subjects >= r.threshold,
}


def is_unlocked(progress: UserProgress, rule: AchievementRule) -> bool:
    """Evaluate one achievement's predicate. Unknown trigger types never unlock."""
    predicate = ACHIEVEMENT_TRIGGERS.get(rule.trigger_type)
    if predicate is None:
        logger.warning("Unknown achievement trigger: %s", rule.trigger_type)
        return False
    return predicate(progress, rule)


async def has_achievement(db: AsyncSession, user_id: int, achievement_id: int) -> bool:
    """Check if user already unlocked a specific achievement."""
    result = await db.execute(
        select(UserAchievement).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id == achievement_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def get_user_achievements(db: AsyncSession, user_id: int) -> list[UserAchievement]:
    """Unlocked achievements for a user, most recent first."""
    result = await db.execute(
        select(UserAchievement)
        .where(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.achieved_at.desc(), UserAchievement.id.desc())
    )
    return list(result.unique().scalars().all())


async def list_achievements(db: AsyncSession) -> list[Achievement]:
    """All active achievement definitions in display order."""
    result = await db.execute(
        select(Achievement)
        .where(Achievement.is_active.is_(True))
        .order_by(Achievement.sort_order, Achievement.id)
    )
    return list(result.scalars().all())


class AchievementEvaluator:
    """Unlocks achievements whose predicates hold for a user."""

    def __init__(self, db: AsyncSession, redis: object) -> None:
        self.db = db
        self.redis = redis
        self._rule_cache: list[AchievementRule] | None = None

    async def _load_rules(self) -> list[AchievementRule]:
        """Load and cache all active achievement definitions."""
        if self._rule_cache is None:
            self._rule_cache = [AchievementRule.from_model(a) for a in await list_achievements(self.db)]
        return self._rule_cache

    async def load_progress(self, user_id: int) -> UserProgress | None:
        """Build the predicate inputs from the user row and task table."""
        user = await self.db.get(User, user_id)
        if user is None:
            return None

        completed = await self.db.execute(
            select(func.count())
            .select_from(Task)
            .where(Task.user_id == user_id, Task.status == "completed")
        )
        subjects = await self.db.execute(
            select(func.count(distinct(Task.subject)))
            .where(Task.user_id == user_id, Task.subject.is_not(None))
        )

        return UserProgress(
            completed_tasks=completed.scalar_one(),
            streak=user.streak,
            points=user.points,
            distinct_subjects=subjects.scalar_one(),
        )

    async def evaluate(self, user_id: int) -> list[str]:
        """Check every achievement for the user.

        Returns slugs unlocked by this call (empty when nothing new).
        """
        progress = await self.load_progress(user_id)
        if progress is None:
            return []

        awarded: list[str] = []
        for rule in await self._load_rules():
            if not is_unlocked(progress, rule):
                continue
            if await self.award(user_id, rule):
                awarded.append(rule.slug)

        return awarded

    async def award(self, user_id: int, rule: AchievementRule) -> bool:
        """Insert the UserAchievement row. False if already unlocked."""
        if await has_achievement(self.db, user_id, rule.id):
            return False

        # Savepoint: a lost race undoes only this insert, not earlier awards
        try:
            async with self.db.begin_nested():
                self.db.add(UserAchievement(
                    user_id=user_id,
                    achievement_id=rule.id,
                    achieved_at=datetime.now(timezone.utc),
                ))
        except IntegrityError:
            logger.info("Achievement %s already unlocked concurrently for user %d", rule.slug, user_id)
            return False

        await self._emit_unlocked(user_id, rule)
        return True

    async def _emit_unlocked(self, user_id: int, rule: AchievementRule) -> None:
        """Broadcast an achievement unlock."""
        logger.info("User %d unlocked achievement %s", user_id, rule.slug)
        if self.redis is None:
            return
        try:
            await self.redis.publish(  # type: ignore[union-attr]
                "pubsub:achievement_unlocked",
                json.dumps({
                    "user_id": user_id,
                    "slug": rule.slug,
                    "title": rule.title,
                    "icon": rule.icon,
                }),
            )
        except Exception:
            logger.warning("Failed to publish achievement_unlocked", exc_info=True)
