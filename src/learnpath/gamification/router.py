"""Gamification API endpoints: stats, points ledger, streak activity, achievements."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.database import get_session
from learnpath.dependencies import get_redis_dep
from learnpath.gamification.achievement_service import (
    AchievementEvaluator,
    get_user_achievements,
    list_achievements,
)
from learnpath.gamification.levels import level_progress
from learnpath.gamification.points_service import (
    get_points_history,
    get_user_stats,
    rebuild_points_projection,
)
from learnpath.gamification.schemas import (
    AchievementResponse,
    ActivityResponse,
    AllAchievementsResponse,
    LevelResponse,
    PointsHistoryEntry,
    PointsHistoryResponse,
    UnlockedAchievementResponse,
    UserAchievementsResponse,
    UserStatsResponse,
)
from learnpath.gamification.streak_service import update_streak
from learnpath.users.schemas import UserResponse
from learnpath.users.service import get_user

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/achievements", response_model=AllAchievementsResponse)
async def read_achievements(db: AsyncSession = Depends(get_session)):
    """Get all active achievement definitions."""
    achievements = await list_achievements(db)
    return AllAchievementsResponse(achievements=[
        AchievementResponse(
            slug=a.slug,
            title=a.title,
            description=a.description,
            icon=a.icon,
            points_required=a.points_required,
            trigger_type=a.trigger_type,
        )
        for a in achievements
    ])


@router.get("/levels/{points}", response_model=LevelResponse)
async def read_level(points: int):
    """Level and progress for a points total."""
    return LevelResponse(**level_progress(points))


# ── Per-user endpoints ──


@router.get("/users/{user_id}/stats", response_model=UserStatsResponse)
async def read_user_stats(user_id: int, db: AsyncSession = Depends(get_session)):
    """Points, level and streak, computed from the points ledger."""
    stats = await get_user_stats(db, user_id)
    if stats is None:
        raise HTTPException(status_code=404, detail="User not found")

    user = await get_user(db, user_id)
    progress = level_progress(stats["points"])
    unlocked = await get_user_achievements(db, user_id)

    return UserStatsResponse(
        user_id=user_id,
        points=stats["points"],
        level=stats["level"],
        streak=stats["streak"],
        last_active_date=user.last_active_date,
        points_into_level=progress["points_into_level"],
        points_for_level=progress["points_for_level"],
        next_level_at=progress["next_level_at"],
        achievements_unlocked=len(unlocked),
    )


@router.get("/users/{user_id}/points/history", response_model=PointsHistoryResponse)
async def read_points_history(user_id: int, db: AsyncSession = Depends(get_session)):
    """Points ledger, newest first."""
    if await get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    entries = await get_points_history(db, user_id)
    return PointsHistoryResponse(
        entries=[
            PointsHistoryEntry(
                id=e.id,
                amount=e.amount,
                reason=e.reason,
                task_id=e.task_id,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=sum(e.amount for e in entries),
    )


@router.post("/users/{user_id}/points/rebuild", response_model=UserResponse)
async def rebuild_points(user_id: int, db: AsyncSession = Depends(get_session)):
    """Recompute cached points and level from the ledger."""
    user = await rebuild_points_projection(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    await db.commit()
    return UserResponse.model_validate(user)


@router.post("/users/{user_id}/activity", response_model=ActivityResponse)
async def record_activity(
    user_id: int,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Record a streak-qualifying activity and re-check achievements."""
    user = await update_streak(db, redis, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    await db.commit()
    response = ActivityResponse(streak=user.streak, last_active_date=user.last_active_date)

    response.achievements_unlocked = await AchievementEvaluator(db, redis).evaluate(user_id)
    await db.commit()
    return response


@router.get("/users/{user_id}/achievements", response_model=UserAchievementsResponse)
async def read_user_achievements(user_id: int, db: AsyncSession = Depends(get_session)):
    """Achievements unlocked by a user, most recent first."""
    if await get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    unlocked = await get_user_achievements(db, user_id)
    available = await list_achievements(db)

    return UserAchievementsResponse(
        unlocked=[
            UnlockedAchievementResponse(
                slug=ua.achievement.slug,
                title=ua.achievement.title,
                icon=ua.achievement.icon,
                achieved_at=ua.achieved_at,
            )
            for ua in unlocked
        ],
        total_available=len(available),
        total_unlocked=len(unlocked),
    )
