"""Dashboard endpoints: student analytics and coach summary."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.dashboard.schemas import CoachStatsResponse, UserAnalyticsResponse
from learnpath.dashboard.service import get_coach_stats, get_user_analytics
from learnpath.database import get_session

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])


@router.get("/users/{user_id}/analytics", response_model=UserAnalyticsResponse)
async def read_user_analytics(user_id: int, db: AsyncSession = Depends(get_session)):
    """Completion rate, status counts, subject performance and 4-week progress."""
    analytics = await get_user_analytics(db, user_id)
    if analytics is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserAnalyticsResponse(**analytics)


@router.get("/coaches/{coach_id}/stats", response_model=CoachStatsResponse)
async def read_coach_stats(coach_id: int, db: AsyncSession = Depends(get_session)):
    stats = await get_coach_stats(db, coach_id)
    if stats is None:
        raise HTTPException(status_code=404, detail="Coach not found")
    return CoachStatsResponse(**stats)
