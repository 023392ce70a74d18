"""Recommendation endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.database import get_session
from learnpath.recommendations.engine import generate_recommendations, get_skill_metrics
from learnpath.recommendations.schemas import RecommendationResponse, SkillMetricsResponse

router = APIRouter(prefix="/api/v1", tags=["Recommendations"])


@router.get("/users/{user_id}/recommendations", response_model=list[RecommendationResponse])
async def read_recommendations(user_id: int, db: AsyncSession = Depends(get_session)):
    """Personalized learning recommendations, highest priority first."""
    recommendations = await generate_recommendations(db, user_id)
    if recommendations is None:
        raise HTTPException(status_code=404, detail="User not found")

    return [
        RecommendationResponse(**{**asdict(r), "type": r.type.value})
        for r in recommendations
    ]


@router.get("/users/{user_id}/skills", response_model=SkillMetricsResponse)
async def read_skills(user_id: int, db: AsyncSession = Depends(get_session)):
    """Derived 0-100 skill scores."""
    metrics = await get_skill_metrics(db, user_id)
    if metrics is None:
        raise HTTPException(status_code=404, detail="User not found")
    return SkillMetricsResponse(**metrics.as_dict())
