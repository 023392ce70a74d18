"""Response models for the recommendations endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class ResourceResponse(BaseModel):
    title: str
    url: str
    description: str


class RecommendationResponse(BaseModel):
    id: str
    type: str
    title: str
    description: str
    reason: str
    suggested_task: str | None = None
    related_subject: str | None = None
    priority: int
    resources: list[ResourceResponse] = []


class SkillMetricsResponse(BaseModel):
    critical_thinking: int
    creativity: int
    collaboration: int
    communication: int
    self_direction: int
    social_emotional: int
