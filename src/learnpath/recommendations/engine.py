"""Rule-based learning recommendations.

Recommendations are generated fresh on every call from the user's full
task list and derived skill metrics. Rules in RECOMMENDATION_RULES are
evaluated in order, every firing rule contributes, and the result is
stably sorted by priority (highest first). Identical input always gives
identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from learnpath.recommendations.content import (
    challenge_text,
    exploration_text,
    knowledge_text,
    subject_resources,
)
from learnpath.tasks.categorization import SUBJECT_CATEGORIES
from learnpath.tasks.service import get_tasks
from learnpath.users.service import get_user

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

MIN_TASKS_FOR_ANALYSIS = 5
MIN_TASKS_FOR_WEAKEST = 3
CHALLENGE_COMPLETED_THRESHOLD = 10
MIN_CATEGORIZED_FOR_BALANCE = 5
STRONG_METRIC_THRESHOLD = 70

# Learning categories for the balance rule
SUBJECT_GROUPS: dict[str, tuple[str, ...]] = {
    "knowledge": ("Mathematics", "Science", "History", "English"),
    "skills": ("Life Skills", "Physical Activity"),
    "interests": ("Interest / Passion",),
}


class RecommendationType(str, Enum):
    SUBJECT_EXPLORATION = "subject_exploration"
    SKILL_DEVELOPMENT = "skill_development"
    KNOWLEDGE_BUILDING = "knowledge_building"
    BALANCE = "balance"
    CHALLENGE = "challenge"


class TaskLike(Protocol):
    subject: str | None
    status: str
    is_coach_task: bool


@dataclass(frozen=True)
class Resource:
    title: str
    url: str
    description: str


@dataclass
class Recommendation:
    id: str
    type: RecommendationType
    title: str
    description: str
    reason: str
    priority: int
    suggested_task: str | None = None
    related_subject: str | None = None
    resources: list[Resource] = field(default_factory=list)


@dataclass(frozen=True)
class SkillMetrics:
    """0-100 scores derived from the task list and streak."""

    critical_thinking: int = 0
    creativity: int = 0
    collaboration: int = 0
    communication: int = 0
    self_direction: int = 0
    social_emotional: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "critical_thinking": self.critical_thinking,
            "creativity": self.creativity,
            "collaboration": self.collaboration,
            "communication": self.communication,
            "self_direction": self.self_direction,
            "social_emotional": self.social_emotional,
        }


@dataclass
class SubjectStats:
    completed: int = 0
    total: int = 0

    @property
    def rate(self) -> float:
        return self.completed / self.total if self.total else 0.0


def _clamp(score: float) -> int:
    return max(0, min(100, round(score)))


def _slug(text: str) -> str:
    return "_".join(text.lower().split())


def _resources(subject: str | None) -> list[Resource]:
    return [Resource(title, url, description) for title, url, description in subject_resources(subject)]


def compute_skill_metrics(tasks: Sequence[TaskLike], streak: int) -> SkillMetrics:
    """Derive skill scores from completed tasks, subject diversity and streak."""
    completed = [t for t in tasks if t.status == "completed"]

    def count(*subjects: str) -> int:
        return sum(1 for t in completed if t.subject in subjects)

    distinct_subjects = len({t.subject for t in tasks if t.subject})
    self_created = [t for t in tasks if not t.is_coach_task]
    self_completed = sum(1 for t in self_created if t.status == "completed")

    return SkillMetrics(
        critical_thinking=_clamp(20 * count("Mathematics", "Science")),
        creativity=_clamp(20 * count("Interest / Passion") + 10 * distinct_subjects),
        collaboration=_clamp(25 * sum(1 for t in completed if t.is_coach_task)),
        communication=_clamp(20 * count("English", "History")),
        self_direction=_clamp(100 * self_completed / len(self_created)) if self_created else 0,
        social_emotional=_clamp(10 * streak + 10 * count("Physical Activity", "Life Skills")),
    )


@dataclass
class RecommendationContext:
    """Inputs shared by every rule."""

    tasks: Sequence[TaskLike]
    metrics: SkillMetrics
    subjects: dict[str, SubjectStats] = field(default_factory=dict)

    @classmethod
    def build(cls, tasks: Sequence[TaskLike], metrics: SkillMetrics) -> RecommendationContext:
        # Insertion order (first appearance) breaks ties between subjects
        subjects: dict[str, SubjectStats] = {}
        for task in tasks:
            if not task.subject:
                continue
            stats = subjects.setdefault(task.subject, SubjectStats())
            stats.total += 1
            if task.status == "completed":
                stats.completed += 1
        return cls(tasks=tasks, metrics=metrics, subjects=subjects)

    def strongest_subject(self) -> str | None:
        best, best_rate = None, 0.0
        for subject, stats in self.subjects.items():
            if stats.rate > best_rate:
                best, best_rate = subject, stats.rate
        return best

    def weakest_subject(self) -> str | None:
        worst, worst_rate = None, 1.0
        for subject, stats in self.subjects.items():
            if stats.total < MIN_TASKS_FOR_WEAKEST:
                continue
            if stats.rate < worst_rate:
                worst, worst_rate = subject, stats.rate
        return worst


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def exploration_rule(ctx: RecommendationContext) -> list[Recommendation]:
    """Few tasks so far: suggest a subject the user has not tried yet."""
    if len(ctx.tasks) >= MIN_TASKS_FOR_ANALYSIS:
        return []

    untried = [s for s in SUBJECT_CATEGORIES if s not in ctx.subjects]
    subject = untried[0] if untried else SUBJECT_CATEGORIES[0]
    description, reason, suggested = exploration_text(subject)
    return [Recommendation(
        id=f"{RecommendationType.SUBJECT_EXPLORATION.value}_{_slug(subject)}",
        type=RecommendationType.SUBJECT_EXPLORATION,
        title=f"Explore {subject}",
        description=description,
        reason=reason,
        suggested_task=suggested,
        related_subject=subject,
        priority=8,
        resources=_resources(subject),
    )]


def strength_rule(ctx: RecommendationContext) -> list[Recommendation]:
    """Build on the subject with the highest completion rate."""
    subject = ctx.strongest_subject()
    if subject is None:
        return []

    stats = ctx.subjects[subject]
    if stats.completed >= CHALLENGE_COMPLETED_THRESHOLD:
        description, suggested = challenge_text(subject)
        rec_type, title, priority = RecommendationType.CHALLENGE, f"{subject} Challenge", 9
        reason = f"You've completed {stats.completed} tasks in {subject}, showing strong progress in this area!"
    else:
        description, suggested = knowledge_text(subject)
        rec_type, title, priority = RecommendationType.KNOWLEDGE_BUILDING, f"Build On Your {subject} Strength", 6
        reason = f"You've completed {round(stats.rate * 100)}% of your {subject} tasks, your strongest subject."

    return [Recommendation(
        id=f"{rec_type.value}_{_slug(subject)}",
        type=rec_type,
        title=title,
        description=description,
        reason=reason,
        suggested_task=suggested,
        related_subject=subject,
        priority=priority,
        resources=_resources(subject),
    )]


def weakness_rule(ctx: RecommendationContext) -> list[Recommendation]:
    """Support the subject with the lowest completion rate (enough tasks only)."""
    subject = ctx.weakest_subject()
    if subject is None or subject == ctx.strongest_subject():
        return []

    stats = ctx.subjects[subject]
    # General resources first: the subject-specific ones have not been working
    resources = _resources(None) + _resources(subject)
    return [Recommendation(
        id=f"{RecommendationType.SKILL_DEVELOPMENT.value}_{_slug(subject)}",
        type=RecommendationType.SKILL_DEVELOPMENT,
        title=f"Try a New Approach to {subject}",
        description=(
            f"{subject} tasks are getting finished less often than others. "
            "Different resources or smaller steps can make them easier to complete."
        ),
        reason=f"You've completed {stats.completed} of {stats.total} {subject} tasks.",
        suggested_task=f"Split your next {subject} task into smaller steps or ask your coach for support.",
        related_subject=subject,
        priority=7,
        resources=resources,
    )]


_BALANCE_TEXT: dict[str, tuple[float, int, str, str, str, str]] = {
    # group: (min percent, priority, title, description, reason template, suggested task)
    "knowledge": (
        20, 6,
        "Balance Your Learning: Knowledge Focus",
        "You've been focusing on practical skills and interests, which is great! "
        "Consider adding some academic subjects to round out your learning.",
        "Only {pct}% of your completed tasks are in knowledge areas.",
        "Try a math puzzle, science experiment, or reading assignment.",
    ),
    "skills": (
        20, 6,
        "Balance Your Learning: Practical Skills",
        "You've been doing well with academic subjects! "
        "Consider adding some practical life skills to your learning.",
        "Only {pct}% of your completed tasks involve practical skills.",
        "Try a cooking project, budgeting exercise, or physical activity.",
    ),
    "interests": (
        10, 5,
        "Balance Your Learning: Personal Interests",
        "Learning is more engaging when you include topics you're passionate about! "
        "Try adding some interest-driven activities.",
        "Only {pct}% of your completed tasks are based on personal interests.",
        "Add a task related to a hobby, creative project, or topic you're curious about.",
    ),
}


def category_balance_rule(ctx: RecommendationContext) -> list[Recommendation]:
    """Flag learning categories underrepresented among completed tasks."""
    counts = dict.fromkeys(SUBJECT_GROUPS, 0)
    for task in ctx.tasks:
        if task.status != "completed":
            continue
        for group, subjects in SUBJECT_GROUPS.items():
            if task.subject in subjects:
                counts[group] += 1
                break

    total = sum(counts.values())
    if total < MIN_CATEGORIZED_FOR_BALANCE:
        return []

    recommendations = []
    for group, (min_pct, priority, title, description, reason, suggested) in _BALANCE_TEXT.items():
        pct = counts[group] / total * 100
        if pct >= min_pct:
            continue
        recommendations.append(Recommendation(
            id=f"{RecommendationType.BALANCE.value}_{group}",
            type=RecommendationType.BALANCE,
            title=title,
            description=description,
            reason=reason.format(pct=round(pct)),
            suggested_task=suggested,
            priority=priority,
        ))
    return recommendations


# metric -> (type, title, description, suggested task)
METRIC_RECOMMENDATIONS: dict[str, tuple[RecommendationType, str, str, str]] = {
    "critical_thinking": (
        RecommendationType.CHALLENGE,
        "Put Your Reasoning to the Test",
        "Your analytical work is strong. Stretch it with an open-ended problem.",
        "Pick a real-world question and investigate it with data or an experiment.",
    ),
    "creativity": (
        RecommendationType.CHALLENGE,
        "Start a Creative Project",
        "You explore widely and follow your interests. Turn that into something you make.",
        "Plan a project that combines two subjects you enjoy.",
    ),
    "collaboration": (
        RecommendationType.BALANCE,
        "Lead Your Own Learning",
        "You work well on tasks from your coach. Balance them with goals you set yourself.",
        "Create a task of your own for something you want to learn this week.",
    ),
    "communication": (
        RecommendationType.BALANCE,
        "Put Your Words Into Action",
        "Your reading and writing are strong. Balance them with hands-on work.",
        "Try a practical task, like cooking a recipe or a short workout.",
    ),
    "self_direction": (
        RecommendationType.CHALLENGE,
        "Set a Stretch Goal",
        "You reliably finish the tasks you set yourself. Time for a bigger goal.",
        "Plan a multi-step project with a deadline two weeks out.",
    ),
    "social_emotional": (
        RecommendationType.BALANCE,
        "Add Some Academic Depth",
        "Your consistency and wellbeing habits are excellent. Pair them with academic challenges.",
        "Add a math, science or reading task to your routine.",
    ),
}


def strong_metric_rule(ctx: RecommendationContext) -> list[Recommendation]:
    """One complementary recommendation per high skill metric."""
    recommendations = []
    for metric, score in ctx.metrics.as_dict().items():
        if score < STRONG_METRIC_THRESHOLD:
            continue
        rec_type, title, description, suggested = METRIC_RECOMMENDATIONS[metric]
        label = metric.replace("_", " ")
        recommendations.append(Recommendation(
            id=f"{rec_type.value}_{metric}",
            type=rec_type,
            title=title,
            description=description,
            reason=f"Your {label} score is {score} out of 100.",
            suggested_task=suggested,
            priority=5,
        ))
    return recommendations


RecommendationRule = Callable[[RecommendationContext], list[Recommendation]]

RECOMMENDATION_RULES: list[RecommendationRule] = [
    exploration_rule,
    strength_rule,
    weakness_rule,
    category_balance_rule,
    strong_metric_rule,
]


def fallback_recommendation() -> Recommendation:
    return Recommendation(
        id=f"{RecommendationType.BALANCE.value}_general",
        type=RecommendationType.BALANCE,
        title="Keep a Balanced Routine",
        description="Mix academic subjects, practical skills and personal interests each week.",
        reason="A varied routine keeps learning engaging.",
        suggested_task="Add one task from a subject you haven't worked on recently.",
        priority=1,
        resources=_resources(None),
    )


def build_recommendations(
    tasks: Sequence[TaskLike],
    metrics: SkillMetrics,
    rules: Sequence[RecommendationRule] = RECOMMENDATION_RULES,
) -> list[Recommendation]:
    """Evaluate every rule and sort by priority. Never returns an empty list."""
    ctx = RecommendationContext.build(tasks, metrics)

    recommendations: list[Recommendation] = []
    for rule in rules:
        recommendations.extend(rule(ctx))

    if not recommendations:
        recommendations.append(fallback_recommendation())

    # sorted() is stable, so equal priorities keep rule order
    return sorted(recommendations, key=lambda r: r.priority, reverse=True)


async def generate_recommendations(db: AsyncSession, user_id: int) -> list[Recommendation] | None:
    """Recommendations for a user, or None if the user does not exist."""
    user = await get_user(db, user_id)
    if user is None:
        return None

    tasks = await get_tasks(db, user_id)
    metrics = compute_skill_metrics(tasks, user.streak)
    recommendations = build_recommendations(tasks, metrics)

    logger.debug("Generated %d recommendations for user %d", len(recommendations), user_id)
    return recommendations


async def get_skill_metrics(db: AsyncSession, user_id: int) -> SkillMetrics | None:
    user = await get_user(db, user_id)
    if user is None:
        return None
    return compute_skill_metrics(await get_tasks(db, user_id), user.streak)
