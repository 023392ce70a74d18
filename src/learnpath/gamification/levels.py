"""Level computation from cumulative points.

Levels are linear: every POINTS_PER_LEVEL points is one level, starting at 1.
"""

from __future__ import annotations

POINTS_PER_LEVEL = 100
MIN_LEVEL = 1


def compute_level(points: int) -> int:
    """Level for a points total. Never below MIN_LEVEL, even for negative totals."""
    return max(MIN_LEVEL, points // POINTS_PER_LEVEL + 1)


def level_progress(points: int) -> dict:
    """Level plus progress towards the next one, for progress bars."""
    level = compute_level(points)
    level_floor = (level - 1) * POINTS_PER_LEVEL
    next_level_at = level * POINTS_PER_LEVEL

    return {
        "level": level,
        "points_into_level": max(0, points - level_floor),
        "points_for_level": POINTS_PER_LEVEL,
        "next_level": level + 1,
        "next_level_at": next_level_at,
    }
