"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from learnpath.redis_client import get_redis as _get_redis


async def get_redis_dep() -> AsyncGenerator[object, None]:
    """Yield the Redis client as a FastAPI dependency (None when not configured)."""
    try:
        client = _get_redis()
    except RuntimeError:
        client = None
    yield client
