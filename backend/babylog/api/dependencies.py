"""Shared FastAPI dependencies and helpers for the route modules."""

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.config import settings
from babylog.core.leaderboard_cache import LeaderboardCache
from babylog.db.database import get_db
from babylog.db.redis import get_redis_client
from babylog.models.user import User
from babylog.schemas.scoring import AwardResult
from babylog.services.scoring_service import ScoringService


def get_scoring_service(request: Request) -> ScoringService:
    """The ScoringService built at startup (see main.lifespan)."""
    return request.app.state.scoring_service


def get_leaderboard_cache() -> LeaderboardCache | None:
    if settings.LEADERBOARD_CACHE_TTL <= 0:
        return None
    return LeaderboardCache(get_redis_client(), settings.LEADERBOARD_CACHE_TTL)


async def get_user_or_404(user_id: int, db: AsyncSession) -> User:
    """Fetch a user by ID or raise 404."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def get_current_user(user_id: int, db: AsyncSession = Depends(get_db)) -> User:
    """Resolve the calling user from the ``user_id`` query parameter."""
    return await get_user_or_404(user_id, db)


async def finalize_award(
    result: AwardResult,
    db: AsyncSession,
    response: Response,
    cache: LeaderboardCache | None,
) -> AwardResult:
    """Commit a successful award and drop stale leaderboards; map failures to 500."""
    if result.success:
        await db.commit()
        if cache is not None:
            await cache.invalidate()
    elif result.error is not None:
        await db.rollback()
        response.status_code = 500
    return result


async def require_award(result: AwardResult, db: AsyncSession) -> None:
    """Undo the request's writes and fail if the award hit a persistence error.

    Used where the award belongs to a state change (logging an activity,
    completing a todo) that must not be kept without its points.
    """
    if result.error is not None:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Could not award points: {result.error}")
