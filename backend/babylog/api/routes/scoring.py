"""Scoring endpoints - awards, daily sign-in, leaderboard and personal stats."""

import logging

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.api.dependencies import (
    finalize_award,
    get_current_user,
    get_leaderboard_cache,
    get_scoring_service,
)
from babylog.config import settings
from babylog.core.leaderboard_cache import LeaderboardCache
from babylog.db.database import get_db
from babylog.models.user import User
from babylog.schemas.scoring import (
    ActivityAwardRequest,
    AwardResult,
    LeaderboardResponse,
    TodoAwardRequest,
    UserStatsResponse,
)
from babylog.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter()


def _read_failure(exc: SQLAlchemyError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@router.post("/activity", response_model=AwardResult)
async def award_activity(
    req: ActivityAwardRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    result = await scoring.award_activity_points(db, user.id, req.activity_type)
    return await finalize_award(result, db, response, cache)


@router.post("/todo", response_model=AwardResult)
async def award_todo(
    req: TodoAwardRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    result = await scoring.award_todo_points(db, user.id, req.priority)
    return await finalize_award(result, db, response, cache)


@router.post("/daily-signin", response_model=AwardResult)
async def daily_signin(
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    """Claim today's sign-in bonus. A repeat claim is success=false with a message, not an error."""
    result = await scoring.award_daily_signin_points(db, user.id)
    return await finalize_award(result, db, response, cache)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    min_score: int = settings.LEADERBOARD_MIN_SCORE,
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    limit = settings.LEADERBOARD_LIMIT
    version = await cache.version() if cache is not None else None
    if version is not None:
        cached = await cache.get(version, min_score, limit)
        if cached is not None:
            return LeaderboardResponse(leaderboard=cached)

    try:
        entries = await scoring.get_leaderboard(db, min_score=min_score, limit=limit)
    except SQLAlchemyError as exc:
        logger.exception("Error loading leaderboard")
        return _read_failure(exc)

    if version is not None:
        await cache.set(version, min_score, limit, entries)
    return LeaderboardResponse(leaderboard=entries)


@router.get("/stats", response_model=UserStatsResponse)
async def get_stats(
    history_limit: int = Query(default=settings.SCORE_HISTORY_LIMIT, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
):
    """Personal totals plus the most recent awards."""
    try:
        stats = await scoring.get_user_stats(db, user.id)
        history = await scoring.get_user_score_history(db, user.id, limit=history_limit)
    except SQLAlchemyError as exc:
        logger.exception("Error loading stats for user %s", user.id)
        return _read_failure(exc)

    return UserStatsResponse(stats=stats, score_history=history)
