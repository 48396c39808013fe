"""Activity endpoints - log baby-care events and earn points for them."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.api.dependencies import (
    finalize_award,
    get_current_user,
    get_leaderboard_cache,
    get_scoring_service,
    require_award,
)
from babylog.core.leaderboard_cache import LeaderboardCache
from babylog.db.database import get_db
from babylog.models.activity import Activity
from babylog.models.user import User
from babylog.schemas.activity import (
    ActivityCreate,
    ActivityLoggedResponse,
    ActivityOut,
    ActivityUpdate,
)
from babylog.services.scoring_service import ScoringService

router = APIRouter()


def _naive_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


async def _get_activity_or_404(activity_id: int, user_id: int, db: AsyncSession) -> Activity:
    result = await db.execute(
        select(Activity).where(Activity.id == activity_id, Activity.user_id == user_id)
    )
    activity = result.scalar_one_or_none()
    if activity is None:
        raise HTTPException(status_code=404, detail="Activity not found")
    return activity


@router.post("/", response_model=ActivityLoggedResponse, status_code=201)
async def log_activity(
    data: ActivityCreate,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    """Log an activity and award points for its type.

    The activity and its points are saved together; if the award fails,
    nothing is kept and the client may retry.
    """
    activity = Activity(user_id=user.id, activity_type=data.activity_type, details=data.details)
    if data.occurred_at is not None:
        activity.occurred_at = _naive_local(data.occurred_at)
    db.add(activity)
    await db.flush()
    await db.refresh(activity)

    award = await scoring.award_activity_points(db, user.id, data.activity_type)
    await require_award(award, db)
    award = await finalize_award(award, db, response, cache)
    return ActivityLoggedResponse(activity=ActivityOut.model_validate(activity), award=award)


@router.get("/", response_model=list[ActivityOut])
async def list_activities(
    activity_type: str | None = None,
    limit: int = 50,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's activities, newest first."""
    query = select(Activity).where(Activity.user_id == user.id)
    if activity_type:
        query = query.where(Activity.activity_type == activity_type)
    result = await db.execute(
        query.order_by(Activity.occurred_at.desc(), Activity.id.desc()).limit(limit)
    )
    return result.scalars().all()


@router.get("/{activity_id}", response_model=ActivityOut)
async def get_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_activity_or_404(activity_id, user.id, db)


@router.patch("/{activity_id}", response_model=ActivityOut)
async def update_activity(
    activity_id: int,
    data: ActivityUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit an activity's details or time. Points are not recalculated."""
    activity = await _get_activity_or_404(activity_id, user.id, db)

    if data.details is not None:
        activity.details = data.details
    if data.occurred_at is not None:
        activity.occurred_at = _naive_local(data.occurred_at)

    await db.flush()
    await db.refresh(activity)
    return activity


@router.delete("/{activity_id}", status_code=204)
async def delete_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an activity. Points already awarded for it are kept."""
    activity = await _get_activity_or_404(activity_id, user.id, db)
    await db.delete(activity)
    await db.flush()
