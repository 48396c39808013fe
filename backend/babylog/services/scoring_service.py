"""Scoring service - point awards, the daily sign-in bonus, leaderboard and stats.

Every award is one ledger row (ScoreEvent) plus one atomic increment of
``User.score``, written together inside a SAVEPOINT so a failure of either
leaves neither behind. The daily sign-in bonus is additionally guarded by the
``(user_id, reason, day_bucket)`` unique constraint on ``score_events``.
"""

import json
import logging
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.models.activity import Activity
from babylog.models.score_event import ScoreEvent
from babylog.models.todo import Todo
from babylog.models.user import User
from babylog.schemas.scoring import (
    AwardResult,
    LeaderboardEntry,
    ScoreHistoryItem,
    ScoreReason,
    ScoringConfig,
    UserStats,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data" / "scoring"

ANONYMOUS = "Anonymous"
ALREADY_SIGNED_IN = "Already signed in today"
ALREADY_AWARDED_TODAY = "Already awarded today"
USER_NOT_FOUND = "User not found"


def load_scoring_config(path: str | Path | None = None) -> ScoringConfig:
    """Load a point table from YAML. Keys missing from the file keep their defaults."""
    if not path:
        return ScoringConfig()

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Scoring config not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return ScoringConfig(**raw)


def format_user_name(display_name: str | None, show_name: bool) -> str:
    """Redact a display name for public display.

    "Jane Q. Public" -> "Jane P.", "Madison" -> "M.", and "Anonymous" when
    the user opted out or has no name.
    """
    if not show_name or not display_name or not display_name.strip():
        return ANONYMOUS

    names = display_name.split()
    if len(names) == 1:
        return names[0][0].upper() + "."

    return f"{names[0]} {names[-1][0].upper()}."


def _load_metadata(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


class ScoringService:
    def __init__(
        self,
        config: ScoringConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or ScoringConfig()
        self._clock = clock

    def today(self) -> date:
        """Current calendar day on the server clock."""
        return self._clock().date()

    # ------------------------------------------------------------------
    # Awards
    # ------------------------------------------------------------------

    async def award_points(
        self,
        db: AsyncSession,
        user_id: int,
        points: int,
        reason: ScoreReason | str,
        metadata: dict[str, Any] | None = None,
        *,
        day_bucket: date | None = None,
    ) -> AwardResult:
        """Record a ledger event and increment the user's score atomically.

        With ``day_bucket`` set, at most one award per (user, reason, day) is
        kept; a second one is rejected by the store and reported as a message.
        """
        return await self._award(
            db, user_id, points, ScoreReason(reason), metadata, day_bucket=day_bucket
        )

    async def award_activity_points(
        self, db: AsyncSession, user_id: int, activity_type: str
    ) -> AwardResult:
        points = self.config.activity_points_for(activity_type)
        return await self._award(
            db, user_id, points, ScoreReason.ACTIVITY_LOGGED, {"activityType": activity_type}
        )

    async def award_todo_points(
        self, db: AsyncSession, user_id: int, priority: str
    ) -> AwardResult:
        points = self.config.todo_points_for(priority)
        return await self._award(
            db, user_id, points, ScoreReason.TODO_COMPLETED, {"priority": priority}
        )

    async def award_daily_signin_points(self, db: AsyncSession, user_id: int) -> AwardResult:
        """Grant the once-per-day bonus.

        The lookup below only short-circuits the common case; a concurrent
        duplicate is rejected by the unique constraint and reported the same way.
        """
        today = self.today()
        try:
            result = await db.execute(
                select(ScoreEvent.id)
                .where(
                    ScoreEvent.user_id == user_id,
                    ScoreEvent.reason == ScoreReason.DAILY_SIGNIN.value,
                    ScoreEvent.day_bucket == today,
                )
                .limit(1)
            )
            existing = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Error checking daily sign-in for user %s", user_id)
            return AwardResult(success=False, error=str(exc))

        if existing is not None:
            logger.info("User %s already signed in on %s", user_id, today)
            return AwardResult(success=False, message=ALREADY_SIGNED_IN)

        return await self._award(
            db,
            user_id,
            self.config.daily_signin_points,
            ScoreReason.DAILY_SIGNIN,
            None,
            day_bucket=today,
        )

    async def _award(
        self,
        db: AsyncSession,
        user_id: int,
        points: int,
        reason: ScoreReason,
        metadata: dict[str, Any] | None,
        day_bucket: date | None = None,
    ) -> AwardResult:
        if points <= 0:
            raise ValueError(f"points must be positive, got {points}")
        # Serialization errors are programmer errors and propagate.
        payload = json.dumps(metadata) if metadata is not None else None

        try:
            async with db.begin_nested():
                result = await db.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(score=User.score + points)
                )
                if result.rowcount == 0:
                    logger.warning("Cannot award %s points: user %s not found", points, user_id)
                    return AwardResult(success=False, error=USER_NOT_FOUND)

                db.add(ScoreEvent(
                    user_id=user_id,
                    score=points,
                    reason=reason.value,
                    metadata_json=payload,
                    day_bucket=day_bucket,
                ))
                await db.flush()
        except IntegrityError as exc:
            if day_bucket is not None:
                logger.info("Duplicate %s award on %s rejected for user %s", reason.value, day_bucket, user_id)
                if reason is ScoreReason.DAILY_SIGNIN:
                    return AwardResult(success=False, message=ALREADY_SIGNED_IN)
                return AwardResult(success=False, message=ALREADY_AWARDED_TODAY)
            logger.exception("Error awarding points to user %s", user_id)
            return AwardResult(success=False, error=str(exc))
        except SQLAlchemyError as exc:
            logger.exception("Error awarding points to user %s", user_id)
            return AwardResult(success=False, error=str(exc))

        logger.debug("Awarded %s points to user %s (%s)", points, user_id, reason.value)
        return AwardResult(success=True, points=points)

    # ------------------------------------------------------------------
    # Read paths
    # ------------------------------------------------------------------

    async def get_leaderboard(
        self, db: AsyncSession, min_score: int = 10, limit: int = 50
    ) -> list[LeaderboardEntry]:
        """Top users by score. Rank is positional: equal scores get distinct ranks."""
        result = await db.execute(
            select(User)
            .where(User.score >= min_score)
            .order_by(User.score.desc(), User.id)
            .limit(limit)
        )
        users = result.scalars().all()

        return [
            LeaderboardEntry(
                id=user.id,
                display_name=format_user_name(user.display_name, user.show_name),
                score=user.score,
                rank=rank,
                member_since=user.created_at,
            )
            for rank, user in enumerate(users, start=1)
        ]

    async def get_user_score_history(
        self, db: AsyncSession, user_id: int, limit: int = 20
    ) -> list[ScoreHistoryItem]:
        """Most recent awards for a user, newest first."""
        result = await db.execute(
            select(ScoreEvent)
            .where(ScoreEvent.user_id == user_id)
            .order_by(ScoreEvent.created_at.desc(), ScoreEvent.id.desc())
            .limit(limit)
        )
        return [
            ScoreHistoryItem(
                id=event.id,
                score=event.score,
                reason=event.reason,
                metadata=_load_metadata(event.metadata_json),
                timestamp=event.created_at,
            )
            for event in result.scalars().all()
        ]

    async def get_user_stats(self, db: AsyncSession, user_id: int) -> UserStats:
        total_score = await db.scalar(select(User.score).where(User.id == user_id))
        activity_count = await db.scalar(
            select(func.count()).select_from(Activity).where(Activity.user_id == user_id)
        )
        completed_todos = await db.scalar(
            select(func.count())
            .select_from(Todo)
            .where(Todo.user_id == user_id, Todo.completed.is_(True))
        )
        total_todos = await db.scalar(
            select(func.count()).select_from(Todo).where(Todo.user_id == user_id)
        )

        return UserStats(
            total_score=total_score or 0,
            activity_count=activity_count or 0,
            completed_todos=completed_todos or 0,
            total_todos=total_todos or 0,
            todo_completion_rate=(completed_todos / total_todos * 100) if total_todos else 0.0,
        )
