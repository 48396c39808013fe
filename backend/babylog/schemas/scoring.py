"""Scoring-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PositiveInt


class ScoreReason(str, Enum):
    ACTIVITY_LOGGED = "activity_logged"
    TODO_COMPLETED = "todo_completed"
    DAILY_SIGNIN = "daily_signin"


def _default_activity_points() -> dict[str, int]:
    return {
        "feeding": 5,
        "sleep": 5,
        "diaper": 3,
        "poop": 3,
        "doctor": 10,
        "temperature": 8,
        "medication": 8,
        "vaccination": 15,
        "milestone": 20,
        "growth": 10,
    }


def _default_todo_points() -> dict[str, int]:
    return {"low": 3, "medium": 5, "high": 8}


class ScoringConfig(BaseModel):
    """Point table used by the scoring service."""
    activity_points: dict[str, PositiveInt] = Field(default_factory=_default_activity_points)
    todo_points: dict[str, PositiveInt] = Field(default_factory=_default_todo_points)
    daily_signin_points: int = Field(default=2, gt=0)
    fallback_points: int = Field(default=1, gt=0)  # unknown activity types / priorities

    def activity_points_for(self, activity_type: str) -> int:
        return self.activity_points.get(activity_type, self.fallback_points)

    def todo_points_for(self, priority: str) -> int:
        return self.todo_points.get(priority, self.fallback_points)


class AwardResult(BaseModel):
    """Outcome of an award call.

    ``message`` is set for expected rejections (already signed in today),
    ``error`` for persistence failures.
    """
    success: bool
    points: int = 0
    message: str | None = None
    error: str | None = None


class ActivityAwardRequest(BaseModel):
    activity_type: str = Field(min_length=1, max_length=50)


class TodoAwardRequest(BaseModel):
    priority: str = Field(min_length=1, max_length=20)


class LeaderboardEntry(BaseModel):
    id: int
    display_name: str
    score: int
    rank: int
    member_since: datetime


class LeaderboardResponse(BaseModel):
    success: bool = True
    leaderboard: list[LeaderboardEntry]


class ScoreHistoryItem(BaseModel):
    id: int
    score: int
    reason: str
    metadata: dict[str, Any] | None
    timestamp: datetime


class UserStats(BaseModel):
    total_score: int
    activity_count: int
    completed_todos: int
    total_todos: int
    todo_completion_rate: float


class UserStatsResponse(BaseModel):
    success: bool = True
    stats: UserStats
    score_history: list[ScoreHistoryItem]
