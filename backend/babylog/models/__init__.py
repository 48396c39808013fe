"""Database models package."""

from babylog.models.user import User
from babylog.models.score_event import ScoreEvent
from babylog.models.activity import Activity
from babylog.models.todo import Todo

__all__ = ["User", "ScoreEvent", "Activity", "Todo"]
