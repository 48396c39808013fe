"""User model - profile, privacy preference and running score."""

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from babylog.db.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Whether the leaderboard may show a (redacted) name instead of "Anonymous"
    show_name: Mapped[bool] = mapped_column(Boolean, default=True)

    # Running total; only changed through ScoringService.award_points
    score: Mapped[int] = mapped_column(Integer, default=0, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
