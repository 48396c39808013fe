"""Score event model - append-only ledger of point awards."""

from datetime import date, datetime

from sqlalchemy import (
    String, Integer, Date, DateTime, ForeignKey, Text, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from babylog.db.database import Base


class ScoreEvent(Base):
    __tablename__ = "score_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    score: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String(50))  # see ScoreReason
    # JSON-serialized metadata, e.g. '{"activityType": "feeding"}'
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Calendar day of a daily sign-in; NULL for every other reason so the
    # unique constraint below only ever collides on sign-ins.
    day_bucket: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "reason", "day_bucket", name="uq_score_event_user_reason_day"),
    )
