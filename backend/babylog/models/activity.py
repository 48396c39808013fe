"""Activity model - a logged baby-care event (feeding, sleep, diaper, ...)."""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from babylog.db.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    activity_type: Mapped[str] = mapped_column(String(50))  # free-form, e.g. "feeding"

    # Type-specific fields, e.g. {"amount_ml": 120, "side": "left"}
    details: Mapped[dict] = mapped_column(JSON, default=dict)

    occurred_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
