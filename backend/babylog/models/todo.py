"""Todo model - simple to-do items whose completion earns points."""

from datetime import date, datetime

from sqlalchemy import String, Boolean, Date, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from babylog.db.database import Base


class Todo(Base):
    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tag: Mapped[str] = mapped_column(String(50), default="household")  # e.g. "shopping", "baby-care"
    priority: Mapped[str] = mapped_column(String(20), default="medium")  # "low" | "medium" | "high"
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    # True once completion points were granted; survives reopen()
    points_awarded: Mapped[bool] = mapped_column(Boolean, default=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def mark_completed(self, when: datetime) -> None:
        """Flag the item as done."""
        self.completed = True
        self.completed_at = when

    def reopen(self) -> None:
        """Mark the item as active again."""
        self.completed = False
        self.completed_at = None
