"""Activity-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from babylog.schemas.scoring import AwardResult


class ActivityCreate(BaseModel):
    activity_type: str = Field(min_length=1, max_length=50)
    details: dict = Field(default_factory=dict)
    occurred_at: datetime | None = None  # defaults to now


class ActivityUpdate(BaseModel):
    """Editable fields; the activity type (and the points it earned) stays fixed."""
    details: dict | None = None
    occurred_at: datetime | None = None


class ActivityOut(BaseModel):
    id: int
    user_id: int
    activity_type: str
    details: dict
    occurred_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityLoggedResponse(BaseModel):
    activity: ActivityOut
    award: AwardResult
