"""Todo-related Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from babylog.schemas.scoring import AwardResult


class TodoCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    tag: str = Field(default="household", min_length=1, max_length=50)
    priority: str = Field(default="medium", min_length=1, max_length=20)
    due_date: date | None = None


class TodoUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    tag: str | None = Field(default=None, min_length=1, max_length=50)
    priority: str | None = Field(default=None, min_length=1, max_length=20)
    due_date: date | None = None


class TodoOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    tag: str
    priority: str
    completed: bool
    due_date: date | None
    completed_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TodoCompletedResponse(BaseModel):
    todo: TodoOut
    award: AwardResult
