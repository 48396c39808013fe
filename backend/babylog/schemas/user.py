"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    show_name: bool = True


class UserUpdate(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    show_name: bool | None = None


class UserState(BaseModel):
    id: int
    display_name: str | None
    show_name: bool
    score: int
    created_at: datetime

    model_config = {"from_attributes": True}
