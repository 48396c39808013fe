"""User endpoints - create and manage user profiles."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.api.dependencies import get_user_or_404
from babylog.db.database import get_db
from babylog.models.user import User
from babylog.schemas.user import UserCreate, UserState, UserUpdate

router = APIRouter()


@router.post("/", response_model=UserState, status_code=201)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a new user."""
    user = User(display_name=data.display_name, show_name=data.show_name)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@router.get("/{user_id}", response_model=UserState)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await get_user_or_404(user_id, db)


@router.patch("/{user_id}", response_model=UserState)
async def update_user(user_id: int, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    """Update profile fields (display name, leaderboard name visibility)."""
    user = await get_user_or_404(user_id, db)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    await db.flush()
    await db.refresh(user)
    return user
