"""Todo endpoints - create, edit, complete, reopen and delete to-do items."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babylog.api.dependencies import (
    finalize_award,
    get_current_user,
    get_leaderboard_cache,
    get_scoring_service,
    require_award,
)
from babylog.core.leaderboard_cache import LeaderboardCache
from babylog.db.database import get_db
from babylog.models.todo import Todo
from babylog.models.user import User
from babylog.schemas.scoring import AwardResult
from babylog.schemas.todo import TodoCompletedResponse, TodoCreate, TodoOut, TodoUpdate
from babylog.services.scoring_service import ScoringService

router = APIRouter()

POINTS_ALREADY_AWARDED = "Points already awarded for this todo"


async def _get_todo_or_404(todo_id: int, user_id: int, db: AsyncSession) -> Todo:
    result = await db.execute(select(Todo).where(Todo.id == todo_id, Todo.user_id == user_id))
    todo = result.scalar_one_or_none()
    if todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo


@router.post("/", response_model=TodoOut, status_code=201)
async def create_todo(
    data: TodoCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    todo = Todo(user_id=user.id, **data.model_dump())
    db.add(todo)
    await db.flush()
    await db.refresh(todo)
    return todo


@router.get("/", response_model=list[TodoOut])
async def list_todos(
    completed: bool | None = None,
    tag: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's to-do items, oldest first."""
    query = select(Todo).where(Todo.user_id == user.id)
    if completed is not None:
        query = query.where(Todo.completed.is_(completed))
    if tag:
        query = query.where(Todo.tag == tag)
    result = await db.execute(query.order_by(Todo.created_at, Todo.id))
    return result.scalars().all()


@router.patch("/{todo_id}", response_model=TodoOut)
async def update_todo(
    todo_id: int,
    data: TodoUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit a to-do item. Completion state changes go through complete/reopen."""
    todo = await _get_todo_or_404(todo_id, user.id, db)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None or field in ("description", "due_date"):
            setattr(todo, field, value)

    await db.flush()
    await db.refresh(todo)
    return todo


@router.post("/{todo_id}/complete", response_model=TodoCompletedResponse)
async def complete_todo(
    todo_id: int,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    scoring: ScoringService = Depends(get_scoring_service),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
):
    """Mark a to-do item done; its priority's points are awarded the first time only."""
    todo = await _get_todo_or_404(todo_id, user.id, db)
    if todo.completed:
        raise HTTPException(status_code=409, detail="Todo already completed")

    todo.mark_completed(datetime.now())
    await db.flush()

    if todo.points_awarded:
        award = AwardResult(success=False, message=POINTS_ALREADY_AWARDED)
        await db.commit()
    else:
        award = await scoring.award_todo_points(db, user.id, todo.priority)
        await require_award(award, db)
        if award.success:
            todo.points_awarded = True
            await db.flush()
        award = await finalize_award(award, db, response, cache)

    await db.refresh(todo)
    return TodoCompletedResponse(todo=TodoOut.model_validate(todo), award=award)


@router.post("/{todo_id}/reopen", response_model=TodoOut)
async def reopen_todo(
    todo_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a completed item active again. Points already awarded are kept."""
    todo = await _get_todo_or_404(todo_id, user.id, db)
    if not todo.completed:
        raise HTTPException(status_code=409, detail="Todo is not completed")

    todo.reopen()
    await db.flush()
    await db.refresh(todo)
    return todo


@router.delete("/{todo_id}", status_code=204)
async def delete_todo(
    todo_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    todo = await _get_todo_or_404(todo_id, user.id, db)
    await db.delete(todo)
    await db.flush()
