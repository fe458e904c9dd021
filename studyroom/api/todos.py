"""API routes for todos."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..schemas.todo import TodoCreate, TodoResponse, TodoUpdate
from ..services.todo_service import TodoService

router = APIRouter(prefix="/api/study/todos", tags=["todos"])


@router.get("", response_model=List[TodoResponse])
def list_todos(
    workspace_id: str = Query(..., description="Workspace to list todos of"),
    item_id: Optional[str] = Query(None, description="Only todos of this item"),
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """List todos: open first, then by due date (undated last)."""
    return TodoService(db).list_todos(owner.owner_id, workspace_id, item_id=item_id)


@router.post("", response_model=TodoResponse, status_code=201)
def create_todo(
    data: TodoCreate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return TodoService(db).create_todo(owner.owner_id, data)


@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    data: TodoUpdate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Update fields present in the body. Completing a todo awards XP."""
    return TodoService(db).update_todo(owner.owner_id, todo_id, data)


@router.delete("/{todo_id}", status_code=204)
def delete_todo(
    todo_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    TodoService(db).delete_todo(owner.owner_id, todo_id)
