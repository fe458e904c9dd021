"""Todo schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.enums import TodoKind, TodoPriority


def _validate_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Todo text cannot be empty")
    return v


class TodoFields(BaseModel):
    """Content fields shared by todo creation and template seeds."""
    text: str = Field(..., max_length=240)
    kind: TodoKind = TodoKind.TASK
    priority: TodoPriority = TodoPriority.NORMAL
    due_at: Optional[datetime] = None
    sort_order: int = 0

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _validate_text(v)


class TodoCreate(TodoFields):
    """Create a workspace-level todo, or an item's todo when item_id is set."""
    workspace_id: str
    item_id: Optional[str] = None


class TodoUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied.

    ``item_id: null`` detaches the todo from its item.
    """
    text: Optional[str] = Field(None, max_length=240)
    done: Optional[bool] = None
    kind: Optional[TodoKind] = None
    priority: Optional[TodoPriority] = None
    due_at: Optional[datetime] = None
    sort_order: Optional[int] = None
    item_id: Optional[str] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Todo text cannot be null")
        return _validate_text(v)


class TodoResponse(BaseModel):
    """Todo in API responses."""
    id: str
    workspace_id: str
    item_id: Optional[str] = None
    text: str
    kind: TodoKind
    done: bool
    due_at: Optional[datetime] = None
    priority: TodoPriority
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
