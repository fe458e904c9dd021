"""Workspace and focus schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.enums import FocusKind, WorkspaceMode


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be empty")
    return v


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# --- Focus ---

class FocusRef(BaseModel):
    """Reference to an item or todo pinned for today."""
    kind: FocusKind
    ref_id: str = Field(..., min_length=1, max_length=50)


class FocusEntryResponse(BaseModel):
    kind: FocusKind
    ref_id: str
    added_at: datetime

    class Config:
        from_attributes = True


class FocusResponse(BaseModel):
    """Focus list as seen today (empty when built on an earlier UTC day)."""
    workspace_id: str
    date_key: str
    entries: List[FocusEntryResponse] = []


# --- Workspace ---

class WorkspaceCreate(BaseModel):
    """Create a workspace."""
    title: str = Field("My Study Room", max_length=80)
    goal: Optional[str] = Field(None, max_length=300)
    emoji: Optional[str] = Field(None, max_length=10)
    mode: WorkspaceMode = WorkspaceMode.BUILD

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("goal", "emoji")
    @classmethod
    def normalize_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class WorkspaceUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied.

    ``focus`` replaces today's focus list wholesale. Its length is checked by
    the service so an oversized list is rejected with a domain error rather
    than clipped.
    """
    title: Optional[str] = Field(None, max_length=80)
    goal: Optional[str] = Field(None, max_length=300)
    emoji: Optional[str] = Field(None, max_length=10)
    mode: Optional[WorkspaceMode] = None
    focus: Optional[List[FocusRef]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Title cannot be null")
        return _strip_required(v)

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: Optional[WorkspaceMode]) -> WorkspaceMode:
        if v is None:
            raise ValueError("Mode cannot be null")
        return v

    @field_validator("goal", "emoji")
    @classmethod
    def normalize_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class WorkspaceResponse(BaseModel):
    """Workspace in API responses. ``level`` is derived from ``xp``."""
    id: str
    title: str
    goal: Optional[str] = None
    emoji: Optional[str] = None
    mode: WorkspaceMode
    xp: int
    level: int
    streak_count: int
    last_activity_date_key: Optional[str] = None
    focus_date_key: Optional[str] = None
    focus: List[FocusEntryResponse] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, workspace, today_key: str) -> "WorkspaceResponse":
        """Build a response, hiding focus entries left over from an earlier day."""
        focus = workspace.focus_entries if workspace.focus_date_key == today_key else []
        return cls(
            id=workspace.id,
            title=workspace.title,
            goal=workspace.goal,
            emoji=workspace.emoji,
            mode=workspace.mode,
            xp=workspace.xp,
            level=workspace.level,
            streak_count=workspace.streak_count,
            last_activity_date_key=workspace.last_activity_date_key,
            focus_date_key=workspace.focus_date_key,
            focus=[FocusEntryResponse.model_validate(f) for f in focus],
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )
