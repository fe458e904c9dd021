"""Curated template schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.enums import WorkspaceMode
from .workspace import WorkspaceResponse


class TemplateItem(BaseModel):
    """Seed item. Validated against item rules only when instantiated."""
    type: str
    title: str = ""
    url: Optional[str] = None
    note: Optional[str] = None
    tags: List[str] = []


class TemplateTodo(BaseModel):
    text: str
    kind: str = "task"
    priority: str = "normal"


class TemplateDefinition(BaseModel):
    """A read-only blueprint for a workspace with seed content."""
    id: str
    title: str
    emoji: Optional[str] = None
    goal: Optional[str] = None
    mode: WorkspaceMode = WorkspaceMode.BUILD
    folders: List[str] = []
    items: List[TemplateItem] = []
    todos: List[TemplateTodo] = []


class TemplateSummary(BaseModel):
    """Template as listed to users."""
    id: str
    title: str
    emoji: Optional[str] = None
    goal: Optional[str] = None
    folder_count: int = 0
    item_count: int = 0
    todo_count: int = 0


class TemplateInstantiateRequest(BaseModel):
    """Create a workspace from a template. Optional fields override the template."""
    template_id: str = Field(..., min_length=1, max_length=80)
    title: Optional[str] = Field(None, max_length=80)
    goal: Optional[str] = Field(None, max_length=300)
    emoji: Optional[str] = Field(None, max_length=10)
    mode: Optional[WorkspaceMode] = None


class SeededCounts(BaseModel):
    folders: int = 0
    items: int = 0
    todos: int = 0


class TemplateInstantiateResponse(BaseModel):
    workspace: WorkspaceResponse
    seeded: SeededCounts
