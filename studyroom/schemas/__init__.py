"""Pydantic schemas for API validation."""

from .workspace import (
    FocusRef,
    FocusEntryResponse,
    FocusResponse,
    WorkspaceCreate,
    WorkspaceUpdate,
    WorkspaceResponse,
)
from .folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
)
from .item import (
    ItemFields,
    ItemCreate,
    ItemUpdate,
    ItemResponse,
)
from .todo import (
    TodoFields,
    TodoCreate,
    TodoUpdate,
    TodoResponse,
)
from .template import (
    TemplateDefinition,
    TemplateSummary,
    TemplateInstantiateRequest,
    TemplateInstantiateResponse,
    SeededCounts,
)

__all__ = [
    "FocusRef",
    "FocusEntryResponse",
    "FocusResponse",
    "WorkspaceCreate",
    "WorkspaceUpdate",
    "WorkspaceResponse",
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "ItemFields",
    "ItemCreate",
    "ItemUpdate",
    "ItemResponse",
    "TodoFields",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "TemplateDefinition",
    "TemplateSummary",
    "TemplateInstantiateRequest",
    "TemplateInstantiateResponse",
    "SeededCounts",
]
