"""API routes."""

from .workspaces import router as workspaces_router
from .folders import router as folders_router
from .items import router as items_router
from .todos import router as todos_router
from .templates import router as templates_router

__all__ = [
    "workspaces_router",
    "folders_router",
    "items_router",
    "todos_router",
    "templates_router",
]
