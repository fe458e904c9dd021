"""Data access repositories."""

from .base import BaseRepository, generate_id
from .workspace_repository import WorkspaceRepository
from .folder_repository import FolderRepository
from .item_repository import ItemRepository
from .todo_repository import TodoRepository

__all__ = [
    "BaseRepository",
    "generate_id",
    "WorkspaceRepository",
    "FolderRepository",
    "ItemRepository",
    "TodoRepository",
]
