"""Database models."""

from .workspace import Workspace, FocusEntry, derive_level
from .folder import Folder
from .item import StudyItem
from .todo import StudyTodo

__all__ = [
    "Workspace", "FocusEntry", "derive_level",
    "Folder", "StudyItem", "StudyTodo",
]
