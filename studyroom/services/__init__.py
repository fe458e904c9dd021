"""Business logic services."""

from .workspace_service import WorkspaceService
from .hierarchy_service import HierarchyService
from .todo_service import TodoService
from .focus_service import FocusService
from .review_scheduler import ReviewScheduler
from .template_service import TemplateService

__all__ = [
    "WorkspaceService",
    "HierarchyService",
    "TodoService",
    "FocusService",
    "ReviewScheduler",
    "TemplateService",
]
