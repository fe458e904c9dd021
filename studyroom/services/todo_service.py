"""Todo operations. A todo always shares its workspace with its parent item."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import resolve_now
from ..database import atomic
from ..exceptions import ValidationError
from ..models.enums import FocusKind
from ..models.todo import StudyTodo
from ..repositories.item_repository import ItemRepository
from ..repositories.todo_repository import TodoRepository
from ..repositories.workspace_repository import WorkspaceRepository
from ..schemas.todo import TodoCreate, TodoUpdate
from .gamification import TODO_DONE_XP, apply_activity

logger = logging.getLogger(__name__)


class TodoService:
    """Owner-scoped todo operations.

    Public methods:
        create_todo
        list_todos   -- open first, then due date (none last), sort_order, newest
        update_todo  -- completing a todo awards XP once per false -> true flip
        delete_todo  -- also clears focus entries for the todo
    """

    def __init__(self, db: Session):
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)
        self.item_repo = ItemRepository(db)
        self.todo_repo = TodoRepository(db)

    def create_todo(
        self,
        owner_id: str,
        data: TodoCreate,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> StudyTodo:
        now = resolve_now(now)

        with atomic(self.db, "create_todo", commit=commit):
            workspace = self.workspace_repo.get_owned(owner_id, data.workspace_id)
            item_id = self._check_item(workspace.id, data.item_id)

            todo = self.todo_repo.add(StudyTodo(
                id=self.todo_repo.new_id(),
                workspace_id=workspace.id,
                item_id=item_id,
                text=data.text,
                kind=data.kind,
                priority=data.priority,
                due_at=data.due_at,
                sort_order=data.sort_order,
                done=False,
                created_at=now,
                updated_at=now,
            ))

        logger.info(
            "Todo created",
            extra={"todo_id": todo.id, "workspace_id": todo.workspace_id},
        )
        return todo

    def list_todos(
        self, owner_id: str, workspace_id: str, item_id: Optional[str] = None
    ) -> List[StudyTodo]:
        workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
        return self.todo_repo.list_by_workspace(workspace.id, item_id=item_id)

    def update_todo(
        self,
        owner_id: str,
        todo_id: str,
        data: TodoUpdate,
        now: Optional[datetime] = None,
    ) -> StudyTodo:
        """Apply only the fields present in *data*.

        Marking an open todo done awards XP and advances the streak; setting
        done on a todo that is already done changes nothing.
        """
        now = resolve_now(now)
        patch = data.model_dump(exclude_unset=True)
        for field in ("done", "kind", "priority", "sort_order"):
            if field in patch and patch[field] is None:
                raise ValidationError(f"{field} cannot be null", field=field)

        with atomic(self.db, "update_todo"):
            todo = self.todo_repo.get_owned(owner_id, todo_id)
            completed = patch.get("done") is True and not todo.done

            if "item_id" in patch:
                todo.item_id = self._check_item(todo.workspace_id, patch.pop("item_id"))
            for field, value in patch.items():
                setattr(todo, field, value)
            todo.updated_at = now

            if completed:
                workspace = self.workspace_repo.get_owned(owner_id, todo.workspace_id)
                apply_activity(workspace, TODO_DONE_XP, now)
                workspace.updated_at = now

        if completed:
            logger.info(
                "Todo completed",
                extra={"todo_id": todo_id, "xp_awarded": TODO_DONE_XP},
            )
        return todo

    def delete_todo(self, owner_id: str, todo_id: str) -> None:
        with atomic(self.db, "delete_todo"):
            todo = self.todo_repo.get_owned(owner_id, todo_id)
            self.workspace_repo.remove_focus_refs(FocusKind.TODO, [todo.id])
            self.todo_repo.delete(todo)

        logger.info("Todo deleted", extra={"todo_id": todo_id})

    def _check_item(self, workspace_id: str, item_id: Optional[str]) -> Optional[str]:
        """Return *item_id* if it names an item in *workspace_id*."""
        if not item_id:
            return None
        if self.item_repo.find_in_workspace(workspace_id, item_id) is None:
            raise ValidationError("Item does not belong to this workspace", field="item_id")
        return item_id
