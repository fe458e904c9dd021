"""Repository for study todos."""

from typing import List, Optional

from sqlalchemy.orm import Query

from ..exceptions import TodoNotFoundError
from ..models.todo import StudyTodo
from ..models.workspace import Workspace
from .base import BaseRepository


class TodoRepository(BaseRepository[StudyTodo]):
    """Data access layer for todos, scoped through the owning workspace."""

    model_class = StudyTodo
    id_prefix = "td"
    not_found_error = TodoNotFoundError

    def _owned_query(self, owner_id: str) -> Query:
        return (
            self.db.query(StudyTodo)
            .join(Workspace, Workspace.id == StudyTodo.workspace_id)
            .filter(Workspace.owner_id == owner_id)
        )

    def list_by_workspace(self, workspace_id: str, item_id: Optional[str] = None) -> List[StudyTodo]:
        query = self.db.query(StudyTodo).filter(StudyTodo.workspace_id == workspace_id)
        if item_id:
            query = query.filter(StudyTodo.item_id == item_id)
        return query.order_by(
            StudyTodo.done,
            StudyTodo.due_at.is_(None),
            StudyTodo.due_at,
            StudyTodo.sort_order,
            StudyTodo.created_at.desc(),
        ).all()

    def list_by_item(self, item_id: str) -> List[StudyTodo]:
        return self.db.query(StudyTodo).filter(StudyTodo.item_id == item_id).all()

    def find_in_workspace(self, workspace_id: str, todo_id: str) -> Optional[StudyTodo]:
        return (
            self.db.query(StudyTodo)
            .filter(StudyTodo.workspace_id == workspace_id, StudyTodo.id == todo_id)
            .first()
        )

    def delete_by_workspace(self, workspace_id: str) -> int:
        count = (
            self.db.query(StudyTodo)
            .filter(StudyTodo.workspace_id == workspace_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return count
