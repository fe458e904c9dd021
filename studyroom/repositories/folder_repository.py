"""Repository for study folders."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder
from ..models.workspace import Workspace
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for folders, scoped through the owning workspace."""

    model_class = Folder
    id_prefix = "fd"
    not_found_error = FolderNotFoundError

    def _owned_query(self, owner_id: str) -> Query:
        return (
            self.db.query(Folder)
            .join(Workspace, Workspace.id == Folder.workspace_id)
            .filter(Workspace.owner_id == owner_id)
        )

    def list_by_workspace(self, workspace_id: str) -> List[Folder]:
        return (
            self.db.query(Folder)
            .filter(Folder.workspace_id == workspace_id)
            .order_by(Folder.sort_order, Folder.position)
            .all()
        )

    def count_by_workspace(self, workspace_id: str) -> int:
        return self.db.query(Folder).filter(Folder.workspace_id == workspace_id).count()

    def next_position(self, workspace_id: str) -> int:
        current = (
            self.db.query(func.max(Folder.position))
            .filter(Folder.workspace_id == workspace_id)
            .scalar()
        )
        return 0 if current is None else current + 1

    def find_by_name(self, workspace_id: str, name: str) -> Optional[Folder]:
        return (
            self.db.query(Folder)
            .filter(Folder.workspace_id == workspace_id, Folder.name == name)
            .first()
        )

    def delete_by_workspace(self, workspace_id: str) -> int:
        count = (
            self.db.query(Folder)
            .filter(Folder.workspace_id == workspace_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return count
