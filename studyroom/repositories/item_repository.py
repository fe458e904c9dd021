"""Repository for study items."""

from typing import List, Optional

from sqlalchemy.orm import Query

from ..exceptions import ItemNotFoundError
from ..models.enums import ItemStatus
from ..models.item import StudyItem
from ..models.workspace import Workspace
from .base import BaseRepository


class ItemRepository(BaseRepository[StudyItem]):
    """Data access layer for items, scoped through the owning workspace."""

    model_class = StudyItem
    id_prefix = "it"
    not_found_error = ItemNotFoundError

    def _owned_query(self, owner_id: str) -> Query:
        return (
            self.db.query(StudyItem)
            .join(Workspace, Workspace.id == StudyItem.workspace_id)
            .filter(Workspace.owner_id == owner_id)
        )

    def list_by_workspace(
        self,
        workspace_id: str,
        status: Optional[ItemStatus] = None,
        folder_id: Optional[str] = None,
    ) -> List[StudyItem]:
        query = self.db.query(StudyItem).filter(StudyItem.workspace_id == workspace_id)
        if status is not None:
            query = query.filter(StudyItem.status == status)
        if folder_id:
            query = query.filter(StudyItem.folder_id == folder_id)
        return query.order_by(
            StudyItem.pinned.desc(),
            StudyItem.sort_order,
            StudyItem.updated_at.desc(),
            StudyItem.created_at.desc(),
        ).all()

    def list_review_enabled(self, workspace_id: str) -> List[StudyItem]:
        return (
            self.db.query(StudyItem)
            .filter(
                StudyItem.workspace_id == workspace_id,
                StudyItem.review_enabled.is_(True),
            )
            .all()
        )

    def list_by_folder(self, folder_id: str) -> List[StudyItem]:
        return self.db.query(StudyItem).filter(StudyItem.folder_id == folder_id).all()

    def count_by_workspace(self, workspace_id: str) -> int:
        return self.db.query(StudyItem).filter(StudyItem.workspace_id == workspace_id).count()

    def find_in_workspace(self, workspace_id: str, item_id: str) -> Optional[StudyItem]:
        return (
            self.db.query(StudyItem)
            .filter(StudyItem.workspace_id == workspace_id, StudyItem.id == item_id)
            .first()
        )

    def delete_by_workspace(self, workspace_id: str) -> int:
        count = (
            self.db.query(StudyItem)
            .filter(StudyItem.workspace_id == workspace_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return count
