"""Deep module for folders and items inside a workspace.

Every write first proves the workspace belongs to the caller, then that any
referenced folder lives in the same workspace, then the type-specific item
rules. Callers never check parentage themselves.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.clock import resolve_now
from ..database import atomic
from ..exceptions import (
    DocumentNotFoundError,
    LimitExceededError,
    ResourceNotFoundError,
    ValidationError,
)
from ..models.enums import FocusKind, ItemStatus, ItemType
from ..models.folder import Folder
from ..models.item import StudyItem
from ..models.workspace import Workspace
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..repositories.todo_repository import TodoRepository
from ..repositories.workspace_repository import WorkspaceRepository
from ..schemas.folder import FolderCreate, FolderUpdate
from ..schemas.item import ItemCreate, ItemUpdate
from .catalogs import (
    DocumentCatalog,
    ResourceCatalog,
    get_document_catalog,
    get_resource_catalog,
)

MAX_FOLDERS_PER_WORKSPACE = 100
MAX_ITEMS_PER_WORKSPACE = 2000

# Patch fields that may be sent as null: clearing a folder, url or note.
_NULLABLE_ITEM_FIELDS = {"folder_id", "url", "note"}

logger = logging.getLogger(__name__)


class HierarchyService:
    """Folder and item operations behind an owner-scoped interface.

    Public methods:
        create_folder / list_folders / update_folder / delete_folder
        create_item   -- ownership, folder parentage, type rules, catalog lookup
        list_items    -- pinned first, then sort_order, then most recently updated
        get_item
        update_item   -- partial patch; handles review toggling
        cycle_mastery -- none -> understand -> implement -> teach -> none
        delete_item   -- cascades to todos and focus entries
    """

    def __init__(
        self,
        db: Session,
        resource_catalog: Optional[ResourceCatalog] = None,
        document_catalog: Optional[DocumentCatalog] = None,
    ):
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)
        self.todo_repo = TodoRepository(db)
        self.resource_catalog = resource_catalog or get_resource_catalog()
        self.document_catalog = document_catalog or get_document_catalog()

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def create_folder(
        self,
        owner_id: str,
        data: FolderCreate,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> Folder:
        now = resolve_now(now)

        with atomic(self.db, "create_folder", commit=commit):
            workspace = self.workspace_repo.get_owned(owner_id, data.workspace_id)
            if self.folder_repo.count_by_workspace(workspace.id) >= MAX_FOLDERS_PER_WORKSPACE:
                raise LimitExceededError("folders", MAX_FOLDERS_PER_WORKSPACE)
            self._check_folder_name(workspace.id, data.name)

            folder = self.folder_repo.add(Folder(
                id=self.folder_repo.new_id(),
                workspace_id=workspace.id,
                name=data.name,
                sort_order=data.sort_order,
                position=self.folder_repo.next_position(workspace.id),
                created_at=now,
                updated_at=now,
            ))

        logger.info(
            "Folder created",
            extra={"folder_id": folder.id, "workspace_id": folder.workspace_id},
        )
        return folder

    def list_folders(self, owner_id: str, workspace_id: str) -> List[Folder]:
        workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
        return self.folder_repo.list_by_workspace(workspace.id)

    def update_folder(
        self,
        owner_id: str,
        folder_id: str,
        data: FolderUpdate,
        now: Optional[datetime] = None,
    ) -> Folder:
        now = resolve_now(now)

        with atomic(self.db, "update_folder"):
            folder = self.folder_repo.get_owned(owner_id, folder_id)
            if data.name is not None and data.name != folder.name:
                self._check_folder_name(folder.workspace_id, data.name)
                folder.name = data.name
            if data.sort_order is not None:
                folder.sort_order = data.sort_order
            folder.updated_at = now

        return folder

    def delete_folder(self, owner_id: str, folder_id: str, now: Optional[datetime] = None) -> int:
        """Delete a folder. Its items stay in the workspace without a folder.

        Returns the number of items that were moved out.
        """
        now = resolve_now(now)

        with atomic(self.db, "delete_folder"):
            folder = self.folder_repo.get_owned(owner_id, folder_id)
            items = self.item_repo.list_by_folder(folder.id)
            for item in items:
                item.folder_id = None
                item.updated_at = now
            self.folder_repo.delete(folder)

        logger.info(
            "Folder deleted",
            extra={"folder_id": folder_id, "detached_items": len(items)},
        )
        return len(items)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def create_item(
        self,
        owner_id: str,
        data: ItemCreate,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> StudyItem:
        """Create an item after ownership, parentage and content checks."""
        now = resolve_now(now)

        with atomic(self.db, "create_item", commit=commit):
            workspace = self.workspace_repo.get_owned(owner_id, data.workspace_id)
            folder_id = self._check_folder(owner_id, workspace, data.folder_id)
            if self.item_repo.count_by_workspace(workspace.id) >= MAX_ITEMS_PER_WORKSPACE:
                raise LimitExceededError("items", MAX_ITEMS_PER_WORKSPACE)

            self._check_content(data.type, url=data.url, note=data.note)
            title = self._resolve_title(
                owner_id,
                data.type,
                title=data.title,
                resource_id=data.resource_id,
                document_id=data.document_id,
            )

            item = StudyItem(
                id=self.item_repo.new_id(),
                workspace_id=workspace.id,
                folder_id=folder_id,
                type=data.type,
                title=title,
                url=data.url,
                note=data.note,
                tags=data.tags,
                status=data.status,
                progress_percent=data.progress_percent,
                pinned=data.pinned,
                mastery=data.mastery,
                sort_order=data.sort_order,
                review_enabled=False,
                review_stage=0,
                resource_id=data.resource_id if data.type == ItemType.RESOURCE else None,
                document_id=data.document_id if data.type == ItemType.DOCUMENT else None,
                last_touched_at=now,
                created_at=now,
                updated_at=now,
            )
            if item.status == ItemStatus.COMPLETED:
                item.progress_percent = 100
            if data.review_enabled:
                self._enable_review(item, now)
            self.item_repo.add(item)

        logger.info(
            "Item created",
            extra={"item_id": item.id, "workspace_id": item.workspace_id, "type": item.type.value},
        )
        return item

    def list_items(
        self,
        owner_id: str,
        workspace_id: str,
        status: Optional[ItemStatus] = None,
        folder_id: Optional[str] = None,
    ) -> List[StudyItem]:
        workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
        return self.item_repo.list_by_workspace(workspace.id, status=status, folder_id=folder_id)

    def get_item(self, owner_id: str, item_id: str) -> StudyItem:
        return self.item_repo.get_owned(owner_id, item_id)

    def update_item(
        self,
        owner_id: str,
        item_id: str,
        data: ItemUpdate,
        now: Optional[datetime] = None,
    ) -> StudyItem:
        """Apply only the fields present in *data*.

        Enabling review restarts the schedule at stage 0, due immediately.
        Disabling it clears the due date but keeps the stage and the last
        review time. Resource and document references are not looked up
        again; a blank title keeps the stored one.
        """
        now = resolve_now(now)
        patch: Dict[str, Any] = data.model_dump(exclude_unset=True)

        with atomic(self.db, "update_item"):
            item = self.item_repo.get_owned(owner_id, item_id)
            for field, value in patch.items():
                if value is None and field not in _NULLABLE_ITEM_FIELDS:
                    raise ValidationError(f"{field} cannot be null", field=field)
            if "title" in patch and not patch["title"]:
                patch.pop("title")

            if "folder_id" in patch:
                workspace = self.workspace_repo.get_owned(owner_id, item.workspace_id)
                item.folder_id = self._check_folder(owner_id, workspace, patch.pop("folder_id"))

            review_enabled = patch.pop("review_enabled", None)
            for field, value in patch.items():
                if field in ("url", "note") and value == "":
                    value = None
                setattr(item, field, value)

            self._check_content(item.type, url=item.url, note=item.note)

            if patch.get("status") == ItemStatus.COMPLETED:
                item.progress_percent = 100

            if review_enabled is True and not item.review_enabled:
                self._enable_review(item, now)
            elif review_enabled is False and item.review_enabled:
                item.review_enabled = False
                item.next_review_at = None

            item.last_touched_at = now
            item.updated_at = now

        return item

    def cycle_mastery(self, owner_id: str, item_id: str, now: Optional[datetime] = None) -> StudyItem:
        now = resolve_now(now)

        with atomic(self.db, "cycle_mastery"):
            item = self.item_repo.get_owned(owner_id, item_id)
            item.mastery = item.mastery.next()
            item.last_touched_at = now
            item.updated_at = now

        return item

    def delete_item(self, owner_id: str, item_id: str) -> None:
        """Delete an item with its todos and every focus entry pointing at either."""
        with atomic(self.db, "delete_item"):
            item = self.item_repo.get_owned(owner_id, item_id)
            todos = self.todo_repo.list_by_item(item.id)

            self.workspace_repo.remove_focus_refs(FocusKind.TODO, [t.id for t in todos])
            self.workspace_repo.remove_focus_refs(FocusKind.ITEM, [item.id])
            for todo in todos:
                self.db.delete(todo)
            self.item_repo.delete(item)

        logger.info(
            "Item deleted",
            extra={"item_id": item_id, "deleted_todos": len(todos)},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_folder_name(self, workspace_id: str, name: str) -> None:
        if self.folder_repo.find_by_name(workspace_id, name) is not None:
            raise ValidationError(f"Folder '{name}' already exists in this workspace", field="name")

    def _check_folder(
        self, owner_id: str, workspace: Workspace, folder_id: Optional[str]
    ) -> Optional[str]:
        """Return *folder_id* if it names a folder in *workspace*."""
        if not folder_id:
            return None
        folder = self.folder_repo.get_owned_optional(owner_id, folder_id)
        if folder is None or folder.workspace_id != workspace.id:
            raise ValidationError("Folder does not belong to this workspace", field="folder_id")
        return folder.id

    @staticmethod
    def _check_content(item_type: ItemType, url: Optional[str], note: Optional[str]) -> None:
        """Enforce the url and note rules of link and note items."""
        if item_type == ItemType.LINK:
            if not url:
                raise ValidationError("Link items require a url", field="url")
            if not url.lower().startswith(("http://", "https://")):
                raise ValidationError("Url must start with http:// or https://", field="url")

        elif item_type == ItemType.NOTE:
            if not note:
                raise ValidationError("Note items require note text", field="note")

    def _resolve_title(
        self,
        owner_id: str,
        item_type: ItemType,
        title: str,
        resource_id: Optional[str],
        document_id: Optional[str],
    ) -> str:
        """Resolve a new item's external reference. Returns the effective title."""
        title = title or ""

        if item_type == ItemType.RESOURCE:
            if not resource_id:
                raise ValidationError("Resource items require a resource_id", field="resource_id")
            resource = self.resource_catalog.get(resource_id)
            if resource is None:
                raise ResourceNotFoundError(resource_id)
            title = title or resource.title

        elif item_type == ItemType.DOCUMENT:
            if not document_id:
                raise ValidationError("Document items require a document_id", field="document_id")
            document = self.document_catalog.get(owner_id, document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            title = title or document.title

        return title[:160]

    @staticmethod
    def _enable_review(item: StudyItem, now: datetime) -> None:
        item.review_enabled = True
        item.review_stage = 0
        item.next_review_at = now
