"""Workspace lifecycle: creation under the per-owner cap, listing with
auto-seeding, partial updates (including wholesale focus replacement) and
cascading deletion.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import resolve_now
from ..database import atomic
from ..exceptions import LimitExceededError
from ..models.workspace import Workspace
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..repositories.todo_repository import TodoRepository
from ..repositories.workspace_repository import WorkspaceRepository
from ..schemas.workspace import WorkspaceCreate, WorkspaceUpdate
from .focus_service import FocusService

MAX_WORKSPACES_PER_OWNER = 200
DEFAULT_WORKSPACE_TITLE = "My Study Room"

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Owner-scoped workspace operations.

    Public methods:
        create_workspace  -- enforces the per-owner cap
        list_workspaces   -- most recently updated first; seeds a default when empty
        get_workspace
        update_workspace  -- title / goal / emoji / mode / focus
        delete_workspace  -- removes folders, items, todos and focus in one unit
    """

    def __init__(self, db: Session):
        self.db = db
        self.workspace_repo = WorkspaceRepository(db)
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)
        self.todo_repo = TodoRepository(db)

    def create_workspace(
        self,
        owner_id: str,
        data: WorkspaceCreate,
        now: Optional[datetime] = None,
        commit: bool = True,
    ) -> Workspace:
        """Create a workspace. ``commit=False`` joins the caller's transaction."""
        now = resolve_now(now)

        with atomic(self.db, "create_workspace", commit=commit):
            if self.workspace_repo.count_by_owner(owner_id) >= MAX_WORKSPACES_PER_OWNER:
                raise LimitExceededError("workspaces", MAX_WORKSPACES_PER_OWNER)

            workspace = self.workspace_repo.add(Workspace(
                id=self.workspace_repo.new_id(),
                owner_id=owner_id,
                title=data.title,
                goal=data.goal,
                emoji=data.emoji,
                mode=data.mode,
                xp=0,
                streak_count=0,
                created_at=now,
                updated_at=now,
            ))

        logger.info(
            "Workspace created",
            extra={"workspace_id": workspace.id, "owner_id": owner_id},
        )
        return workspace

    def list_workspaces(self, owner_id: str, now: Optional[datetime] = None) -> List[Workspace]:
        workspaces = self.workspace_repo.list_by_owner(owner_id)
        if not workspaces:
            logger.info("Seeding default workspace", extra={"owner_id": owner_id})
            workspaces = [
                self.create_workspace(owner_id, WorkspaceCreate(title=DEFAULT_WORKSPACE_TITLE), now)
            ]
        return workspaces

    def get_workspace(self, owner_id: str, workspace_id: str) -> Workspace:
        return self.workspace_repo.get_owned(owner_id, workspace_id)

    def update_workspace(
        self,
        owner_id: str,
        workspace_id: str,
        data: WorkspaceUpdate,
        now: Optional[datetime] = None,
    ) -> Workspace:
        """Apply only the fields present in *data*."""
        now = resolve_now(now)
        patch = data.model_dump(exclude_unset=True, exclude={"focus"})

        with atomic(self.db, "update_workspace"):
            workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
            for field, value in patch.items():
                setattr(workspace, field, value)
            if "focus" in data.model_fields_set:
                FocusService(self.db).replace_focus(workspace, data.focus or [], now)
            workspace.updated_at = now

        return workspace

    def delete_workspace(self, owner_id: str, workspace_id: str) -> None:
        with atomic(self.db, "delete_workspace"):
            workspace = self.workspace_repo.get_owned(owner_id, workspace_id)
            todos = self.todo_repo.delete_by_workspace(workspace.id)
            items = self.item_repo.delete_by_workspace(workspace.id)
            folders = self.folder_repo.delete_by_workspace(workspace.id)
            self.workspace_repo.delete(workspace)

        logger.info(
            "Workspace deleted",
            extra={
                "workspace_id": workspace_id,
                "folders": folders,
                "items": items,
                "todos": todos,
            },
        )
