"""Instantiate curated templates into fully populated workspaces.

The workspace, its folders, items and todos are created through the regular
services with ``commit=False`` inside a single ``atomic()`` unit, so any
failure (workspace cap, invalid seed content) leaves nothing behind.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..core.clock import resolve_now
from ..database import atomic
from ..exceptions import ValidationError
from ..models.workspace import Workspace
from ..schemas.folder import FolderCreate
from ..schemas.item import ItemCreate
from ..schemas.template import (
    SeededCounts,
    TemplateInstantiateRequest,
    TemplateSummary,
)
from ..schemas.todo import TodoCreate
from ..schemas.workspace import WorkspaceCreate
from .catalogs import DocumentCatalog, ResourceCatalog
from .hierarchy_service import HierarchyService
from .template_catalog import TemplateCatalog, get_template_catalog
from .todo_service import TodoService
from .workspace_service import WorkspaceService

logger = logging.getLogger(__name__)


def _seed_error(what: str, error: PydanticValidationError) -> ValidationError:
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or None
    return ValidationError(f"Invalid template {what}: {first.get('msg')}", field=field)


class TemplateService:
    """Template listing and all-or-nothing instantiation.

    Public methods:
        list_templates
        instantiate_from_template -- returns (workspace, seeded counts)
    """

    def __init__(
        self,
        db: Session,
        catalog: Optional[TemplateCatalog] = None,
        resource_catalog: Optional[ResourceCatalog] = None,
        document_catalog: Optional[DocumentCatalog] = None,
    ):
        self.db = db
        self.catalog = catalog if catalog is not None else get_template_catalog()
        self.workspaces = WorkspaceService(db)
        self.hierarchy = HierarchyService(db, resource_catalog, document_catalog)
        self.todos = TodoService(db)

    def list_templates(self) -> List[TemplateSummary]:
        return self.catalog.summaries()

    def instantiate_from_template(
        self,
        owner_id: str,
        request: TemplateInstantiateRequest,
        now: Optional[datetime] = None,
    ) -> Tuple[Workspace, SeededCounts]:
        """Create a workspace from a template, with optional overrides.

        Folders keep the template order as ``sort_order``; items go into the
        first folder and the first item is pinned; todos are workspace-level.
        """
        now = resolve_now(now)
        template = self.catalog.get(request.template_id)
        seeded = SeededCounts()

        with atomic(self.db, "instantiate_template"):
            try:
                workspace_data = WorkspaceCreate(
                    title=request.title or template.title,
                    goal=request.goal if request.goal is not None else template.goal,
                    emoji=request.emoji if request.emoji is not None else template.emoji,
                    mode=request.mode or template.mode,
                )
            except PydanticValidationError as e:
                raise _seed_error("workspace", e) from e
            workspace = self.workspaces.create_workspace(owner_id, workspace_data, now, commit=False)

            first_folder_id = None
            for index, name in enumerate(template.folders):
                try:
                    folder_data = FolderCreate(workspace_id=workspace.id, name=name, sort_order=index)
                except PydanticValidationError as e:
                    raise _seed_error("folder", e) from e
                folder = self.hierarchy.create_folder(owner_id, folder_data, now, commit=False)
                if first_folder_id is None:
                    first_folder_id = folder.id
                seeded.folders += 1

            for index, seed in enumerate(template.items):
                try:
                    item_data = ItemCreate(
                        workspace_id=workspace.id,
                        folder_id=first_folder_id,
                        pinned=index == 0,
                        sort_order=index,
                        **seed.model_dump(),
                    )
                except PydanticValidationError as e:
                    raise _seed_error("item", e) from e
                self.hierarchy.create_item(owner_id, item_data, now, commit=False)
                seeded.items += 1

            for index, seed in enumerate(template.todos):
                try:
                    todo_data = TodoCreate(
                        workspace_id=workspace.id,
                        sort_order=index,
                        **seed.model_dump(),
                    )
                except PydanticValidationError as e:
                    raise _seed_error("todo", e) from e
                self.todos.create_todo(owner_id, todo_data, now, commit=False)
                seeded.todos += 1

        logger.info(
            "Workspace created from template",
            extra={
                "workspace_id": workspace.id,
                "template_id": template.id,
                "seeded_folders": seeded.folders,
                "seeded_items": seeded.items,
                "seeded_todos": seeded.todos,
            },
        )
        return workspace, seeded
