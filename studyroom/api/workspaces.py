"""API routes for workspaces, their daily focus list and review queue.

Every endpoint is scoped to the caller. The owner id comes from the auth
context, never from the request body; foreign ids answer 404.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..core.clock import date_key, utc_now
from ..database import get_db
from ..models.enums import FocusKind
from ..schemas.item import ItemResponse
from ..schemas.template import TemplateInstantiateRequest, TemplateInstantiateResponse
from ..schemas.workspace import (
    FocusRef,
    FocusResponse,
    WorkspaceCreate,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from ..services.catalogs import (
    DocumentCatalog,
    ResourceCatalog,
    get_document_catalog,
    get_resource_catalog,
)
from ..services.focus_service import FocusService
from ..services.review_scheduler import ReviewScheduler
from ..services.template_catalog import TemplateCatalog, get_template_catalog
from ..services.template_service import TemplateService
from ..services.workspace_service import WorkspaceService

router = APIRouter(prefix="/api/study/workspaces", tags=["workspaces"])


def _today() -> str:
    return date_key(utc_now())


@router.get("", response_model=List[WorkspaceResponse])
def list_workspaces(
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """List the caller's workspaces, most recently updated first."""
    today = _today()
    workspaces = WorkspaceService(db).list_workspaces(owner.owner_id)
    return [WorkspaceResponse.from_model(ws, today) for ws in workspaces]


@router.post("", response_model=WorkspaceResponse, status_code=201)
def create_workspace(
    data: WorkspaceCreate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    workspace = WorkspaceService(db).create_workspace(owner.owner_id, data)
    return WorkspaceResponse.from_model(workspace, _today())


@router.post("/from-template", response_model=TemplateInstantiateResponse, status_code=201)
def create_workspace_from_template(
    data: TemplateInstantiateRequest,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
    catalog: TemplateCatalog = Depends(get_template_catalog),
    resources: ResourceCatalog = Depends(get_resource_catalog),
    documents: DocumentCatalog = Depends(get_document_catalog),
):
    """Create a workspace with the template's folders, items and todos in one step."""
    service = TemplateService(db, catalog, resources, documents)
    workspace, seeded = service.instantiate_from_template(owner.owner_id, data)
    return TemplateInstantiateResponse(
        workspace=WorkspaceResponse.from_model(workspace, _today()),
        seeded=seeded,
    )


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
def get_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    workspace = WorkspaceService(db).get_workspace(owner.owner_id, workspace_id)
    return WorkspaceResponse.from_model(workspace, _today())


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
def update_workspace(
    workspace_id: str,
    data: WorkspaceUpdate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Update fields present in the body. ``focus`` replaces today's list."""
    workspace = WorkspaceService(db).update_workspace(owner.owner_id, workspace_id, data)
    return WorkspaceResponse.from_model(workspace, _today())


@router.delete("/{workspace_id}", status_code=204)
def delete_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Delete a workspace with all of its folders, items and todos."""
    WorkspaceService(db).delete_workspace(owner.owner_id, workspace_id)


# --- Focus ---

@router.get("/{workspace_id}/focus", response_model=FocusResponse)
def get_focus(
    workspace_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return FocusService(db).get_focus(owner.owner_id, workspace_id)


@router.post("/{workspace_id}/focus", response_model=FocusResponse)
def add_focus(
    workspace_id: str,
    data: FocusRef,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Add an item or todo to today's focus. At most three entries."""
    return FocusService(db).add_focus(owner.owner_id, workspace_id, data.kind, data.ref_id)


@router.delete("/{workspace_id}/focus/{kind}/{ref_id}", response_model=FocusResponse)
def remove_focus(
    workspace_id: str,
    kind: FocusKind,
    ref_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return FocusService(db).remove_focus(owner.owner_id, workspace_id, kind, ref_id)


# --- Reviews ---

@router.get("/{workspace_id}/due", response_model=List[ItemResponse])
def list_due_reviews(
    workspace_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Items due for review now, never-scheduled ones first."""
    return ReviewScheduler(db).due_now(owner.owner_id, workspace_id)
