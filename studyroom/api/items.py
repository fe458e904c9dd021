"""API routes for study items, reviews and mastery."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..models.enums import ItemStatus
from ..schemas.item import ItemCreate, ItemResponse, ItemUpdate
from ..services.catalogs import (
    DocumentCatalog,
    ResourceCatalog,
    get_document_catalog,
    get_resource_catalog,
)
from ..services.hierarchy_service import HierarchyService
from ..services.review_scheduler import ReviewScheduler

router = APIRouter(prefix="/api/study/items", tags=["items"])


def get_hierarchy_service(
    db: Session = Depends(get_db),
    resources: ResourceCatalog = Depends(get_resource_catalog),
    documents: DocumentCatalog = Depends(get_document_catalog),
) -> HierarchyService:
    return HierarchyService(db, resources, documents)


@router.get("", response_model=List[ItemResponse])
def list_items(
    workspace_id: str = Query(..., description="Workspace to list items of"),
    status: Optional[ItemStatus] = Query(None),
    folder_id: Optional[str] = Query(None),
    service: HierarchyService = Depends(get_hierarchy_service),
    owner: OwnerContext = Depends(require_owner),
):
    """List items: pinned first, then sort_order, then most recently updated."""
    return service.list_items(owner.owner_id, workspace_id, status=status, folder_id=folder_id)


@router.post("", response_model=ItemResponse, status_code=201)
def create_item(
    data: ItemCreate,
    service: HierarchyService = Depends(get_hierarchy_service),
    owner: OwnerContext = Depends(require_owner),
):
    return service.create_item(owner.owner_id, data)


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: str,
    data: ItemUpdate,
    service: HierarchyService = Depends(get_hierarchy_service),
    owner: OwnerContext = Depends(require_owner),
):
    """Update fields present in the body. Toggling review restarts or pauses the schedule."""
    return service.update_item(owner.owner_id, item_id, data)


@router.delete("/{item_id}", status_code=204)
def delete_item(
    item_id: str,
    service: HierarchyService = Depends(get_hierarchy_service),
    owner: OwnerContext = Depends(require_owner),
):
    """Delete an item, its todos and any focus entries pointing at them."""
    service.delete_item(owner.owner_id, item_id)


@router.post("/{item_id}/review", response_model=ItemResponse)
def record_review(
    item_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return ReviewScheduler(db).record_review(owner.owner_id, item_id)


@router.post("/{item_id}/mastery/cycle", response_model=ItemResponse)
def cycle_mastery(
    item_id: str,
    service: HierarchyService = Depends(get_hierarchy_service),
    owner: OwnerContext = Depends(require_owner),
):
    return service.cycle_mastery(owner.owner_id, item_id)
