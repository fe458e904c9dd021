"""API routes for folders."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..schemas.folder import FolderCreate, FolderResponse, FolderUpdate
from ..services.hierarchy_service import HierarchyService

router = APIRouter(prefix="/api/study/folders", tags=["folders"])


@router.get("", response_model=List[FolderResponse])
def list_folders(
    workspace_id: str = Query(..., description="Workspace to list folders of"),
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """List folders ordered by sort_order, then creation order."""
    return HierarchyService(db).list_folders(owner.owner_id, workspace_id)


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return HierarchyService(db).create_folder(owner.owner_id, data)


@router.patch("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    return HierarchyService(db).update_folder(owner.owner_id, folder_id, data)


@router.delete("/{folder_id}", status_code=204)
def delete_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    owner: OwnerContext = Depends(require_owner),
):
    """Delete a folder. Its items remain in the workspace without a folder."""
    HierarchyService(db).delete_folder(owner.owner_id, folder_id)
