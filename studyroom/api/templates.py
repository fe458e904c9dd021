"""API routes for curated workspace templates."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..schemas.template import TemplateSummary
from ..services.template_catalog import TemplateCatalog, get_template_catalog
from ..services.template_service import TemplateService

router = APIRouter(prefix="/api/study/templates", tags=["templates"])


@router.get("", response_model=List[TemplateSummary])
def list_templates(
    db: Session = Depends(get_db),
    catalog: TemplateCatalog = Depends(get_template_catalog),
    owner: OwnerContext = Depends(require_owner),
):
    """List available templates. Instantiate one via ``POST /workspaces/from-template``."""
    return TemplateService(db, catalog).list_templates()
