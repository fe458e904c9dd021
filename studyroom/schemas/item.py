"""Study item schemas.

Type-specific rules (a link needs an http(s) url, a note needs text, ...)
depend on the stored item as well as the patch, so they are enforced by
HierarchyService rather than here.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.enums import ItemStatus, ItemType, Mastery

MAX_TAGS = 20


def normalize_tags(tags: List[str]) -> List[str]:
    """Lowercase, trim, drop blanks and duplicates (first occurrence wins)."""
    seen: List[str] = []
    for tag in tags:
        tag = str(tag).strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    if len(seen) > MAX_TAGS:
        raise ValueError(f"Too many tags (max {MAX_TAGS})")
    return seen


class ItemFields(BaseModel):
    """Content fields shared by item creation and template seeds."""
    type: ItemType
    title: str = Field("", max_length=160)
    url: Optional[str] = Field(None, max_length=1200)
    note: Optional[str] = Field(None, max_length=8000)
    tags: List[str] = []
    status: ItemStatus = ItemStatus.SAVED
    progress_percent: int = Field(0, ge=0, le=100)
    pinned: bool = False
    mastery: Mastery = Mastery.NONE
    review_enabled: bool = False
    sort_order: int = 0
    resource_id: Optional[str] = Field(None, max_length=100)
    document_id: Optional[str] = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("url", "note")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return normalize_tags(v)


class ItemCreate(ItemFields):
    """Create an item in a workspace, optionally inside a folder."""
    workspace_id: str
    folder_id: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "workspace_id": "ws-1f0c",
                    "folder_id": None,
                    "type": "link",
                    "title": "Express Guide",
                    "url": "https://expressjs.com/",
                    "tags": ["docs"],
                    "review_enabled": True,
                }
            ]
        }
    }


class ItemUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied.

    ``folder_id: null`` moves the item out of its folder.
    """
    folder_id: Optional[str] = None
    title: Optional[str] = Field(None, max_length=160)
    url: Optional[str] = Field(None, max_length=1200)
    note: Optional[str] = Field(None, max_length=8000)
    tags: Optional[List[str]] = None
    status: Optional[ItemStatus] = None
    progress_percent: Optional[int] = Field(None, ge=0, le=100)
    pinned: Optional[bool] = None
    mastery: Optional[Mastery] = None
    review_enabled: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("title", "url", "note")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return normalize_tags(v) if v is not None else None


class ItemResponse(BaseModel):
    """Item in API responses."""
    id: str
    workspace_id: str
    folder_id: Optional[str] = None
    type: ItemType
    title: str
    url: Optional[str] = None
    note: Optional[str] = None
    tags: List[str] = []
    status: ItemStatus
    progress_percent: int
    pinned: bool
    mastery: Mastery
    sort_order: int = 0
    review_enabled: bool
    review_stage: int
    next_review_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    last_touched_at: datetime
    resource_id: Optional[str] = None
    document_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
