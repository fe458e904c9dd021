"""Folder schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _validate_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Folder name cannot be empty")
    return v


class FolderCreate(BaseModel):
    """Create a folder inside a workspace."""
    workspace_id: str
    name: str = Field(..., max_length=60)
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)


class FolderUpdate(BaseModel):
    """Rename or reorder a folder."""
    name: Optional[str] = Field(None, max_length=60)
    sort_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _validate_name(v)


class FolderResponse(BaseModel):
    """Folder in API responses."""
    id: str
    workspace_id: str
    name: str
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
