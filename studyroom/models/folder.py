"""Folder model: optional grouping of items inside a workspace."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, UniqueConstraint

from ..core.clock import utc_now
from ..database import Base, UTCDateTime


class Folder(Base):
    """A named group of items within one workspace.

    Listing order is ``sort_order`` with ties broken by ``position``, the
    per-workspace insertion counter.
    """

    __tablename__ = "study_folders"
    __table_args__ = (
        UniqueConstraint("workspace_id", "name", name="uq_study_folders_workspace_name"),
        Index("ix_study_folders_workspace_order", "workspace_id", "sort_order", "position"),
    )

    id = Column(String(50), primary_key=True)  # fd-{uuid}
    workspace_id = Column(
        String(50), ForeignKey("study_workspaces.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(60), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
