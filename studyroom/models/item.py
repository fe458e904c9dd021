"""Study item model: a single piece of study material."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Index, Integer, String, Text

from ..core.clock import utc_now
from ..database import Base, UTCDateTime
from .enums import ItemStatus, ItemType, Mastery, enum_column_type


class StudyItem(Base):
    """Resource, document, link or note saved to a workspace.

    ``resource_id`` / ``document_id`` are opaque references into external
    catalogs; nothing in this service joins against them.
    """

    __tablename__ = "study_items"
    __table_args__ = (
        Index("ix_study_items_workspace_status", "workspace_id", "status"),
        Index("ix_study_items_workspace_folder", "workspace_id", "folder_id"),
        Index("ix_study_items_review", "workspace_id", "review_enabled", "next_review_at"),
    )

    id = Column(String(50), primary_key=True)  # it-{uuid}
    workspace_id = Column(
        String(50), ForeignKey("study_workspaces.id", ondelete="CASCADE"), nullable=False
    )
    folder_id = Column(
        String(50), ForeignKey("study_folders.id", ondelete="SET NULL"), nullable=True
    )

    type = Column(enum_column_type(ItemType), nullable=False)
    title = Column(String(160), nullable=False, default="")
    url = Column(String(1200), nullable=True)
    note = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    status = Column(enum_column_type(ItemStatus), nullable=False, default=ItemStatus.SAVED)
    progress_percent = Column(Integer, nullable=False, default=0)
    pinned = Column(Boolean, nullable=False, default=False)
    mastery = Column(enum_column_type(Mastery), nullable=False, default=Mastery.NONE)
    sort_order = Column(Integer, nullable=False, default=0)

    # Spaced repetition
    review_enabled = Column(Boolean, nullable=False, default=False)
    review_stage = Column(Integer, nullable=False, default=0)
    next_review_at = Column(UTCDateTime, nullable=True)
    last_reviewed_at = Column(UTCDateTime, nullable=True)

    last_touched_at = Column(UTCDateTime, nullable=False, default=utc_now)

    # External catalog references
    resource_id = Column(String(100), nullable=True)
    document_id = Column(String(100), nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
