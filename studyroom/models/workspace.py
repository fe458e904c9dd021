"""Workspace model and its daily focus entries."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.clock import utc_now
from ..database import Base, UTCDateTime
from .enums import FocusKind, WorkspaceMode, enum_column_type


def derive_level(xp: int) -> int:
    """Level is a pure function of XP: one level per 100 XP, starting at 1."""
    return max(0, int(xp or 0)) // 100 + 1


class Workspace(Base):
    """Top-level container for one study topic, owned by exactly one user.

    ``level`` is not a column: it is derived from ``xp`` on every read so the
    two can never drift apart.
    """

    __tablename__ = "study_workspaces"
    __table_args__ = (
        Index("ix_study_workspaces_owner_updated", "owner_id", "updated_at"),
    )

    id = Column(String(50), primary_key=True)  # ws-{uuid}
    owner_id = Column(String(255), nullable=False, index=True)

    title = Column(String(80), nullable=False)
    goal = Column(Text, nullable=True)
    emoji = Column(String(10), nullable=True)
    mode = Column(enum_column_type(WorkspaceMode), nullable=False, default=WorkspaceMode.BUILD)

    # Gamified stats
    xp = Column(Integer, nullable=False, default=0)
    streak_count = Column(Integer, nullable=False, default=0)
    last_activity_date_key = Column(String(10), nullable=True)  # UTC YYYY-MM-DD

    # "Next 3" focus list, valid only for focus_date_key
    focus_date_key = Column(String(10), nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    focus_entries = relationship(
        "FocusEntry",
        back_populates="workspace",
        order_by="FocusEntry.position",
        cascade="all, delete-orphan",
    )

    @property
    def level(self) -> int:
        return derive_level(self.xp)


class FocusEntry(Base):
    """One slot of a workspace's daily focus list.

    ``ref_id`` points at an item or todo by id only; existence is validated
    when the entry is written and entries are removed when the target is.
    """

    __tablename__ = "study_focus_entries"
    __table_args__ = (
        UniqueConstraint("workspace_id", "kind", "ref_id", name="uq_focus_workspace_ref"),
        Index("ix_study_focus_ref", "kind", "ref_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    workspace_id = Column(
        String(50), ForeignKey("study_workspaces.id", ondelete="CASCADE"), nullable=False
    )
    kind = Column(enum_column_type(FocusKind), nullable=False)
    ref_id = Column(String(50), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    added_at = Column(UTCDateTime, nullable=False)

    workspace = relationship("Workspace", back_populates="focus_entries")
