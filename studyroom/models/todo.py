"""Todo model: a task tied to a workspace and optionally to one item."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String

from ..core.clock import utc_now
from ..database import Base, UTCDateTime
from .enums import TodoKind, TodoPriority, enum_column_type


class StudyTodo(Base):
    """Workspace-level task, or an item's task when ``item_id`` is set."""

    __tablename__ = "study_todos"
    __table_args__ = (
        Index("ix_study_todos_workspace_done", "workspace_id", "done", "due_at"),
        Index("ix_study_todos_item", "item_id"),
    )

    id = Column(String(50), primary_key=True)  # td-{uuid}
    workspace_id = Column(
        String(50), ForeignKey("study_workspaces.id", ondelete="CASCADE"), nullable=False
    )
    item_id = Column(
        String(50), ForeignKey("study_items.id", ondelete="CASCADE"), nullable=True
    )

    text = Column(String(240), nullable=False)
    kind = Column(enum_column_type(TodoKind), nullable=False, default=TodoKind.TASK)
    done = Column(Boolean, nullable=False, default=False)
    due_at = Column(UTCDateTime, nullable=True)
    priority = Column(enum_column_type(TodoPriority), nullable=False, default=TodoPriority.NORMAL)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
